import pytest

from src.domain.Models.plate_record import PlateStatus
from src.infrastructure.Registry.simulated_registry_validator import SimulatedRegistryValidator


@pytest.fixture
def validator():
    return SimulatedRegistryValidator()


class TestSimulatedRegistryValidator:

    @pytest.mark.parametrize("digit", "789")
    def test_high_digits_are_valid(self, validator, digit):
        result = validator.validate(f"ABC-12{digit}")
        assert result.status == PlateStatus.VALID
        assert result.details == "Plaque en règle"

    @pytest.mark.parametrize("digit", "456")
    def test_mid_digits_are_expired(self, validator, digit):
        assert validator.validate(f"ABC-12{digit}").status == PlateStatus.EXPIRED

    @pytest.mark.parametrize("digit", "23")
    def test_low_digits_are_suspended(self, validator, digit):
        assert validator.validate(f"ABC-12{digit}").status == PlateStatus.SUSPENDED

    @pytest.mark.parametrize("plate", ["ABC-120", "ABC-121", "ABC-12X", "ABC", ""])
    def test_other(self, validator, plate):
        result = validator.validate(plate)
        assert result.status == PlateStatus.OTHER
        assert result.details == "Information non disponible"
        assert result.is_valid

    def test_region_by_length(self, validator):
        assert validator.validate("ABC123").region == "Québec"
        assert validator.validate("XYZ-789").region == "Ontario"

    def test_manual_entry_example(self, validator):
        result = validator.validate("XYZ-789")
        assert result.status == PlateStatus.VALID
        assert result.region == "Ontario"
