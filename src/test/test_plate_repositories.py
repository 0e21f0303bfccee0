import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from sqlalchemy.exc import OperationalError

from src.domain.Models.plate_record import DetectionType, PlateRecordInput, PlateStatus
from src.domain.exceptions import PersistenceError
from src.infrastructure.Database.session import build_engine, build_session_factory
from src.infrastructure.Storage.demo_seed import DEMO_PLATES, seed_demo_plates
from src.infrastructure.Storage.in_memory_plate_repository import InMemoryPlateRepository
from src.infrastructure.Storage.sql_plate_repository import SqlPlateRepository


def plate(number="ABC-123", status=PlateStatus.VALID, detection_type=DetectionType.AUTOMATIC):
    return PlateRecordInput(
        plate_number=number,
        region="Ontario",
        status=status,
        detection_type=detection_type,
        details="Plaque en règle",
    )


def ticking_clock(start=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
    ticks = count()
    lock = threading.Lock()

    def now():
        with lock:
            return start + timedelta(seconds=next(ticks))
    return now


@pytest.fixture
def sql_repo(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'plates.db'}")
    return SqlPlateRepository(build_session_factory(engine))


@pytest.fixture(params=["memory", "sql"])
def repo(request, tmp_path):
    if request.param == "memory":
        return InMemoryPlateRepository(clock=ticking_clock())
    return request.getfixturevalue("sql_repo")


class TestPlateRepositoryContract:

    def test_create_assigns_id_and_timestamp(self, repo):
        first = repo.create(plate("AAA-111"))
        second = repo.create(plate("BBB-222"))
        assert second.id > first.id
        assert first.detected_at.tzinfo is not None
        assert first.plate_number == "AAA-111"
        assert repo.get_by_id(first.id) == first

    def test_get_by_id_absent(self, repo):
        assert repo.get_by_id(999) is None

    def test_get_by_number_returns_most_recent(self, repo):
        repo.create(plate("DUP-111", status=PlateStatus.EXPIRED))
        latest = repo.create(plate("DUP-111", status=PlateStatus.VALID))
        repo.create(plate("OTH-999"))
        assert repo.get_by_number("DUP-111").id == latest.id
        assert repo.get_by_number("NOPE-000") is None

    @pytest.mark.parametrize("limit", [0, 1, 3, 10])
    def test_get_recent_order_and_limit(self, repo, limit):
        for i in range(5):
            repo.create(plate(f"REC-00{i}"))
        recent = repo.get_recent(limit)
        assert len(recent) == min(limit, 5)
        stamps = [(r.detected_at, r.id) for r in recent]
        assert stamps == sorted(stamps, reverse=True)
        if limit:
            assert recent[0].plate_number == "REC-004"

    def test_get_recent_negative_limit(self, repo):
        repo.create(plate())
        assert repo.get_recent(-1) == []

    def test_get_all(self, repo):
        created = {repo.create(plate(f"ALL-00{i}")).id for i in range(3)}
        assert {r.id for r in repo.get_all()} == created

    def test_partial_update(self, repo):
        record = repo.create(plate("FIX-000", detection_type=DetectionType.MANUAL))
        updated = repo.update(record.id, plate_number="FIX-001", status="suspended")
        assert updated.plate_number == "FIX-001"
        assert updated.status == PlateStatus.SUSPENDED
        assert updated.id == record.id
        assert updated.detected_at == record.detected_at
        assert updated.region == record.region
        assert repo.get_by_id(record.id) == updated

    def test_update_absent(self, repo):
        assert repo.update(42, details="x") is None

    def test_update_rejects_identity_fields(self, repo):
        record = repo.create(plate())
        with pytest.raises(ValueError):
            repo.update(record.id, id=99)
        with pytest.raises(ValueError):
            repo.update(record.id, detected_at=datetime.now(timezone.utc))


class TestInMemoryConcurrency:

    def test_parallel_creates_get_distinct_ids(self):
        repo = InMemoryPlateRepository()
        with ThreadPoolExecutor(max_workers=16) as pool:
            records = list(pool.map(lambda i: repo.create(plate(f"PAR-{i:03d}")), range(100)))
        ids = sorted(r.id for r in records)
        assert ids == list(range(1, 101))
        assert len(repo.get_all()) == 100

    def test_records_are_immutable(self):
        record = InMemoryPlateRepository().create(plate())
        with pytest.raises(AttributeError):
            record.status = PlateStatus.OTHER


class TestSqlPlateRepository:

    def test_ids_unique_under_threads(self, sql_repo):
        with ThreadPoolExecutor(max_workers=4) as pool:
            records = list(pool.map(lambda i: sql_repo.create(plate(f"SQL-{i:03d}")), range(20)))
        assert len({r.id for r in records}) == 20

    def test_database_errors_become_persistence_errors(self, sql_repo):
        class BrokenSession:
            def query(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("disk I/O error"))

            def rollback(self):
                pass

            def close(self):
                pass

        sql_repo.session_factory = BrokenSession
        with pytest.raises(PersistenceError):
            sql_repo.get_recent(5)


class TestDemoSeed:

    def test_seeds_only_empty_store(self):
        repo = InMemoryPlateRepository()
        assert seed_demo_plates(repo) == len(DEMO_PLATES)
        assert seed_demo_plates(repo) == 0
        assert len(repo.get_all()) == len(DEMO_PLATES)
