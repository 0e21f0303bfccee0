from datetime import datetime, timedelta, timezone

from src.application.plate_stats_service import compute_daily_stats
from src.domain.Models.plate_record import DetectionType, PlateRecord, PlateStatus

NOW = datetime(2024, 5, 1, 15, 30, tzinfo=timezone.utc)


def record(record_id, status, region, detected_at=NOW):
    return PlateRecord(record_id, f"AAA-{record_id:03d}", region, status,
                       DetectionType.AUTOMATIC, "", detected_at)


class TestComputeDailyStats:

    def test_counts_today_only(self):
        records = [
            record(1, PlateStatus.VALID, "Ontario"),
            record(2, PlateStatus.VALID, "Ontario"),
            record(3, PlateStatus.EXPIRED, "Québec"),
            record(4, PlateStatus.SUSPENDED, "Ontario", NOW - timedelta(days=1)),
        ]
        stats = compute_daily_stats(records, now=NOW)
        assert stats["totalToday"] == 3
        assert stats["validCount"] == 2
        assert stats["expiredCount"] == 1
        assert stats["suspendedCount"] == 0
        assert stats["otherCount"] == 0
        assert stats["regionDistribution"] == [
            {"region": "Ontario", "percentage": 67},
            {"region": "Québec", "percentage": 33},
        ]

    def test_empty(self):
        stats = compute_daily_stats([], now=NOW)
        assert stats["totalToday"] == 0
        assert stats["regionDistribution"] == []
