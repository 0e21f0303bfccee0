from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional

from src.domain.Models.plate_record import PlateRecord, PlateStatus


def compute_daily_stats(records: Iterable[PlateRecord], now: Optional[datetime] = None) -> dict:
    """
    Estadísticas del día (UTC): conteo por estado y distribución por región
    en porcentaje, de mayor a menor.
    """
    now = now or datetime.now(timezone.utc)
    start_of_day = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    today = [r for r in records if r.detected_at >= start_of_day]
    by_status = Counter(r.status for r in today)
    by_region = Counter(r.region or "Unknown" for r in today)

    total = len(today)
    distribution = [
        {"region": region, "percentage": round(count * 100 / total) if total else 0}
        for region, count in by_region.items()
    ]
    distribution.sort(key=lambda d: d["percentage"], reverse=True)

    return {
        "totalToday": total,
        "validCount": by_status[PlateStatus.VALID],
        "expiredCount": by_status[PlateStatus.EXPIRED],
        "suspendedCount": by_status[PlateStatus.SUSPENDED],
        "otherCount": by_status[PlateStatus.OTHER],
        "regionDistribution": distribution,
    }
