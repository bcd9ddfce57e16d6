"""Date manipulation utilities"""

import calendar
from datetime import datetime, timezone
from decimal import Decimal

AVG_DAYS_PER_MONTH = Decimal("30.44")
SECONDS_PER_DAY = 86_400


def utc_now() -> datetime:
    """Timezone-aware current time, the default clock for the services"""
    return datetime.now(timezone.utc)


def add_months(start: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def months_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed months as days / 30.44, never negative"""
    seconds = Decimal(str((end - start).total_seconds()))
    if seconds <= 0:
        return Decimal("0")
    return seconds / SECONDS_PER_DAY / AVG_DAYS_PER_MONTH


def days_until(now: datetime, target: datetime) -> int:
    """Whole days remaining until target, 0 once it has passed"""
    return max(0, (target - now).days)
