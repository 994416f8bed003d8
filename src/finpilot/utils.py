from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo


def now() -> datetime:
    return datetime.now(UTC)


def day_range(start: date, end: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Inclusive range covering whole days from `start` to `end` in the given timezone."""
    return (
        datetime.combine(start, time.min, tzinfo=tz),
        datetime.combine(end, time.max, tzinfo=tz),
    )


def last_days_range(days: int, tz: ZoneInfo, current: datetime | None = None) -> tuple[datetime, datetime]:
    """Range of the last `days` days, today included."""
    today = (current or now()).astimezone(tz).date()
    return day_range(today - timedelta(days=days - 1), today, tz)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
