"""Common types and helpers shared across models."""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    return datetime.now(UTC)


def epoch_millis() -> int:
    return int(utc_now().timestamp() * 1000)


def local_time_label(utc_offset_seconds: int, now: datetime | None = None) -> str:
    """Render the wall-clock time at a UTC offset, e.g. "Tue 3 PM"."""
    shifted = (now or utc_now()) + timedelta(seconds=utc_offset_seconds)
    hour = shifted.hour % 12 or 12
    return f"{shifted.strftime('%a')} {hour} {shifted.strftime('%p')}"
