"""Injectable time source for services."""

from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current instant as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name, falling back to the server's local zone.

    Args:
        name: IANA timezone name such as "Europe/London", or None

    Returns:
        tzinfo used for calendar-day and hour-of-day grouping
    """
    if name:
        return ZoneInfo(name)
    local = datetime.now().astimezone().tzinfo
    return local if local is not None else UTC
