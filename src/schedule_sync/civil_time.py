"""Civil time conversion backed by the IANA timezone database.

Window arithmetic never applies fixed offsets itself. Every conversion between
absolute instants and civil wall-clock time goes through ``CivilTimeZone`` so
the rule source can change (or the zone be swapped) without touching the
window logic.

Instants handled here are always timezone-aware and carry at most millisecond
precision, which keeps rendered ISO strings stable between calls.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.parser import isoparse

from .exceptions import InvalidInstantError, TimezoneUnavailableError

DEFAULT_TIMEZONE = "Europe/Paris"

InstantLike = Union[datetime, str]


class CivilTimeZone:
    """A named civil timezone (standard/daylight offsets and transitions).

    Attributes:
        name: IANA zone name (e.g. "Europe/Paris")
        zone: Underlying ``ZoneInfo`` rule set

    Example:
        >>> paris = CivilTimeZone("Europe/Paris")
        >>> instant = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)
        >>> paris.to_local(instant).isoformat()
        '2025-07-01T14:00:00+02:00'
    """

    def __init__(self, name: str = DEFAULT_TIMEZONE):
        """Load the zone rules.

        Args:
            name: IANA zone name

        Raises:
            TimezoneUnavailableError: If the rule database has no such zone
        """
        try:
            self.zone = ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise TimezoneUnavailableError(name) from e
        self.name = name

    def to_local(self, instant: datetime) -> datetime:
        """Render an aware instant as civil wall-clock time with its offset."""
        return instant.astimezone(self.zone)

    def to_utc(self, wall_clock: datetime) -> datetime:
        """Convert a naive civil wall-clock time to an aware UTC instant.

        Ambiguous wall-clock times (the repeated hour after a fall-back change)
        resolve to their first occurrence.
        """
        if wall_clock.tzinfo is not None:
            raise ValueError("wall_clock must be naive civil time")
        return wall_clock.replace(tzinfo=self.zone, fold=0).astimezone(timezone.utc)

    def utc_offset(self, instant: datetime) -> timedelta:
        """Return the offset legally in effect at ``instant``."""
        return self.to_local(instant).utcoffset()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CivilTimeZone) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"CivilTimeZone('{self.name}')"


def utc_now() -> datetime:
    """Current instant, UTC, truncated to milliseconds."""
    return _truncate_to_millis(datetime.now(timezone.utc))


def _truncate_to_millis(instant: datetime) -> datetime:
    return instant.replace(microsecond=instant.microsecond // 1000 * 1000)


def parse_instant(value: InstantLike, field: str = "instant") -> datetime:
    """Interpret ``value`` as an absolute instant.

    Accepts aware datetimes and ISO-8601 strings carrying an explicit offset
    (``Z`` or ``+HH:MM``). The result is in UTC, truncated to milliseconds.

    Args:
        value: Datetime or ISO-8601 string
        field: Input name used in error messages

    Returns:
        Aware UTC datetime

    Raises:
        InvalidInstantError: For naive, malformed or wrongly typed values
    """
    if isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidInstantError(field, value, f"not an ISO-8601 instant ({e})") from e
    elif isinstance(value, datetime):
        parsed = value
    else:
        raise InvalidInstantError(field, value, "expected a datetime or ISO-8601 string")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise InvalidInstantError(field, value, "missing UTC offset")

    return _truncate_to_millis(parsed.astimezone(timezone.utc))


def format_utc_iso(instant: datetime) -> str:
    """Render as ISO-8601 UTC with milliseconds, e.g. ``2025-01-01T00:00:00.000Z``."""
    utc = instant.astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def format_offset_iso(instant: datetime, civil_tz: "CivilTimeZone") -> str:
    """Render in civil time with explicit offset and no fractional seconds."""
    return civil_tz.to_local(instant).replace(microsecond=0).isoformat()


def iso_week_label(day: date) -> str:
    """ISO week-year and week number, e.g. ``2025-W01``.

    The week-year differs from the calendar year around 1 January: 29 December
    2025 belongs to ``2026-W01``.
    """
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def normalize_iso(value: Optional[InstantLike], field: str = "instant") -> Optional[str]:
    """Re-render any accepted instant as ISO UTC with milliseconds.

    Empty values stay ``None``.
    """
    if value is None or value == "":
        return None
    return format_utc_iso(parse_instant(value, field))


PARIS = CivilTimeZone(DEFAULT_TIMEZONE)
