"""Sync window computation.

The window covers the previous, current and next weeks around "now", anchored
to Monday 00:00 in the station's civil timezone, so the reconciliation routine
always compares the same three calendar weeks the planner shows.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Optional

from .civil_time import (
    PARIS,
    CivilTimeZone,
    InstantLike,
    format_offset_iso,
    format_utc_iso,
    iso_week_label,
    parse_instant,
)
from .exceptions import InvalidInstantError
from .models import SyncWindow

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
# The window ends on the last millisecond of the next week, not at the
# following Monday midnight.
END_OF_WINDOW_DAYS = 2 * WEEK_DAYS
LAST_MILLISECOND = timedelta(milliseconds=1)


def compute_sync_window(
    now: InstantLike,
    current_show_start_utc: Optional[InstantLike] = None,
    civil_tz: CivilTimeZone = PARIS,
) -> SyncWindow:
    """Compute the three-week sync window around ``now``.

    Args:
        now: Reference instant (aware datetime or ISO-8601 string with offset)
        current_show_start_utc: Start of the show on air at ``now``, if known.
            When it predates the nominal window start, the window start moves
            back to exactly this instant so the running show stays included.
        civil_tz: Civil timezone the weeks are anchored to

    Returns:
        SyncWindow with UTC and civil bounds, week label and duration

    Raises:
        InvalidInstantError: If ``now`` or ``current_show_start_utc`` is naive,
            malformed, of an unsupported type, or too close to the ends of the
            datetime range for a window to exist

    Example:
        >>> window = compute_sync_window("2025-03-30T10:00:00Z")
        >>> window.paris_start, window.paris_end
        ('2025-03-17T00:00:00+01:00', '2025-04-06T23:59:59+02:00')
        >>> window.weeks_label
        '2025-W12..2025-W14'
    """
    now_utc = parse_instant(now, "now")
    show_start = None
    if current_show_start_utc not in (None, ""):
        show_start = parse_instant(current_show_start_utc, "current_show_start_utc")

    try:
        local_today = civil_tz.to_local(now_utc).date()
        current_week_start = local_today - timedelta(days=local_today.weekday())
        previous_week_start = current_week_start - timedelta(days=WEEK_DAYS)
        end_boundary = current_week_start + timedelta(days=END_OF_WINDOW_DAYS)

        utc_start = civil_tz.to_utc(datetime.combine(previous_week_start, time.min))
        utc_end = civil_tz.to_utc(datetime.combine(end_boundary, time.min) - LAST_MILLISECOND)
    except OverflowError as e:
        raise InvalidInstantError("now", now, "window out of representable range") from e

    if show_start is not None and show_start < utc_start:
        logger.debug(
            f"Current show started at {format_utc_iso(show_start)}, "
            f"before window start {format_utc_iso(utc_start)}; widening window"
        )
        utc_start = show_start

    local_start = civil_tz.to_local(utc_start)
    local_end = civil_tz.to_local(utc_end)

    return SyncWindow(
        utc_start=format_utc_iso(utc_start),
        utc_end=format_utc_iso(utc_end),
        paris_start=format_offset_iso(utc_start, civil_tz),
        paris_end=format_offset_iso(utc_end, civil_tz),
        weeks_label=f"{iso_week_label(local_start.date())}..{iso_week_label(local_end.date())}",
        now_utc=format_utc_iso(now_utc),
        now_paris=format_offset_iso(now_utc, civil_tz),
        window_duration_ms=(utc_end - utc_start) // LAST_MILLISECOND,
    )
