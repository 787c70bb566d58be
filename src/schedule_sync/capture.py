"""Snapshot capture and drift detection.

A sync pass captures what the remote scheduler holds for the current window
before changing anything. A later pass fetches the same window again and diffs
it against the snapshot. When the snapshot is gone (expired or lost with a
restart) there is no baseline and the caller must run a full sync instead.
"""

import logging
from typing import Callable, Iterable, Optional

from src.libretime.client import LibreTimeClient

from .civil_time import PARIS, CivilTimeZone, InstantLike, utc_now
from .models import PlayoutDrift, PlayoutRecord, Snapshot
from .snapshots import SnapshotStore
from .window import compute_sync_window

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_LIMIT = 2000

# Called with the window's (utc_start, utc_end) ISO strings
PlayoutFetcher = Callable[[str, str], Iterable[PlayoutRecord]]


def libretime_fetcher(
    client: LibreTimeClient, limit: int = DEFAULT_SCHEDULE_LIMIT
) -> PlayoutFetcher:
    """Adapt a LibreTime client into a playout fetcher.

    Args:
        client: Open LibreTime client
        limit: Maximum schedule entries per window

    Returns:
        Fetcher listing the window's playouts as PlayoutRecords
    """

    def fetch(starts: str, ends: str) -> list[PlayoutRecord]:
        entries = client.get_schedule(starts=starts, ends=ends, limit=limit)
        if len(entries) >= limit:
            logger.warning(
                f"LibreTime returned {len(entries)} entries for {starts}..{ends}, "
                f"hitting limit={limit}; snapshot may be partial"
            )
        return [PlayoutRecord.from_libretime(entry) for entry in entries]

    return fetch


def capture_snapshot(
    store: SnapshotStore,
    fetch_playouts: PlayoutFetcher,
    now: Optional[InstantLike] = None,
    current_show_start_utc: Optional[InstantLike] = None,
    civil_tz: CivilTimeZone = PARIS,
) -> Snapshot:
    """Compute the sync window, fetch its playouts and store a snapshot.

    Args:
        store: Snapshot store to save into
        fetch_playouts: Source of remote playouts for a UTC range
        now: Reference instant (default: current time)
        current_show_start_utc: Start of the show currently on air, if known
        civil_tz: Civil timezone the window is anchored to

    Returns:
        The stored snapshot

    Raises:
        InvalidInstantError: If an instant input is invalid
        LibreTimeError: If fetching from LibreTime fails
    """
    window = compute_sync_window(
        now if now is not None else utc_now(),
        current_show_start_utc=current_show_start_utc,
        civil_tz=civil_tz,
    )
    playouts = list(fetch_playouts(window.utc_start, window.utc_end))
    snapshot = store.save_snapshot(window, playouts)

    logger.info(
        f"Captured snapshot {snapshot.id} window={window.weeks_label} "
        f"playouts={len(snapshot.playouts)}"
    )
    return snapshot


def diff_playouts(
    previous: Iterable[PlayoutRecord], current: Iterable[PlayoutRecord]
) -> PlayoutDrift:
    """Compare two playout lists by playout ID.

    Args:
        previous: Playouts from the snapshot
        current: Playouts fetched now

    Returns:
        PlayoutDrift; ``removed`` and ``changed`` follow the order of
        ``previous``, ``added`` follows the order of ``current``. When
        ``current`` repeats a playout ID, the first entry is compared and
        every repeat is reported as added.
    """
    current = list(current)
    current_by_id = {}
    for playout in current:
        current_by_id.setdefault(playout.playout_id, playout)
    previous_ids = set()
    removed = []
    changed = []

    for before in previous:
        previous_ids.add(before.playout_id)
        after = current_by_id.get(before.playout_id)
        if after is None:
            removed.append(before)
        elif after != before:
            changed.append((before, after))

    added = []
    seen_ids = set()
    for playout in current:
        if playout.playout_id not in previous_ids or playout.playout_id in seen_ids:
            added.append(playout)
        seen_ids.add(playout.playout_id)

    return PlayoutDrift(added=tuple(added), removed=tuple(removed), changed=tuple(changed))


def detect_drift(
    store: SnapshotStore, snapshot_id: str, fetch_playouts: PlayoutFetcher
) -> Optional[PlayoutDrift]:
    """Diff a stored snapshot against the remote state of the same window.

    Args:
        store: Store holding the snapshot
        snapshot_id: ID returned when the snapshot was captured
        fetch_playouts: Source of current remote playouts

    Returns:
        PlayoutDrift, or None when the snapshot is missing or expired (the
        caller must fall back to a full sync, not assume no drift)
    """
    snapshot = store.get_snapshot(snapshot_id)
    if snapshot is None:
        logger.warning(f"Snapshot {snapshot_id} not found or expired; full sync required")
        return None

    current = list(fetch_playouts(snapshot.window.utc_start, snapshot.window.utc_end))
    drift = diff_playouts(snapshot.playouts, current)
    logger.info(f"Snapshot {snapshot_id} window={snapshot.window.weeks_label}: {drift.log_message()}")
    return drift
