"""Broadcast Schedule Sync Core

Computes the three-week sync window around "now" in the station's civil
timezone and keeps short-lived snapshots of the remote scheduler's playouts
so a sync pass can diff expected against actual schedule state.
"""

from src.schedule_sync.capture import (
    capture_snapshot,
    detect_drift,
    diff_playouts,
    libretime_fetcher,
)
from src.schedule_sync.civil_time import PARIS, CivilTimeZone
from src.schedule_sync.exceptions import (
    InvalidInstantError,
    ScheduleSyncError,
    TimezoneUnavailableError,
)
from src.schedule_sync.models import PlayoutDrift, PlayoutRecord, Snapshot, SyncWindow
from src.schedule_sync.snapshots import SNAPSHOT_TTL_SECONDS, SnapshotStore, default_store
from src.schedule_sync.window import compute_sync_window

__version__ = "1.0.0"

__all__ = [
    "compute_sync_window",
    "SnapshotStore",
    "default_store",
    "SNAPSHOT_TTL_SECONDS",
    "capture_snapshot",
    "detect_drift",
    "diff_playouts",
    "libretime_fetcher",
    "CivilTimeZone",
    "PARIS",
    "SyncWindow",
    "PlayoutRecord",
    "Snapshot",
    "PlayoutDrift",
    "ScheduleSyncError",
    "InvalidInstantError",
    "TimezoneUnavailableError",
]
