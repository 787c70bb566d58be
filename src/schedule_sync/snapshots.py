"""In-memory snapshot store with TTL expiration.

Snapshots pair a sync window with the remote playouts fetched for it, so a
later pass can detect drift (or restore the earlier state) without trusting a
second query made mid-operation. They live in process memory only: a restart
loses them and callers must treat a missing snapshot as "no prior state".

Expiry is checked on read. Expired entries are also pruned opportunistically on
every write and listing, which bounds memory but is never relied on for
correctness.
"""

import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional

from .civil_time import utc_now
from .models import PlayoutRecord, Snapshot, SyncWindow

logger = logging.getLogger(__name__)

SNAPSHOT_TTL_SECONDS = 24 * 60 * 60

Clock = Callable[[], datetime]


def _new_snapshot_id() -> str:
    return str(uuid.uuid4())


class SnapshotStore:
    """Process-local store of sync snapshots, keyed by generated ID.

    The store is safe to share between threads. Snapshots it hands out are
    immutable, so callers can keep them without copying.

    Attributes:
        ttl: Lifetime of a snapshot
        clock: Callable returning the current aware UTC datetime

    Example:
        >>> store = SnapshotStore()
        >>> snapshot = store.save_snapshot(window, playouts)
        >>> store.get_snapshot(snapshot.id) is snapshot
        True
        >>> store.get_snapshot("unknown") is None
        True
    """

    def __init__(
        self,
        ttl_seconds: float = SNAPSHOT_TTL_SECONDS,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = _new_snapshot_id,
    ):
        """Initialize an empty store.

        Args:
            ttl_seconds: Snapshot lifetime in seconds (default: 86400 = 24 hours)
            clock: Source of the current time, injectable for tests
            id_factory: Generator of unique snapshot IDs (default: UUID4)

        Raises:
            ValueError: If ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0 (got: {ttl_seconds})")
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock
        self._id_factory = id_factory
        self._snapshots: dict[str, Snapshot] = {}
        self._lock = threading.Lock()

    def save_snapshot(
        self, window: SyncWindow, playouts: Iterable[PlayoutRecord]
    ) -> Snapshot:
        """Store a snapshot of ``window`` and ``playouts`` under a fresh ID.

        Args:
            window: The sync window the playouts were fetched for
            playouts: Remote playout records, kept in the given order

        Returns:
            The stored snapshot, including its generated ID
        """
        now = self.clock()
        snapshot = Snapshot(
            id=self._id_factory(),
            created_at=now,
            expires_at=now + self.ttl,
            window=window,
            playouts=tuple(playouts),
        )
        with self._lock:
            self._prune_locked(now)
            self._snapshots[snapshot.id] = snapshot

        logger.debug(
            f"Saved snapshot {snapshot.id} window={window.weeks_label} "
            f"playouts={len(snapshot.playouts)}"
        )
        return snapshot

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        """Retrieve a snapshot if it exists and has not expired.

        Args:
            snapshot_id: ID returned by ``save_snapshot``

        Returns:
            The stored snapshot, or None if unknown or expired
        """
        now = self.clock()
        with self._lock:
            snapshot = self._snapshots.get(snapshot_id)
            if snapshot is None:
                return None
            if snapshot.is_expired(now):
                del self._snapshots[snapshot_id]
                logger.debug(f"Snapshot {snapshot_id} expired at {snapshot.expires_at.isoformat()}")
                return None
            return snapshot

    def list_snapshots(self) -> list[Snapshot]:
        """Return live snapshots in creation order."""
        now = self.clock()
        with self._lock:
            self._prune_locked(now)
            return list(self._snapshots.values())

    def prune(self) -> int:
        """Remove expired snapshots.

        Returns:
            Number of snapshots removed
        """
        now = self.clock()
        with self._lock:
            return self._prune_locked(now)

    def _prune_locked(self, now: datetime) -> int:
        expired = [sid for sid, snap in self._snapshots.items() if snap.is_expired(now)]
        for sid in expired:
            del self._snapshots[sid]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired snapshot(s)")
        return len(expired)

    def clear(self) -> None:
        """Remove every snapshot."""
        with self._lock:
            self._snapshots.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics for monitoring.

        Returns:
            dict: Stored, expired and live counts plus the TTL in seconds
        """
        now = self.clock()
        with self._lock:
            stored = len(self._snapshots)
            expired = sum(1 for snap in self._snapshots.values() if snap.is_expired(now))

        return {
            "stored_snapshots": stored,
            "expired_snapshots": expired,
            "live_snapshots": stored - expired,
            "ttl_seconds": self.ttl.total_seconds(),
        }

    def __len__(self) -> int:
        """Number of physically stored snapshots, expired ones included."""
        with self._lock:
            return len(self._snapshots)


_default_store: Optional[SnapshotStore] = None
_default_store_lock = threading.Lock()


def default_store() -> SnapshotStore:
    """Process-wide store for hosts that do not wire their own."""
    global _default_store

    with _default_store_lock:
        if _default_store is None:
            _default_store = SnapshotStore()
        return _default_store
