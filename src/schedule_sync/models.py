"""Data models for schedule synchronization.

This module defines the value objects exchanged between the window calculator,
the snapshot store and the reconciliation routine: the computed sync window,
the remote playout records, stored snapshots and drift reports.

All models are frozen dataclasses so a value handed out by the store can never
be mutated behind its back.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from .civil_time import normalize_iso, parse_instant


@dataclass(frozen=True)
class SyncWindow:
    """Three-week span over which local and remote schedules are compared.

    The civil fields are always renderings of the UTC fields, never computed
    independently.

    Attributes:
        utc_start: Window start, ISO UTC with milliseconds ("Z" suffix)
        utc_end: Window end, ISO UTC with milliseconds
        paris_start: ``utc_start`` in civil time with offset, no milliseconds
        paris_end: ``utc_end`` in civil time with offset, no milliseconds
        weeks_label: ISO weeks of the civil start and end, ``YYYY-Www..YYYY-Www``
        now_utc: Reference instant, ISO UTC with milliseconds
        now_paris: Reference instant in civil time with offset
        window_duration_ms: ``utc_end - utc_start`` in milliseconds

    Example:
        >>> window = SyncWindow.from_dict({
        ...     "utcStart": "2025-03-16T23:00:00.000Z",
        ...     "utcEnd": "2025-04-06T21:59:59.999Z",
        ...     "parisStart": "2025-03-17T00:00:00+01:00",
        ...     "parisEnd": "2025-04-06T23:59:59+02:00",
        ...     "weeksLabel": "2025-W12..2025-W14",
        ...     "nowUtc": "2025-03-30T10:00:00.000Z",
        ...     "nowParis": "2025-03-30T12:00:00+02:00",
        ... })
        >>> window.weeks_label
        '2025-W12..2025-W14'
    """

    utc_start: str
    utc_end: str
    paris_start: str
    paris_end: str
    weeks_label: str
    now_utc: str
    now_paris: str
    window_duration_ms: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase names of the sync API."""
        return {
            "utcStart": self.utc_start,
            "utcEnd": self.utc_end,
            "parisStart": self.paris_start,
            "parisEnd": self.paris_end,
            "weeksLabel": self.weeks_label,
            "nowUtc": self.now_utc,
            "nowParis": self.now_paris,
            "windowDurationMs": self.window_duration_ms,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SyncWindow":
        """Build from the camelCase form produced by ``to_dict``.

        ``windowDurationMs`` is optional; snapshot windows captured by older
        callers do not carry it, so it is derived from the UTC bounds.

        Raises:
            KeyError: If a required key is missing
            InvalidInstantError: If the duration must be derived and a UTC
                bound is not a valid instant
        """
        duration_ms = data.get("windowDurationMs")
        if duration_ms is None:
            span = parse_instant(data["utcEnd"], "utcEnd") - parse_instant(
                data["utcStart"], "utcStart"
            )
            duration_ms = span // timedelta(milliseconds=1)

        return cls(
            utc_start=data["utcStart"],
            utc_end=data["utcEnd"],
            paris_start=data["parisStart"],
            paris_end=data["parisEnd"],
            weeks_label=data["weeksLabel"],
            now_utc=data["nowUtc"],
            now_paris=data["nowParis"],
            window_duration_ms=duration_ms,
        )


@dataclass(frozen=True)
class PlayoutRecord:
    """A remote scheduler's record of one scheduled broadcast of a file.

    Treated as an opaque payload by the snapshot store.

    Attributes:
        playout_id: Remote schedule entry ID
        instance_id: Remote show instance the playout belongs to
        file_id: Remote media file ID (None for stream/webstream playouts)
        starts_at: Start instant, ISO UTC
        ends_at: End instant, ISO UTC
    """

    playout_id: int
    instance_id: int
    file_id: Optional[int]
    starts_at: str
    ends_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "playoutId": self.playout_id,
            "instanceId": self.instance_id,
            "fileId": self.file_id,
            "startsAt": self.starts_at,
            "endsAt": self.ends_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayoutRecord":
        return cls(
            playout_id=data["playoutId"],
            instance_id=data["instanceId"],
            file_id=data.get("fileId"),
            starts_at=data["startsAt"],
            ends_at=data["endsAt"],
        )

    @classmethod
    def from_libretime(cls, schedule: Mapping[str, Any]) -> "PlayoutRecord":
        """Map a LibreTime ``/api/v2/schedule`` entry.

        Instants are normalized to ISO UTC with milliseconds so records
        fetched at different times compare equal when nothing moved.

        Args:
            schedule: Schedule entry with ``id``, ``instance``, ``file``,
                ``starts_at`` and ``ends_at``

        Returns:
            PlayoutRecord for the entry

        Raises:
            KeyError: If ``id``, ``instance``, ``starts_at`` or ``ends_at`` is missing
            InvalidInstantError: If an instant is not a valid ISO-8601 value

        Example:
            >>> record = PlayoutRecord.from_libretime({
            ...     "id": 101, "instance": 55, "file": 1234,
            ...     "starts_at": "2025-01-02T10:00:00Z",
            ...     "ends_at": "2025-01-02T11:00:00Z",
            ... })
            >>> record.starts_at
            '2025-01-02T10:00:00.000Z'
        """
        return cls(
            playout_id=schedule["id"],
            instance_id=schedule["instance"],
            file_id=schedule.get("file"),
            starts_at=normalize_iso(schedule["starts_at"], "starts_at"),
            ends_at=normalize_iso(schedule["ends_at"], "ends_at"),
        )


@dataclass(frozen=True)
class Snapshot:
    """A time-boxed pairing of a sync window with the playouts fetched for it.

    Attributes:
        id: Opaque unique identifier, the only lookup key
        created_at: Creation instant (aware UTC)
        expires_at: Instant from which the snapshot is treated as absent
        window: Window the playouts were fetched for
        playouts: Playout records in the order supplied at capture time
    """

    id: str
    created_at: datetime
    expires_at: datetime
    window: SyncWindow
    playouts: tuple[PlayoutRecord, ...] = field(default_factory=tuple)

    def is_expired(self, at: datetime) -> bool:
        """True once ``at`` reaches ``expires_at`` (closed boundary)."""
        return at >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "window": self.window.to_dict(),
            "playouts": [playout.to_dict() for playout in self.playouts],
        }


@dataclass(frozen=True)
class PlayoutDrift:
    """Difference between a snapshot's playouts and the current remote state.

    Attributes:
        added: Playouts present remotely but absent from the snapshot
        removed: Playouts in the snapshot that no longer exist remotely
        changed: ``(before, after)`` pairs for playouts whose instance, file
            or timing changed

    Example:
        >>> drift = PlayoutDrift()
        >>> drift.has_drift
        False
        >>> drift.log_message()
        'No drift: added=0 removed=0 changed=0'
    """

    added: tuple[PlayoutRecord, ...] = ()
    removed: tuple[PlayoutRecord, ...] = ()
    changed: tuple[tuple[PlayoutRecord, PlayoutRecord], ...] = ()

    @property
    def has_drift(self) -> bool:
        return bool(self.added or self.removed or self.changed)

    def log_message(self) -> str:
        """One-line summary suitable for INFO logging."""
        prefix = "Drift detected" if self.has_drift else "No drift"
        return (
            f"{prefix}: added={len(self.added)} removed={len(self.removed)} "
            f"changed={len(self.changed)}"
        )
