"""Unit tests for schedule sync data models."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from src.schedule_sync.exceptions import InvalidInstantError
from src.schedule_sync.models import PlayoutDrift, PlayoutRecord, Snapshot, SyncWindow
from src.schedule_sync.window import compute_sync_window


class TestSyncWindow:
    def test_to_dict_uses_camel_case(self):
        window = compute_sync_window("2025-03-30T10:00:00Z")

        assert window.to_dict() == {
            "utcStart": "2025-03-16T23:00:00.000Z",
            "utcEnd": "2025-04-06T21:59:59.999Z",
            "parisStart": "2025-03-17T00:00:00+01:00",
            "parisEnd": "2025-04-06T23:59:59+02:00",
            "weeksLabel": "2025-W12..2025-W14",
            "nowUtc": "2025-03-30T10:00:00.000Z",
            "nowParis": "2025-03-30T12:00:00+02:00",
            "windowDurationMs": 1810799999,
        }

    def test_from_dict_restores_window(self):
        window = compute_sync_window("2025-10-22T12:00:00Z")

        assert SyncWindow.from_dict(window.to_dict()) == window

    def test_from_dict_derives_missing_duration(self, sample_window):
        data = sample_window.to_dict()
        del data["windowDurationMs"]

        assert SyncWindow.from_dict(data).window_duration_ms == 7 * 24 * 60 * 60 * 1000

    def test_duration_is_required(self):
        with pytest.raises(TypeError):
            SyncWindow(
                utc_start="2025-01-01T00:00:00.000Z",
                utc_end="2025-01-08T00:00:00.000Z",
                paris_start="2025-01-01T01:00:00+01:00",
                paris_end="2025-01-08T01:00:00+01:00",
                weeks_label="2025-W01..2025-W02",
                now_utc="2025-01-01T00:00:00.000Z",
                now_paris="2025-01-01T01:00:00+01:00",
            )

    def test_from_dict_missing_key(self, sample_window):
        data = sample_window.to_dict()
        del data["utcStart"]

        with pytest.raises(KeyError):
            SyncWindow.from_dict(data)


class TestPlayoutRecord:
    def test_from_libretime_normalizes_instants(self):
        record = PlayoutRecord.from_libretime(
            {
                "id": 7,
                "instance": 3,
                "file": 42,
                "starts_at": "2025-01-02T11:00:00+01:00",
                "ends_at": "2025-01-02T10:30:00.5Z",
            }
        )

        assert record == PlayoutRecord(
            7, 3, 42, "2025-01-02T10:00:00.000Z", "2025-01-02T10:30:00.500Z"
        )

    def test_from_libretime_without_file(self):
        record = PlayoutRecord.from_libretime(
            {
                "id": 7,
                "instance": 3,
                "starts_at": "2025-01-02T10:00:00Z",
                "ends_at": "2025-01-02T11:00:00Z",
            }
        )

        assert record.file_id is None

    def test_from_libretime_invalid_instant(self):
        with pytest.raises(InvalidInstantError) as exc_info:
            PlayoutRecord.from_libretime(
                {"id": 7, "instance": 3, "file": 1, "starts_at": "soon", "ends_at": "later"}
            )

        assert exc_info.value.field == "starts_at"

    def test_dict_round_trip(self, sample_playouts):
        for playout in sample_playouts:
            assert PlayoutRecord.from_dict(playout.to_dict()) == playout

    def test_is_frozen(self, sample_playouts):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_playouts[0].starts_at = "2025-01-02T09:00:00.000Z"


class TestSnapshot:
    def make_snapshot(self, window, playouts) -> Snapshot:
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)
        return Snapshot(
            id="snap-1",
            created_at=created,
            expires_at=created + timedelta(hours=24),
            window=window,
            playouts=tuple(playouts),
        )

    def test_is_expired_closed_boundary(self, sample_window):
        snapshot = self.make_snapshot(sample_window, [])

        assert not snapshot.is_expired(snapshot.expires_at - timedelta(milliseconds=1))
        assert snapshot.is_expired(snapshot.expires_at)

    def test_to_dict(self, sample_window, sample_playouts):
        data = self.make_snapshot(sample_window, sample_playouts).to_dict()

        assert data["id"] == "snap-1"
        assert data["createdAt"] == "2025-01-01T00:00:00+00:00"
        assert data["expiresAt"] == "2025-01-02T00:00:00+00:00"
        assert data["window"]["weeksLabel"] == "2025-W01..2025-W02"
        assert [p["playoutId"] for p in data["playouts"]] == [101, 102]


class TestPlayoutDrift:
    def test_empty_drift(self):
        drift = PlayoutDrift()

        assert not drift.has_drift
        assert drift.log_message() == "No drift: added=0 removed=0 changed=0"

    def test_counts_in_log_message(self, sample_playouts):
        drift = PlayoutDrift(
            added=tuple(sample_playouts),
            changed=((sample_playouts[0], sample_playouts[1]),),
        )

        assert drift.has_drift
        assert drift.log_message() == "Drift detected: added=2 removed=0 changed=1"
