"""
Pytest configuration for schedule-sync test suite.

This module configures the Python path to ensure test files can import
from the src directory properly, and provides shared fixtures.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to Python path so tests can import from src
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.schedule_sync.models import PlayoutRecord, SyncWindow  # noqa: E402


class FakeClock:
    """Deterministic clock; time only moves when ``advance`` is called."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    """Fake clock starting at 2025-01-01T00:00:00Z."""
    return FakeClock(datetime(2025, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def sample_window():
    """Window matching the one captured on 2025-01-01."""
    return SyncWindow(
        utc_start="2025-01-01T00:00:00.000Z",
        utc_end="2025-01-08T00:00:00.000Z",
        paris_start="2025-01-01T01:00:00+01:00",
        paris_end="2025-01-08T01:00:00+01:00",
        weeks_label="2025-W01..2025-W02",
        now_utc="2025-01-01T00:00:00.000Z",
        now_paris="2025-01-01T01:00:00+01:00",
        window_duration_ms=7 * 24 * 60 * 60 * 1000,
    )


@pytest.fixture
def sample_playouts():
    """Two playouts on 2 January 2025, in capture order."""
    return [
        PlayoutRecord(
            playout_id=101,
            instance_id=55,
            file_id=1234,
            starts_at="2025-01-02T10:00:00.000Z",
            ends_at="2025-01-02T11:00:00.000Z",
        ),
        PlayoutRecord(
            playout_id=102,
            instance_id=56,
            file_id=None,
            starts_at="2025-01-02T11:00:00.000Z",
            ends_at="2025-01-02T12:00:00.000Z",
        ),
    ]
