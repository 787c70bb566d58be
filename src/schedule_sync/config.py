"""Configuration management for schedule synchronization.

This module handles environment variable validation and configuration loading.
All configuration is read from environment variables (NO .env files).
"""
import os
from dataclasses import dataclass

from src.libretime.models import LibreTimeConfig

from .capture import DEFAULT_SCHEDULE_LIMIT
from .civil_time import DEFAULT_TIMEZONE, CivilTimeZone
from .snapshots import SNAPSHOT_TTL_SECONDS, SnapshotStore


@dataclass
class SyncConfig:
    """Configuration for schedule synchronization (reads from environment)."""

    # Required: LibreTime
    libretime_url: str
    libretime_api_key: str

    # Optional: window and snapshot tuning
    timezone: str = DEFAULT_TIMEZONE
    snapshot_ttl_seconds: int = SNAPSHOT_TTL_SECONDS
    schedule_limit: int = DEFAULT_SCHEDULE_LIMIT

    @classmethod
    def from_environment(cls) -> 'SyncConfig':
        """Load configuration from environment variables (NO .env files).

        Returns:
            SyncConfig: Loaded configuration object

        Raises:
            EnvironmentError: If required environment variables are missing
            ValueError: If a numeric variable is not an integer
        """
        required = {
            # LIBRETIME_BASE_URL is the older name of the same setting
            'LIBRETIME_API_URL': os.getenv('LIBRETIME_API_URL') or os.getenv('LIBRETIME_BASE_URL'),
            'LIBRETIME_API_KEY': os.getenv('LIBRETIME_API_KEY'),
        }

        missing = [var for var, value in required.items() if not value]
        if missing:
            raise EnvironmentError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"These variables must be set in your shell environment (NOT in .env files).\n"
                f"Example: export LIBRETIME_API_URL='https://radio.example.com'"
            )

        return cls(
            libretime_url=required['LIBRETIME_API_URL'],
            libretime_api_key=required['LIBRETIME_API_KEY'],
            timezone=os.getenv('SYNC_TIMEZONE', DEFAULT_TIMEZONE),
            snapshot_ttl_seconds=int(os.getenv('SYNC_SNAPSHOT_TTL_SECONDS', str(SNAPSHOT_TTL_SECONDS))),
            schedule_limit=int(os.getenv('SYNC_SCHEDULE_LIMIT', str(DEFAULT_SCHEDULE_LIMIT))),
        )

    def validate(self) -> None:
        """Validate tuning values.

        Raises:
            ValueError: If a numeric value is not positive
            TimezoneUnavailableError: If the timezone is unknown
        """
        if self.snapshot_ttl_seconds <= 0:
            raise ValueError(
                f"Invalid snapshot_ttl_seconds: {self.snapshot_ttl_seconds}. Must be > 0"
            )
        if self.schedule_limit <= 0:
            raise ValueError(f"Invalid schedule_limit: {self.schedule_limit}. Must be > 0")
        CivilTimeZone(self.timezone)

    def civil_timezone(self) -> CivilTimeZone:
        return CivilTimeZone(self.timezone)

    def build_store(self) -> SnapshotStore:
        """Create a snapshot store using the configured TTL."""
        return SnapshotStore(ttl_seconds=self.snapshot_ttl_seconds)

    def to_libretime_config(self) -> LibreTimeConfig:
        """Convert to LibreTimeConfig for the LibreTime client."""
        return LibreTimeConfig(url=self.libretime_url, api_key=self.libretime_api_key)

    def __repr__(self) -> str:
        """Return string representation with sensitive data masked."""
        return (
            f"SyncConfig("
            f"libretime_url='{self.libretime_url}', "
            f"libretime_api_key='***', "
            f"timezone='{self.timezone}', "
            f"snapshot_ttl_seconds={self.snapshot_ttl_seconds}, "
            f"schedule_limit={self.schedule_limit}"
            f")"
        )
