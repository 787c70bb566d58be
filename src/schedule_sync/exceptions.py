"""Custom exceptions for the schedule sync core."""


class ScheduleSyncError(Exception):
    """Base exception for schedule sync errors."""

    pass


class InvalidInstantError(ScheduleSyncError, ValueError):
    """Raised when an instant input cannot be interpreted unambiguously.

    Attributes:
        field: Name of the offending input (e.g. ``now``)
        value: The rejected value
    """

    def __init__(self, field: str, value: object, reason: str):
        """Initialize the error.

        Args:
            field: Name of the input that was rejected
            value: The rejected value
            reason: Human-readable explanation
        """
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class TimezoneUnavailableError(ScheduleSyncError):
    """Raised when the timezone rule database has no entry for a zone."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Timezone '{name}' not found in the timezone database. "
            f"Install the 'tzdata' package or fix the zone name."
        )
