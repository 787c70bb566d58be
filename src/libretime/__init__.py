"""LibreTime API client module for remote schedule access."""

__version__ = "1.0.0"

from .client import LibreTimeClient
from .exceptions import (
    LibreTimeAuthenticationError,
    LibreTimeConflictError,
    LibreTimeError,
    LibreTimeNotFoundError,
    LibreTimeValidationError,
)
from .models import LibreTimeConfig

__all__ = [
    # Client
    "LibreTimeClient",
    # Models
    "LibreTimeConfig",
    # Exceptions
    "LibreTimeError",
    "LibreTimeAuthenticationError",
    "LibreTimeValidationError",
    "LibreTimeNotFoundError",
    "LibreTimeConflictError",
]
