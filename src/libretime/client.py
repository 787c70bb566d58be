"""HTTP client for the LibreTime v2 API (read-only schedule access)."""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from .exceptions import (
    LibreTimeAuthenticationError,
    LibreTimeConflictError,
    LibreTimeError,
    LibreTimeNotFoundError,
    LibreTimeValidationError,
)
from .models import LibreTimeConfig

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = 429


class LibreTimeClient:
    """Synchronous HTTP client for the LibreTime v2 schedule API.

    This client implements:
    - API key authentication (``Authorization: Api-Key <key>``)
    - Typed exceptions for auth, validation, conflict and missing resources
    - Retries with exponential backoff for 429 and 5xx responses
    - Connection pooling and timeout configuration

    Attributes:
        config: LibreTimeConfig with server connection details
        client: httpx.Client for HTTP requests

    Example:
        >>> config = LibreTimeConfig(url="https://radio.example.com", api_key="secret")
        >>> with LibreTimeClient(config) as client:
        ...     entries = client.get_schedule(
        ...         starts="2025-03-16T23:00:00.000Z",
        ...         ends="2025-04-06T21:59:59.999Z",
        ...         limit=2000,
        ...     )
    """

    def __init__(self, config: LibreTimeConfig, max_retries: int = 3, retry_delay: float = 0.5):
        """Initialize LibreTime API client.

        Args:
            config: LibreTimeConfig with server URL and API key
            max_retries: Attempts per request for retryable responses (default: 3)
            retry_delay: Base backoff delay in seconds, doubled per attempt
        """
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")

        self.config = config
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        transport = httpx.HTTPTransport(
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=5,
                keepalive_expiry=5.0,
            ),
            retries=3,  # Connection-level retries only
        )
        self.client = httpx.Client(
            base_url=config.api_base_url,
            headers={
                "Authorization": f"Api-Key {config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(
                connect=10.0,
                read=config.timeout,
                write=10.0,
                pool=5.0,
            ),
            transport=transport,
            follow_redirects=True,
        )

        logger.info(f"Initialized LibreTime client for {config.api_base_url}")

    def _handle_response(self, response: httpx.Response) -> Any:
        """Map the HTTP status to a result or a typed exception.

        Args:
            response: HTTP response from LibreTime

        Returns:
            Parsed JSON body, or None for empty/non-JSON success responses

        Raises:
            LibreTimeAuthenticationError: For 401/403
            LibreTimeValidationError: For 400/422
            LibreTimeNotFoundError: For 404
            LibreTimeConflictError: For 409
            LibreTimeError: For any other error status
        """
        status = response.status_code
        if response.is_success:
            content_type = response.headers.get("content-type", "")
            if status == 204 or "application/json" not in content_type:
                return None
            return response.json()

        details = response.text
        if status in (401, 403):
            raise LibreTimeAuthenticationError(status, "LibreTime auth failed - check API key", details)
        if status in (400, 422):
            raise LibreTimeValidationError(status, "LibreTime rejected the request", details)
        if status == 404:
            raise LibreTimeNotFoundError(status, "LibreTime resource not found", details)
        if status == 409:
            raise LibreTimeConflictError(status, "LibreTime refused schedule (possible overlap)", details)
        raise LibreTimeError(status, f"LibreTime request failed ({response.reason_phrase})", details)

    def _request(self, method: str, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Perform a request, retrying 429/5xx responses and transport errors.

        Args:
            method: HTTP method
            path: Path relative to ``/api/v2``
            params: Query parameters

        Returns:
            Parsed JSON body (see ``_handle_response``)

        Raises:
            LibreTimeError: When retries are exhausted or the response is an error
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.client.request(method, path, params=params)
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise LibreTimeError(None, f"LibreTime request to {path} failed", str(e)) from e
                delay = self.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"LibreTime request to {path} failed: {e}. "
                    f"Retrying in {delay:.1f}s (attempt {attempt}/{self.max_retries})"
                )
                time.sleep(delay)
                continue

            retryable = response.status_code == RETRYABLE_STATUS or response.status_code >= 500
            if retryable and attempt < self.max_retries:
                delay = self.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"LibreTime request to {path} returned {response.status_code}. "
                    f"Retrying in {delay:.1f}s (attempt {attempt}/{self.max_retries})"
                )
                time.sleep(delay)
                continue

            return self._handle_response(response)

        # Unreachable: the last attempt always returns or raises
        raise LibreTimeError(None, f"LibreTime request to {path} exhausted retries")

    def get_schedule(
        self,
        starts: Optional[str] = None,
        ends: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Get schedule entries (playouts), optionally bounded to a time range.

        Args:
            starts: Only entries ending after this ISO instant
            ends: Only entries starting before this ISO instant
            limit: Maximum number of entries
            offset: Pagination offset

        Returns:
            List of raw schedule entries (``id``, ``instance``, ``file``,
            ``starts_at``, ``ends_at``, ...)
        """
        params: Dict[str, str] = {}
        if limit:
            params["limit"] = str(limit)
        if offset:
            params["offset"] = str(offset)
        if starts:
            params["starts"] = starts
        if ends:
            params["ends"] = ends

        logger.debug(f"Fetching LibreTime schedule with params {params}")
        entries = self._request("GET", "/schedule", params=params)
        return list(entries or [])

    def ping(self) -> bool:
        """Check connectivity and API key validity.

        Returns:
            True if the schedule endpoint answered successfully

        Raises:
            LibreTimeAuthenticationError: If the API key is rejected
            LibreTimeError: For other failures
        """
        self._request("GET", "/schedule", params={"limit": "1"})
        logger.info("LibreTime ping successful")
        return True

    def close(self):
        """Close HTTP client and release resources."""
        self.client.close()
        logger.info("Closed LibreTime client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatically close client."""
        self.close()
