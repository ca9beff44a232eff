"""
Backend API Client for PharmaDesk Frontend.

Shared JSON-over-HTTP client used by the entity gateways. It owns the
requests session, base URL and timeout; gateways add the entity path.

Calls are issued exactly once. Retrying is left to the user action that
triggered the call.
"""

import json
import logging
import threading
from typing import Optional, Dict, Any

import requests

from frontend.config.settings import config
from frontend.utils.exceptions import RemoteError, NotFoundError, DuplicateNameError

logger = logging.getLogger(__name__)


class PharmaAPIClient:
    """Client for the PharmaDesk backend API."""

    def __init__(
        self,
        base_url: str = None,
        timeout: int = None,
        session=None
    ):
        """Initialize API client.

        Args:
            base_url: Backend API URL (default from config)
            timeout: Request timeout in seconds
            session: requests.Session-compatible object (default: new session)
        """
        self.base_url = (base_url if base_url is not None else config.API_BASE_URL).rstrip('/')
        self.timeout = timeout or config.API_TIMEOUT_SECONDS
        self.session = session if session is not None else requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers."""
        return {"Accept": "application/json"}

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ):
        """Make HTTP request with error handling."""
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault('timeout', self.timeout)

        headers = self._get_headers()
        if 'headers' in kwargs:
            headers.update(kwargs['headers'])
        kwargs['headers'] = headers

        try:
            response = self.session.request(method, url, **kwargs)
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise

    def request_json(
        self,
        method: str,
        endpoint: str,
        operation: str,
        entity_id: Optional[str] = None,
        **kwargs
    ) -> Any:
        """Make a request and return the ``data`` member of the JSON envelope.

        Args:
            method: HTTP method
            endpoint: Path below the base URL
            operation: Human-readable description used in error messages
                (e.g., 'creating variant')
            entity_id: Identifier the call addresses, reported on NotFoundError
            **kwargs: Passed through to the session (json, params, ...)

        Returns:
            The unwrapped payload

        Raises:
            NotFoundError: HTTP 404
            DuplicateNameError: HTTP 409
            RemoteError: Transport failure, any other non-2xx status or an
                unreadable body
        """
        try:
            response = self._request(method, endpoint, **kwargs)
        except requests.exceptions.RequestException as e:
            raise RemoteError(
                f"Error {operation}: {e}", operation=operation
            ) from e

        if 200 <= response.status_code < 300:
            try:
                body = response.json()
            except (json.JSONDecodeError, ValueError) as e:
                logger.error(f"Invalid JSON in response while {operation}: {e}")
                raise RemoteError(
                    f"Error {operation}: Invalid response from server",
                    operation=operation,
                    status_code=response.status_code
                ) from e
            if isinstance(body, dict) and 'data' in body:
                return body['data']
            return body

        detail = _error_detail(response)
        logger.warning(f"Backend returned HTTP {response.status_code} while {operation}: {detail}")

        if response.status_code == 404:
            raise NotFoundError(detail, entity_id=entity_id, operation=operation)
        if response.status_code == 409:
            raise DuplicateNameError(detail, operation=operation)
        raise RemoteError(
            f"Error {operation}: {detail}",
            operation=operation,
            status_code=response.status_code
        )

    # Health check
    def health_check(self) -> bool:
        """Check if backend is healthy."""
        try:
            response = self._request('GET', '/api/v1/health')
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False


def _error_detail(response) -> str:
    """Extract a readable message from an error response.

    FastAPI returns ``{"detail": "..."}`` for HTTPException and
    ``{"detail": [{"msg": ...}, ...]}`` for request validation errors.
    """
    try:
        detail = response.json().get('detail')
    except (json.JSONDecodeError, ValueError, AttributeError):
        text = response.text[:100] if response.text else 'Unknown error'
        return f"HTTP {response.status_code}: {text}"

    if isinstance(detail, list) and detail:
        first = detail[0]
        if isinstance(first, dict):
            msg = first.get('msg', '')
            # pydantic prefixes errors raised from validators
            return msg.replace('Value error, ', '', 1) or f"HTTP {response.status_code}"
        return str(first)
    if detail:
        return str(detail)
    return f"HTTP {response.status_code}"


# Singleton pattern with thread-safe initialization
_api_client: Optional[PharmaAPIClient] = None
_api_client_lock = threading.Lock()


def get_api_client() -> PharmaAPIClient:
    """Get singleton API client instance (thread-safe)."""
    global _api_client
    if _api_client is None:
        with _api_client_lock:
            if _api_client is None:
                _api_client = PharmaAPIClient()
    return _api_client
