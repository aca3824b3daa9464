"""
Echo Chamber API Client

HTTP client for a running Echo Chamber server, used by the CLI in remote
mode. Every method returns the decoded JSON body as a dict.

Retry policy:
- Calls retry on timeouts and connection errors with exponential backoff
- Calls that clear server state are attempted once
- HTTP error responses (4xx, 5xx) are not retried; their JSON body is
  returned as-is
"""

import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger("api_client")

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
SERVER_URL = os.getenv("ECHO_CHAMBER_URL", "http://127.0.0.1:3000")
API_TIMEOUT_DEFAULT = float(os.getenv("ECHO_CHAMBER_HTTP_TIMEOUT", "30"))
API_MAX_RETRIES = 3
API_RETRY_BACKOFF_BASE = 1.0  # seconds, doubles each retry
# Actions that should NOT be retried (change server state)
NO_RETRY_ACTIONS = frozenset([
    "clear_history",
    "clear_logs",
])


class EchoChamberClient:
    """Synchronous client for the Echo Chamber HTTP API."""

    def __init__(
        self,
        base_url: str = SERVER_URL,
        timeout: float = API_TIMEOUT_DEFAULT,
        max_retries: int = API_MAX_RETRIES,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._transport = transport
        self._sleep = sleep

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        action_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Make HTTP request to the server with retry logic.

        Args:
            method: HTTP method (GET/POST/DELETE)
            endpoint: API endpoint
            data: JSON body for POST
            params: Query parameters
            action_name: Name of action for retry decision
        """
        url = f"{self.base_url}{endpoint}"
        allow_retries = action_name not in NO_RETRY_ACTIONS
        max_attempts = self._max_retries if allow_retries else 1

        last_error = None

        for attempt in range(max_attempts):
            try:
                with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                    if method.upper() == "GET":
                        response = client.get(url, params=params)
                    elif method.upper() == "POST":
                        response = client.post(url, json=data)
                    elif method.upper() == "DELETE":
                        response = client.delete(url, params=params)
                    else:
                        raise ValueError(f"Unsupported method: {method}")

                    response.raise_for_status()
                    return response.json()

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(f"Timeout on attempt {attempt + 1}/{max_attempts} to {url}: {e}")

            except httpx.ConnectError as e:
                last_error = e
                logger.warning(
                    f"Connection error on attempt {attempt + 1}/{max_attempts} to {url}: {e}"
                )

            except httpx.HTTPStatusError as e:
                # Don't retry on HTTP errors - they're not transient
                logger.error(f"HTTP error from server: {e.response.status_code}")
                try:
                    return e.response.json()
                except ValueError:
                    return {"success": False, "error": str(e)}

            if attempt < max_attempts - 1:
                backoff = API_RETRY_BACKOFF_BASE * (2 ** attempt)
                logger.info(f"Retrying in {backoff}s...")
                self._sleep(backoff)

        error_msg = f"Server unreachable after {max_attempts} attempts"
        logger.error(f"{error_msg}: {last_error}")
        return {
            "success": False,
            "error": error_msg,
            "details": str(last_error) if last_error else "Unknown error",
        }

    # -------------------------------------------------------------------------
    # API Methods
    # -------------------------------------------------------------------------

    def health_check(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def analyze(self, sequence: List[float]) -> Dict[str, Any]:
        return self._request("POST", "/api/analyze", data={"sequence": sequence})

    def compare(self, sequence_a: List[float], sequence_b: List[float]) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/compare",
            data={"sequence1": sequence_a, "sequence2": sequence_b},
        )

    def get_history(self, limit: Optional[int] = None) -> Dict[str, Any]:
        params = {"limit": limit} if limit is not None else None
        return self._request("GET", "/api/history", params=params)

    def get_metrics(self) -> Dict[str, Any]:
        return self._request("GET", "/api/metrics")

    def clear_history(self) -> Dict[str, Any]:
        """Clear server history (no retries - changes state)."""
        return self._request("DELETE", "/api/history", action_name="clear_history")

    def get_logs(self, lines: int = 50) -> Dict[str, Any]:
        return self._request("GET", "/api/logs", params={"lines": lines})

    def clear_logs(self) -> Dict[str, Any]:
        """Truncate the server log (no retries - changes state)."""
        return self._request("DELETE", "/api/logs", action_name="clear_logs")

    def get_presets(self) -> Dict[str, Any]:
        return self._request("GET", "/api/presets")
