"""
Shared JSON-over-HTTP client with retry.

Wraps a requests.Session with per-call timeouts, maps transport and
HTTP failures onto UpstreamServiceError subclasses, and retries only
the failures marked retryable (timeouts, connection errors, 429, 5xx)
with exponential backoff.

Dependencies: requests, tenacity, zoning_search.core.exceptions
System role: Transport layer for Legistar, Reducto and Voyage clients
"""

import logging
from typing import Any

import requests
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from zoning_search.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

MAX_BACKOFF_SECONDS = 30.0
_ERROR_BODY_LIMIT = 500


def is_retryable(exc: BaseException) -> bool:
    """Retry predicate: only upstream errors flagged retryable."""
    return isinstance(exc, UpstreamServiceError) and exc.retryable


class BaseServiceClient:
    """Base class for external JSON API clients."""

    service_name = "upstream"
    error_cls: type[UpstreamServiceError] = UpstreamServiceError

    def __init__(
        self,
        timeout_seconds: float,
        max_retries: int = 3,
        retry_base_delay_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        """
        Args:
            timeout_seconds: Per-request timeout
            max_retries: Total attempts per call, including the first
            retry_base_delay_seconds: Backoff is base * 2^(attempt - 1)
            session: Optional preconfigured session (injected in tests)
        """
        self._timeout = timeout_seconds
        self._max_retries = max(1, max_retries)
        self._retry_base_delay = retry_base_delay_seconds
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def _retrying(self, operation: str) -> Retrying:
        return Retrying(
            retry=retry_if_exception(is_retryable),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._retry_base_delay, max=MAX_BACKOFF_SECONDS),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{self.service_name}.{operation} - Retry "
                f"{retry_state.attempt_number}/{self._max_retries} after "
                f"{retry_state.outcome.exception() if retry_state.outcome else 'error'}"
            ),
            reraise=True,
        )

    def _request_json(
        self,
        method: str,
        url: str,
        operation: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Send a request and decode its JSON body, retrying transient failures.

        Raises:
            UpstreamServiceError: (as error_cls) after the final failed attempt
        """
        for attempt in self._retrying(operation):
            with attempt:
                return self._send(method, url, json=json, params=params, headers=headers)
        raise self.error_cls(
            f"{self.service_name} {operation} produced no result", service=self.service_name
        )

    def _send(
        self,
        method: str,
        url: str,
        *,
        json: Any,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> Any:
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            raise self.error_cls(
                f"{self.service_name} request timed out after {self._timeout}s",
                service=self.service_name,
                retryable=True,
            ) from e
        except requests.ConnectionError as e:
            raise self.error_cls(
                f"{self.service_name} connection failed: {e}",
                service=self.service_name,
                retryable=True,
            ) from e
        except requests.RequestException as e:
            raise self.error_cls(
                f"{self.service_name} request failed: {e}",
                service=self.service_name,
            ) from e

        status = response.status_code
        if status >= 400:
            raise self.error_cls(
                f"{self.service_name} API error: {status} - {response.text[:_ERROR_BODY_LIMIT]}",
                service=self.service_name,
                status_code=status,
                retryable=status == 429 or status >= 500,
            )

        try:
            return response.json()
        except ValueError as e:
            raise self.error_cls(
                f"{self.service_name} returned a non-JSON response",
                service=self.service_name,
                status_code=status,
            ) from e
