"""
Retry Decorator
===============
Re-issues failed requests with linear or exponential backoff.

Transport errors are re-raised once retries are exhausted, whereas a
response carrying a retryable status is handed back to the caller as-is:
the server answered, the network did not.
"""

import time
from typing import Callable, Iterable, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from litcal_components.logging import NULL_LOGGER

from .base import Body, Headers, HttpClient
from .exceptions import TransportError
from .response import Response

DEFAULT_RETRY_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class RetryTransport(HttpClient):
    """
    Transport decorator with bounded retries.

    Args:
        client: Wrapped transport
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        retry_delay_ms: Base delay in milliseconds
        exponential_backoff: Delay doubles per retry when True, constant otherwise
        retry_status_codes: Response statuses that trigger a retry
        logger: structlog-style logger; silent when omitted
        sleep: Blocking sleep taking seconds, replaceable in tests
    """

    def __init__(
        self,
        client: HttpClient,
        max_retries: int = 3,
        retry_delay_ms: int = 1000,
        exponential_backoff: bool = True,
        retry_status_codes: Iterable[int] = DEFAULT_RETRY_STATUS_CODES,
        logger=None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._client = client
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.exponential_backoff = exponential_backoff
        self.retry_status_codes = frozenset(retry_status_codes)
        self._logger = logger if logger is not None else NULL_LOGGER
        self._sleep = sleep or time.sleep

    def get(self, url: str, headers: Headers = None) -> Response:
        return self._execute_with_retry(lambda: self._client.get(url, headers), "GET", url)

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        return self._execute_with_retry(lambda: self._client.post(url, body, headers), "POST", url)

    def close(self) -> None:
        self._client.close()

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay before retry number `attempt` (1-based)."""
        if self.exponential_backoff:
            return self.retry_delay_ms * (2 ** (attempt - 1))
        return self.retry_delay_ms

    def _wait_strategy(self):
        base_seconds = self.retry_delay_ms / 1000
        if self.exponential_backoff:
            return wait_exponential(multiplier=base_seconds, exp_base=2)
        return wait_fixed(base_seconds)

    def _is_retryable_response(self, response: Response) -> bool:
        return response.status_code in self.retry_status_codes

    def _execute_with_retry(
        self,
        request: Callable[[], Response],
        method: str,
        url: str,
    ) -> Response:
        attempts = 0

        def attempt() -> Response:
            nonlocal attempts
            attempts += 1
            return request()

        def before_sleep(retry_state: RetryCallState) -> None:
            outcome = retry_state.outcome
            context = {
                "method": method,
                "url": url,
                "attempt": retry_state.attempt_number,
                "max_retries": self.max_retries,
            }
            if outcome.failed:
                self._logger.warning("http_retry", reason="error", error=str(outcome.exception()), **context)
            else:
                self._logger.warning("http_retry", reason="status", status_code=outcome.result().status_code, **context)
            self._logger.debug(
                "http_retry_sleep",
                attempt=retry_state.attempt_number,
                delay_ms=round(retry_state.next_action.sleep * 1000),
                backoff="exponential" if self.exponential_backoff else "linear",
            )

        def on_exhausted(retry_state: RetryCallState) -> Response:
            outcome = retry_state.outcome
            if outcome.failed:
                self._logger.error(
                    "http_retry_exhausted",
                    method=method,
                    url=url,
                    attempts=retry_state.attempt_number,
                    max_retries=self.max_retries,
                    error=str(outcome.exception()),
                )
            # Re-raises the last TransportError, or returns the last response
            return outcome.result()

        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait_strategy(),
            retry=(
                retry_if_exception_type(TransportError)
                | retry_if_result(self._is_retryable_response)
            ),
            before_sleep=before_sleep,
            retry_error_callback=on_exhausted,
            sleep=self._sleep,
        )
        response = retrying(attempt)

        if attempts > 1:
            if self._is_retryable_response(response):
                self._logger.warning(
                    "http_retry_exhausted",
                    method=method,
                    url=url,
                    attempts=attempts,
                    max_retries=self.max_retries,
                    status_code=response.status_code,
                )
            else:
                self._logger.info(
                    "http_retry_succeeded",
                    method=method,
                    url=url,
                    attempts=attempts,
                    retries=attempts - 1,
                    status_code=response.status_code,
                )
        return response
