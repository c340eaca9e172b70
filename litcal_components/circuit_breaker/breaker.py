"""
Circuit Breaker Transport
=========================
Transport decorator that fails fast after consecutive failures.

Recovery is evaluated lazily: an OPEN circuit only moves to HALF_OPEN when
a call arrives after `recovery_timeout` has elapsed.
"""

import itertools
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional

from litcal_components.http.base import Body, Headers, HttpClient
from litcal_components.http.exceptions import CircuitOpenError, TransportError
from litcal_components.http.response import Response
from litcal_components.logging import NULL_LOGGER
from litcal_components.metrics import record_circuit_state

from .models import CircuitBreakerConfig, CircuitBreakerState, CircuitState

# Default names, unique per process, label the circuit state gauge
_breaker_ids = itertools.count(1)


class CircuitBreakerTransport(HttpClient):
    """
    Circuit breaker around another transport.

    Transport errors count as failures, as do responses whose status is in
    `failure_status_codes` (those responses are still returned).

    `name` labels the state gauge; when omitted each breaker gets its own
    `litcal-api-<n>` name so breakers never share a series.

    Example:
        breaker = CircuitBreakerTransport(HttpxTransport(), failure_threshold=3)

        try:
            response = breaker.get(url)
        except CircuitOpenError:
            response = fallback()
    """

    def __init__(
        self,
        client: HttpClient,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        success_threshold: int = 2,
        logger=None,
        clock: Optional[Callable[[], float]] = None,
        failure_status_codes: Iterable[int] = (),
        name: Optional[str] = None,
    ):
        self._client = client
        self.name = name or f"litcal-api-{next(_breaker_ids)}"
        self.config = CircuitBreakerConfig(
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            success_threshold=success_threshold,
            failure_status_codes=frozenset(failure_status_codes),
        )
        self._logger = logger if logger is not None else NULL_LOGGER
        self._clock = clock or time.time
        self._state = CircuitBreakerState()
        self._lock = threading.Lock()
        record_circuit_state(self.name, self._state.state.value)

    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        return self._state.state

    @property
    def failure_count(self) -> int:
        return self._state.failure_count

    @property
    def metrics(self) -> Dict[str, Any]:
        """Get circuit breaker metrics."""
        return {
            "name": self.name,
            "state": self._state.state.value,
            "failure_count": self._state.failure_count,
            "success_count": self._state.success_count,
            "total_calls": self._state.total_calls,
            "total_failures": self._state.total_failures,
            "total_successes": self._state.total_successes,
            "total_rejections": self._state.total_rejections,
            "last_failure": self._state.last_failure_time,
        }

    def get(self, url: str, headers: Headers = None) -> Response:
        return self._call("GET", url, lambda: self._client.get(url, headers))

    def post(self, url: str, body: Body, headers: Headers = None) -> Response:
        return self._call("POST", url, lambda: self._client.post(url, body, headers))

    def close(self) -> None:
        self._client.close()

    def reset(self) -> None:
        """Force the circuit CLOSED with all counters zeroed."""
        with self._lock:
            self._state.state = CircuitState.CLOSED
            self._state.failure_count = 0
            self._state.success_count = 0
            self._state.last_failure_time = None
        record_circuit_state(self.name, CircuitState.CLOSED.value)
        self._logger.info("circuit_reset", breaker=self.name)

    def _call(self, method: str, url: str, send: Callable[[], Response]) -> Response:
        self._before_call(method, url)

        try:
            response = send()
        except TransportError:
            self._on_failure()
            raise

        if response.status_code in self.config.failure_status_codes:
            self._logger.warning(
                "circuit_failure_status",
                breaker=self.name,
                url=url,
                status_code=response.status_code,
                state=self._state.state.value,
            )
            self._on_failure()
            return response

        self._on_success()
        return response

    def _before_call(self, method: str, url: str) -> None:
        with self._lock:
            self._update_state()
            if self._state.state != CircuitState.OPEN:
                return

            self._state.total_rejections += 1
            elapsed = self._clock() - (self._state.last_failure_time or 0)
            retry_after = max(0.0, self.config.recovery_timeout - elapsed)
            failure_count = self._state.failure_count

        self._logger.warning(
            "circuit_open_rejected",
            breaker=self.name,
            method=method,
            url=url,
            failure_count=failure_count,
        )
        raise CircuitOpenError(
            url=url,
            method=method,
            state=CircuitState.OPEN.value,
            retry_after=retry_after,
        )

    def _update_state(self) -> None:
        """OPEN -> HALF_OPEN once the recovery timeout has elapsed. Caller holds the lock."""
        if self._state.state != CircuitState.OPEN or self._state.last_failure_time is None:
            return

        elapsed = self._clock() - self._state.last_failure_time
        if elapsed >= self.config.recovery_timeout:
            self._transition(CircuitState.HALF_OPEN)
            self._state.success_count = 0
            self._logger.info(
                "circuit_half_open",
                breaker=self.name,
                time_since_failure=elapsed,
                recovery_timeout=self.config.recovery_timeout,
            )

    def _on_success(self) -> None:
        with self._lock:
            self._state.total_calls += 1
            self._state.total_successes += 1

            if self._state.state == CircuitState.HALF_OPEN:
                self._state.success_count += 1
                self._logger.debug(
                    "circuit_half_open_success",
                    breaker=self.name,
                    success_count=self._state.success_count,
                    success_threshold=self.config.success_threshold,
                )
                if self._state.success_count >= self.config.success_threshold:
                    successes = self._state.success_count
                    self._transition(CircuitState.CLOSED)
                    self._state.failure_count = 0
                    self._state.success_count = 0
                    self._state.last_failure_time = None
                    self._logger.info("circuit_closed", breaker=self.name, successes=successes)

            elif self._state.state == CircuitState.CLOSED and self._state.failure_count > 0:
                self._state.failure_count = 0
                self._logger.debug("circuit_failure_count_reset", breaker=self.name)

    def _on_failure(self) -> None:
        with self._lock:
            self._state.total_calls += 1
            self._state.total_failures += 1
            self._state.failure_count += 1
            self._state.last_failure_time = self._clock()

            if self._state.state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
                self._state.success_count = 0
                self._logger.warning(
                    "circuit_reopened",
                    breaker=self.name,
                    failure_count=self._state.failure_count,
                )

            elif self._state.state == CircuitState.CLOSED:
                if self._state.failure_count >= self.config.failure_threshold:
                    self._transition(CircuitState.OPEN)
                    self._logger.error(
                        "circuit_opened",
                        breaker=self.name,
                        failure_count=self._state.failure_count,
                        failure_threshold=self.config.failure_threshold,
                    )
                else:
                    self._logger.debug(
                        "circuit_failure_recorded",
                        breaker=self.name,
                        failure_count=self._state.failure_count,
                        failure_threshold=self.config.failure_threshold,
                    )

    def _transition(self, state: CircuitState) -> None:
        self._state.state = state
        record_circuit_state(self.name, state.value)
