"""
Unit Tests for the Retry Decorator
==================================
Tests for retry counts, backoff delays and exhaustion behaviour.
"""

import pytest
import structlog
from structlog.testing import capture_logs

from conftest import StubTransport
from litcal_components.http import Response, RetryTransport, TransportError


class TestRetryTransport:
    """Tests for RetryTransport."""

    def test_success_is_not_retried(self, sleeps):
        """Should call the inner transport once when the first attempt succeeds."""
        inner = StubTransport(Response(200))
        client = RetryTransport(inner, sleep=sleeps)

        assert client.get("https://example.org/").status_code == 200
        assert inner.call_count == 1
        assert sleeps.delays == []

    def test_exhausted_status_returns_last_response(self, sleeps):
        """A retryable status on every attempt should be returned after max_retries + 1 calls."""
        inner = StubTransport(Response(503))
        client = RetryTransport(inner, max_retries=3, retry_delay_ms=1000, sleep=sleeps)

        response = client.get("https://example.org/")

        assert response.status_code == 503
        assert inner.call_count == 4
        assert sleeps.delays == [1.0, 2.0, 4.0]

    def test_exhausted_transport_error_is_raised(self, sleeps):
        """A transport error on every attempt should be re-raised after max_retries + 1 calls."""
        inner = StubTransport(TransportError("connection refused"))
        client = RetryTransport(inner, max_retries=3, sleep=sleeps)

        with pytest.raises(TransportError, match="connection refused"):
            client.get("https://example.org/")

        assert inner.call_count == 4
        assert len(sleeps.delays) == 3

    def test_linear_backoff(self, sleeps):
        """Should wait the base delay before every retry when backoff is linear."""
        inner = StubTransport(Response(500))
        client = RetryTransport(
            inner, max_retries=3, retry_delay_ms=250, exponential_backoff=False, sleep=sleeps
        )

        client.get("https://example.org/")

        assert sleeps.delays == [0.25, 0.25, 0.25]

    def test_recovers_after_failures(self, sleeps):
        """Should return the first non-retryable response."""
        inner = StubTransport(TransportError("reset"), Response(503), Response(200, {}, "ok"))
        client = RetryTransport(inner, max_retries=3, retry_delay_ms=100, sleep=sleeps)

        response = client.get("https://example.org/")

        assert response.text == "ok"
        assert inner.call_count == 3
        assert sleeps.delays == pytest.approx([0.1, 0.2])

    def test_non_retryable_status_is_returned(self, sleeps):
        """Statuses outside the retry set should be returned immediately."""
        inner = StubTransport(Response(404))
        client = RetryTransport(inner, sleep=sleeps)

        assert client.get("https://example.org/").status_code == 404
        assert inner.call_count == 1

    def test_custom_retry_status_codes(self, sleeps):
        """Should retry only the configured statuses."""
        inner = StubTransport(Response(503))
        client = RetryTransport(inner, max_retries=2, retry_status_codes={418}, sleep=sleeps)

        assert client.get("https://example.org/").status_code == 503
        assert inner.call_count == 1

    def test_other_exceptions_propagate_without_retry(self, sleeps):
        """Exceptions that are not transport errors should not be retried."""
        inner = StubTransport(RuntimeError("bug"))
        client = RetryTransport(inner, sleep=sleeps)

        with pytest.raises(RuntimeError):
            client.get("https://example.org/")

        assert inner.call_count == 1

    def test_zero_retries(self, sleeps):
        """max_retries=0 should make exactly one attempt."""
        inner = StubTransport(TransportError("down"))
        client = RetryTransport(inner, max_retries=0, sleep=sleeps)

        with pytest.raises(TransportError):
            client.get("https://example.org/")

        assert inner.call_count == 1
        assert sleeps.delays == []

    def test_negative_retries_rejected(self):
        """Should reject a negative retry count."""
        with pytest.raises(ValueError):
            RetryTransport(StubTransport(), max_retries=-1)

    def test_post_is_retried(self, sleeps):
        """Should retry POST requests with the same body."""
        inner = StubTransport(Response(502), Response(201))
        client = RetryTransport(inner, sleep=sleeps)

        response = client.post("https://example.org/api", {"year": 2024})

        assert response.status_code == 201
        assert [call[3] for call in inner.calls] == [{"year": 2024}, {"year": 2024}]

    def test_backoff_delay_ms(self):
        """Should double the delay per retry with exponential backoff."""
        client = RetryTransport(StubTransport(), retry_delay_ms=1000)

        assert [client.backoff_delay_ms(n) for n in (1, 2, 3)] == [1000, 2000, 4000]

        client.exponential_backoff = False
        assert client.backoff_delay_ms(3) == 1000

    def test_retry_events_are_logged(self, sleeps):
        """Should log one warning per retry and a success summary."""
        inner = StubTransport(TransportError("timeout"), TransportError("timeout"), Response(200))

        with capture_logs() as logs:
            client = RetryTransport(inner, max_retries=2, logger=structlog.get_logger(), sleep=sleeps)
            client.get("https://example.org/")

        retries = [entry for entry in logs if entry["event"] == "http_retry"]
        assert len(retries) == 2
        assert all(entry["log_level"] == "warning" for entry in retries)
        assert [entry["attempt"] for entry in retries] == [1, 2]

        succeeded = [entry for entry in logs if entry["event"] == "http_retry_succeeded"]
        assert len(succeeded) == 1
        assert succeeded[0]["retries"] == 2

    def test_exhaustion_is_logged(self, sleeps):
        """Should log exhaustion for both errors and statuses."""
        with capture_logs() as logs:
            logger = structlog.get_logger()
            RetryTransport(StubTransport(Response(503)), max_retries=1, logger=logger, sleep=sleeps).get(
                "https://example.org/"
            )
            with pytest.raises(TransportError):
                RetryTransport(
                    StubTransport(TransportError("down")), max_retries=1, logger=logger, sleep=sleeps
                ).get("https://example.org/")

        exhausted = [entry for entry in logs if entry["event"] == "http_retry_exhausted"]
        assert [entry["log_level"] for entry in exhausted] == ["warning", "error"]
        assert exhausted[0]["status_code"] == 503

    def test_close_propagates(self):
        """Should close the inner transport."""
        inner = StubTransport()
        RetryTransport(inner).close()

        assert inner.closed is True
