"""
Circuit Breaker
===============
Fail-fast guard for the Liturgical Calendar API transport stack.

States:

1. CLOSED: Normal operation, requests flow through
2. OPEN: Service is failing, requests are immediately rejected
3. HALF-OPEN: Testing if service has recovered

Usage:
    from litcal_components.circuit_breaker import CircuitBreakerTransport
    from litcal_components.http import CircuitOpenError, HttpxTransport

    breaker = CircuitBreakerTransport(HttpxTransport(), failure_threshold=5)
"""

from .models import (
    CircuitState,
    CircuitBreakerConfig,
    CircuitBreakerState,
)

from .breaker import CircuitBreakerTransport

__all__ = [
    # Models
    "CircuitState",
    "CircuitBreakerConfig",
    "CircuitBreakerState",
    # Transport
    "CircuitBreakerTransport",
]
