"""
Circuit Breaker Models
======================
State enum, configuration and runtime state for the circuit breaker.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from enum import Enum


class CircuitState(str, Enum):
    """Circuit breaker states."""
    CLOSED = "closed"        # Normal operation
    OPEN = "open"            # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing recovery


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """Configuration for a circuit breaker."""
    failure_threshold: int = 5        # Consecutive failures before opening
    recovery_timeout: float = 60.0    # Seconds to stay open before half-open
    success_threshold: int = 2        # Successes to close from half-open
    failure_status_codes: FrozenSet[int] = field(default_factory=frozenset)


@dataclass
class CircuitBreakerState:
    """Runtime state of a circuit breaker."""
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    success_count: int = 0
    last_failure_time: Optional[float] = None

    # Metrics
    total_calls: int = 0
    total_failures: int = 0
    total_successes: int = 0
    total_rejections: int = 0
