"""
Quillnote Backend — Circuit Breaker
=====================================

What:  Per-provider circuit breaker guarding outbound LLM calls.
Why:   When a provider is down, requests fail instantly instead of each one
       waiting through timeouts and retries.

State Machine:
    CLOSED (normal operation)
        → On failure: increment failure_count
        → When failure_count >= threshold: transition to OPEN

    OPEN (rejecting all requests)
        → All calls raise CircuitBreakerOpenError immediately
        → After recovery_timeout seconds: transition to HALF_OPEN

    HALF_OPEN (testing recovery)
        → Allow ONE request through
        → On success: transition to CLOSED (reset failure_count)
        → On failure: transition back to OPEN (reset timer)

Thread Safety:
    Plain counters, no locks. uvicorn async workers run in a single process
    and event loop, so there is no concurrent mutation within a worker.
    Each worker process keeps its own breaker.
"""

import logging
import time
from typing import Optional

from quillnote.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)


class CircuitBreaker:
    """Counts consecutive failures and short-circuits calls while OPEN."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60, name: str = "llm"):
        """
        Args:
            failure_threshold: Consecutive failures before opening circuit
            recovery_timeout: Seconds to wait before testing recovery
            name: Label used in log lines (the provider name)
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.name = name
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None
        # Set while the single HALF_OPEN trial call is outstanding
        self.trial_started: Optional[float] = None

    def can_execute(self) -> bool:
        """
        Check if a request is allowed through the circuit breaker.

        Returns:
            True if the request can proceed (CLOSED, or the one HALF_OPEN trial).

        Raises:
            CircuitBreakerOpenError if circuit is OPEN and the recovery timeout
            hasn't elapsed, or a HALF_OPEN trial is already in flight.
            A trial that never reports back frees its slot after
            recovery_timeout seconds.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info(
                    "Circuit breaker [%s] transitioning to HALF_OPEN after %.1fs",
                    self.name,
                    elapsed,
                )
                self.state = self.HALF_OPEN
                self.trial_started = time.time()
                return True
            remaining = max(int(self.recovery_timeout - elapsed), 1)
            raise CircuitBreakerOpenError(
                recovery_time=remaining,
                context={"provider": self.name},
            )

        # HALF_OPEN: only one trial at a time
        now = time.time()
        if self.trial_started is not None:
            waited = now - self.trial_started
            if waited < self.recovery_timeout:
                raise CircuitBreakerOpenError(
                    recovery_time=max(int(self.recovery_timeout - waited), 1),
                    context={"provider": self.name},
                )
        self.trial_started = now
        return True

    def record_success(self) -> None:
        """Record a successful call. Resets the breaker to CLOSED."""
        if self.state == self.HALF_OPEN:
            logger.info("Circuit breaker [%s] transitioning to CLOSED (service recovered)", self.name)
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None
        self.trial_started = None

    def record_failure(self) -> None:
        """Record a failed call. May trigger CLOSED → OPEN."""
        self.failure_count += 1
        self.last_failure_time = time.time()
        self.trial_started = None

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit breaker [%s] returning to OPEN (test request failed)", self.name)
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit breaker [%s] OPENING after %d consecutive failures",
                self.name,
                self.failure_count,
            )
            self.state = self.OPEN
