"""Resilience exceptions."""
from typing import Optional


class RetryError(Exception):
    """Base exception for retry and polling failures."""


class ConvergenceTimeoutError(RetryError):
    """Raised when a probe is still unsatisfied after every allowed attempt."""

    def __init__(self, attempts: int, interval: float, description: Optional[str] = None):
        target = description or "condition"
        super().__init__(
            f"Timed out waiting for {target} after {attempts} attempts "
            f"at {interval:g}s intervals"
        )
        self.attempts = attempts
        self.interval = interval
        self.description = description
