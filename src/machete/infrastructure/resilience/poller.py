"""Bounded fixed-interval poller.

Repeatedly evaluates a probe until it reports success, raises, or the
attempt budget runs out. ``max_attempts * interval`` is the hard wall-clock
budget for a wait; there is no backoff.
"""
import threading
from typing import Callable, Optional

from machete.domain.core.exceptions import WorkflowCancelledError
from machete.infrastructure.resilience.exceptions import ConvergenceTimeoutError

Probe = Callable[[], bool]
SleepFunction = Callable[[float], None]


def wait_until(sleep: SleepFunction,
               max_attempts: int,
               interval: float,
               probe: Probe,
               cancelled: Optional[threading.Event] = None,
               description: Optional[str] = None) -> int:
    """
    Poll ``probe`` until it returns True.

    Errors raised by the probe are never retried; they propagate on the
    attempt that raised them.

    Args:
        sleep: Called with ``interval`` between attempts
        max_attempts: Total number of probe calls allowed
        interval: Seconds between attempts
        probe: Returns True once the desired condition holds
        cancelled: Checked before every attempt
        description: Used in the timeout message

    Returns:
        The attempt number (1-based) on which the probe succeeded

    Raises:
        ConvergenceTimeoutError: If every attempt returned False
        WorkflowCancelledError: If ``cancelled`` is set before an attempt
        ValueError: If the budget is not usable
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
    if interval < 0:
        raise ValueError(f"interval cannot be negative, got {interval}")

    for attempt in range(1, max_attempts + 1):
        if cancelled is not None and cancelled.is_set():
            raise WorkflowCancelledError(f"waiting for {description or 'condition'}")
        if probe():
            return attempt
        if attempt < max_attempts:
            sleep(interval)

    raise ConvergenceTimeoutError(max_attempts, interval, description)
