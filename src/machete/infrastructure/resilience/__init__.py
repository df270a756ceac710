"""Infrastructure resilience package - bounded polling."""

from .exceptions import ConvergenceTimeoutError, RetryError
from .poller import Probe, SleepFunction, wait_until

__all__: list[str] = [
    "wait_until",
    "Probe",
    "SleepFunction",
    "RetryError",
    "ConvergenceTimeoutError",
]
