"""Lifecycle event models."""

from .lifecycle_events import (
    LifecycleCompleted,
    LifecycleError,
    LifecycleEvent,
    LifecycleStarted,
    TerminalEvent,
)

__all__ = [
    "LifecycleEvent",
    "LifecycleStarted",
    "LifecycleCompleted",
    "LifecycleError",
    "TerminalEvent",
]
