"""Lifecycle event observers."""

from .observers import CompositeLifecycleObserver, LoggingLifecycleObserver

__all__ = ["CompositeLifecycleObserver", "LoggingLifecycleObserver"]
