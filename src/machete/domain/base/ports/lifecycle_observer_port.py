"""Port for observing lifecycle events."""

from abc import ABC, abstractmethod

from machete.domain.base.events import LifecycleEvent


class LifecycleObserverPort(ABC):
    """Notified with every event a workflow emits, before the consumer sees it."""

    @abstractmethod
    def on_event(self, event: LifecycleEvent) -> None:
        """Handle a single lifecycle event."""
