"""Lifecycle observers - log or fan out workflow events."""
from typing import Iterable, List, Optional

import structlog

from machete.domain.base.events import LifecycleError, LifecycleEvent
from machete.domain.base.ports import LifecycleObserverPort
from machete.infrastructure.logging.logger import get_logger


class LoggingLifecycleObserver(LifecycleObserverPort):
    """Log every lifecycle event for an audit trail."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or get_logger(__name__)

    def on_event(self, event: LifecycleEvent) -> None:
        log = self._logger.bind(
            event_id=event.event_id,
            operation=event.operation.value,
            instance_id=event.instance_id,
        )
        if isinstance(event, LifecycleError):
            log.error(
                f"Lifecycle {event.event_type}: {event.error_message}",
                error_kind=event.error_kind.value,
                error_type=type(event.error).__name__,
            )
        else:
            log.info(f"Lifecycle {event.event_type}", occurred_at=event.occurred_at.isoformat())


class CompositeLifecycleObserver(LifecycleObserverPort):
    """Forward each event to several observers.

    A failing observer is logged and skipped; the remaining observers and
    the workflow itself carry on.
    """

    def __init__(self, observers: Iterable[LifecycleObserverPort] = ()):
        self._observers: List[LifecycleObserverPort] = list(observers)
        self._logger = get_logger(__name__)

    def add(self, observer: LifecycleObserverPort) -> None:
        self._observers.append(observer)

    def on_event(self, event: LifecycleEvent) -> None:
        for observer in self._observers:
            try:
                observer.on_event(event)
            except Exception as e:
                self._logger.error(
                    f"Lifecycle observer {type(observer).__name__} failed for {event.event_type}: {e}"
                )
