"""Event stream - hands lifecycle events from a workflow thread to its caller.

The stream is a rendezvous channel: ``send`` returns only once the consumer
has taken the event, so a slow consumer throttles the workflow and no event
is ever dropped. The producer closes the stream exactly once, after its
terminal event, and iteration ends there.

A cancelled stream whose consumer leaves a hand-off pending for
``ABANDON_GRACE_SECONDS`` is abandoned: remaining hand-offs give up so the
workflow thread can finish instead of blocking forever.
"""
import queue
import threading
import time
from typing import Any, Callable, Iterator, List, Optional

from machete.domain.base.events import LifecycleEvent
from machete.domain.instance.value_objects import LifecycleOperation
from machete.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

_CLOSED = object()
_POLL_SECONDS = 0.05
ABANDON_GRACE_SECONDS = 0.25


class EventStreamClosedError(RuntimeError):
    """Raised when a producer sends on a stream it has already finished."""


class EventStream:
    """Single-producer, single-consumer stream of lifecycle events."""

    def __init__(self, operation: LifecycleOperation):
        self.operation = operation
        self._queue: queue.Queue = queue.Queue(maxsize=1)
        self._cancelled = threading.Event()
        self._terminal_sent = False
        self._producer_closed = False
        self._drained = False
        self._abandoned = False
        self._abandon_at: Optional[float] = None
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------ #
    # Producer side
    # ------------------------------------------------------------------ #
    def start(self, target: Callable[["EventStream"], None], name: Optional[str] = None) -> None:
        """Run ``target(self)`` on a new daemon thread."""
        if self._thread is not None:
            raise RuntimeError("Event stream already started")
        self._thread = threading.Thread(
            target=target,
            args=(self,),
            name=name or f"machete-{self.operation.value}",
            daemon=True,
        )
        self._thread.start()

    def send(self, event: LifecycleEvent) -> None:
        """Block until the consumer has taken ``event``."""
        if self._producer_closed or self._terminal_sent:
            raise EventStreamClosedError(
                f"Cannot send {event.event_type} after the stream has finished"
            )
        if event.is_terminal:
            self._terminal_sent = True
        if not (self._put(event) and self._wait_consumed()):
            logger.warning(f"Dropped {event.event_type}: stream was cancelled and is no longer read")

    def close(self) -> None:
        """Mark the end of the stream. Safe to call more than once."""
        if self._producer_closed:
            return
        self._producer_closed = True
        self._put(_CLOSED)

    @property
    def cancel_token(self) -> threading.Event:
        return self._cancelled

    def _put(self, item: Any) -> bool:
        while not self._should_abandon():
            try:
                self._queue.put(item, timeout=_POLL_SECONDS)
                self._abandon_at = None
                return True
            except queue.Full:
                continue
        return False

    def _wait_consumed(self) -> bool:
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                if self._should_abandon():
                    return False
                self._queue.all_tasks_done.wait(_POLL_SECONDS)
        self._abandon_at = None
        return True

    def _should_abandon(self) -> bool:
        if self._abandoned:
            return True
        if not self._cancelled.is_set():
            return False
        now = time.monotonic()
        if self._abandon_at is None:
            self._abandon_at = now + ABANDON_GRACE_SECONDS
        if now >= self._abandon_at:
            self._abandoned = True
        return self._abandoned

    # ------------------------------------------------------------------ #
    # Consumer side
    # ------------------------------------------------------------------ #
    def __iter__(self) -> Iterator[LifecycleEvent]:
        while not self._drained:
            try:
                item = self._queue.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                if self._abandoned:
                    self._drained = True
                continue
            self._queue.task_done()
            if item is _CLOSED:
                self._drained = True
                return
            yield item

    def collect(self) -> List[LifecycleEvent]:
        """Consume the remaining events and return them in send order."""
        return list(self)

    def cancel(self) -> None:
        """Ask the workflow to stop at its next provider call or poll attempt.

        The workflow still ends with a terminal error event, so the stream
        should be drained as usual. A consumer that stops reading instead
        releases the workflow thread after ``ABANDON_GRACE_SECONDS``.
        """
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def closed(self) -> bool:
        """True once the consumer has read the end of the stream."""
        return self._drained

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the workflow thread. Returns False if it is still running."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()
