"""Lifecycle events reported on a workflow's event stream."""
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from machete.domain.instance.value_objects import ErrorKind, LifecycleOperation


class LifecycleEvent(BaseModel):
    """Base class for all lifecycle events."""
    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str
    operation: LifecycleOperation
    instance_id: Optional[str] = None

    def __init__(self, **data):
        # Set event_type based on class name if not provided
        if 'event_type' not in data or not data['event_type']:
            data['event_type'] = self.__class__.__name__
        super().__init__(**data)

    @property
    def is_terminal(self) -> bool:
        return False


class LifecycleStarted(LifecycleEvent):
    """First event of every workflow run."""


class LifecycleCompleted(LifecycleEvent):
    """Terminal event of a successful run."""

    @property
    def is_terminal(self) -> bool:
        return True


class LifecycleError(LifecycleEvent):
    """Terminal event of a failed run, carrying the error and its classification."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    error: Exception
    error_kind: ErrorKind

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def error_message(self) -> str:
        return str(self.error)


TerminalEvent = Union[LifecycleCompleted, LifecycleError]
