"""Instance lifecycle orchestration."""

from .event_stream import EventStream, EventStreamClosedError
from .provisioner import DEFAULT_WORKFLOW, Provisioner, new_machine_request
from .workflows import CreateInstanceWorkflow, DestroyInstanceWorkflow, classify_error

__all__ = [
    "EventStream",
    "EventStreamClosedError",
    "Provisioner",
    "new_machine_request",
    "DEFAULT_WORKFLOW",
    "CreateInstanceWorkflow",
    "DestroyInstanceWorkflow",
    "classify_error",
]
