"""Instance domain - creation requests and lifecycle value objects."""

from .request import CreateInstanceRequest
from .value_objects import ErrorKind, InstanceState, LifecycleOperation, TaskType

__all__ = [
    "CreateInstanceRequest",
    "ErrorKind",
    "InstanceState",
    "LifecycleOperation",
    "TaskType",
]
