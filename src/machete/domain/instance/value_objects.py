"""Instance lifecycle value objects.

Provider states, task types making up a machine workflow, the two lifecycle
operations and the error classification carried on error events.
"""
from enum import Enum
from typing import Union

from machete.domain.core.exceptions import ValidationError


class InstanceState(str, Enum):
    """EC2 instance state names.

    Providers may report states outside this set; those pass through as
    plain strings and are compared by value.
    """
    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    STOPPING = "stopping"
    STOPPED = "stopped"

    @classmethod
    def matches(cls, observed: Union[str, "InstanceState"], expected: Union[str, "InstanceState"]) -> bool:
        """Compare an observed state against an expected one by string value."""
        return _state_value(observed) == _state_value(expected)


def _state_value(state: Union[str, InstanceState]) -> str:
    if isinstance(state, InstanceState):
        return state.value
    return str(state)


class TaskType(str, Enum):
    """Steps of a machine workflow, in the order a scheduler runs them."""
    SSH_KEY_GEN = "ssh-key-gen"
    CREATE_INSTANCE = "create-instance"
    USER_DATA = "user-data"
    INSTALL_DOCKER_ENGINE = "install-docker-engine"

    @classmethod
    def validate(cls, value: str) -> None:
        if value not in [e.value for e in cls]:
            raise ValidationError(f"Invalid task type: {value}")


class LifecycleOperation(str, Enum):
    """Lifecycle operation a workflow performs."""
    CREATE = "create"
    DESTROY = "destroy"


class ErrorKind(str, Enum):
    """Classification carried on lifecycle error events."""
    VALIDATION = "validation"
    UNEXPECTED_RESPONSE = "unexpected_response"
    INVALID_REQUEST = "invalid_request"
    PROVIDER = "provider"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
