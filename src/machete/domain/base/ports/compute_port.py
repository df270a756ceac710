"""Domain port for compute provider operations."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from machete.domain.instance.request import CreateInstanceRequest


class ComputePort(ABC):
    """Instance-management calls the lifecycle workflows depend on.

    Implementations must be safe for concurrent use: several workflows may
    call the same instance from different threads.
    """

    @abstractmethod
    def create_instance(self, request: CreateInstanceRequest) -> str:
        """
        Launch exactly one instance described by the request.

        Returns:
            The provider-assigned instance ID

        Raises:
            UnexpectedResponseError: If the response does not describe exactly one instance
        """

    @abstractmethod
    def describe_instance(self, instance_id: str) -> str:
        """
        Return the current state name of one instance.

        Raises:
            UnexpectedResponseError: If the response does not describe exactly one instance
        """

    @abstractmethod
    def terminate_instance(self, instance_id: str) -> int:
        """Request termination and return the number of instances transitioning."""

    @abstractmethod
    def create_tags(self, instance_id: str, tags: List[Tuple[str, str]]) -> None:
        """Apply tags, in the given order, to one instance."""
