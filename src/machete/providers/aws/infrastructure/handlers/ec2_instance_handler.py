"""EC2 Instance Handler.

This module provides the EC2 implementation of the compute port used by the
lifecycle workflows. Every call addresses exactly one instance, and every
response is checked against that: a response describing any other number of
instances is reported as an unexpected response.

Classes:
    EC2InstanceHandler: RunInstances / DescribeInstances / TerminateInstances /
        CreateTags for a single instance

Note:
    Transport-level retries are left to botocore (see AWSClient). The handler
    itself never retries; the workflows decide what happens on failure.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog
from botocore.exceptions import ClientError

from machete.domain.base.ports import ComputePort
from machete.domain.core.exceptions import UnexpectedResponseError
from machete.domain.instance.request import CreateInstanceRequest
from machete.infrastructure.logging.logger import get_logger
from machete.providers.aws.exceptions import AWSEntityNotFoundError, convert_client_error
from machete.providers.aws.infrastructure.aws_client import AWSClient
from machete.providers.aws.infrastructure.handlers.components import (
    InstanceTagBuilder,
    RunInstancesConfigBuilder,
)


class EC2InstanceHandler(ComputePort):
    """Handler for single-instance EC2 operations."""

    def __init__(self, aws_client: AWSClient, logger: Optional[structlog.stdlib.BoundLogger] = None):
        """
        Initialize the EC2 instance handler.

        Args:
            aws_client: AWS client instance
            logger: Logger for logging messages
        """
        self.aws_client = aws_client
        self._logger = logger or get_logger(__name__)

    def create_instance(self, request: CreateInstanceRequest) -> str:
        """
        Launch one EC2 instance with RunInstances.

        Returns:
            The new instance ID

        Raises:
            UnexpectedResponseError: If the reservation does not hold exactly one instance
            AWSError: For AWS API errors
        """
        instance_config = RunInstancesConfigBuilder.build(request)
        self._logger.debug(f"RunInstances configuration: {instance_config}")

        response = self._call(self.aws_client.ec2_client.run_instances, "RunInstances", **instance_config)

        instances = (response or {}).get('Instances') or []
        if len(instances) != 1:
            raise UnexpectedResponseError("RunInstances", len(instances))

        instance_id = instances[0]['InstanceId']
        self._logger.info(f"Launched instance {instance_id}, reservation {response.get('ReservationId')}")
        return instance_id

    def describe_instance(self, instance_id: str) -> str:
        """
        Return the state name of one instance.

        Raises:
            UnexpectedResponseError: If the response does not describe exactly one instance
            AWSError: For AWS API errors
        """
        response = self._call(
            self.aws_client.ec2_client.describe_instances,
            "DescribeInstances",
            InstanceIds=[instance_id]
        )

        reservations = response.get('Reservations') or []
        if len(reservations) != 1:
            raise UnexpectedResponseError("DescribeInstances", len(reservations))
        instances = reservations[0].get('Instances') or []
        if len(instances) != 1:
            raise UnexpectedResponseError("DescribeInstances", len(instances))

        return instances[0]['State']['Name']

    def terminate_instance(self, instance_id: str) -> int:
        """
        Request termination of one instance.

        An instance ID EC2 does not know is reported as zero instances
        affected rather than as an API error.

        Returns:
            Number of instances transitioning to terminated
        """
        try:
            response = self._call(
                self.aws_client.ec2_client.terminate_instances,
                "TerminateInstances",
                InstanceIds=[instance_id]
            )
        except AWSEntityNotFoundError:
            self._logger.warning(f"Instance {instance_id} not found, nothing to terminate")
            return 0

        terminating: List[Dict[str, Any]] = response.get('TerminatingInstances') or []
        return len(terminating)

    def create_tags(self, instance_id: str, tags: List[Tuple[str, str]]) -> None:
        """Apply tags to one instance, in the order given."""
        self._call(
            self.aws_client.ec2_client.create_tags,
            "CreateTags",
            Resources=[instance_id],
            Tags=InstanceTagBuilder.build_tags(tags)
        )

    def _call(self, func: Callable[..., Dict[str, Any]], operation_name: str, **kwargs) -> Dict[str, Any]:
        """Invoke an EC2 API method, converting botocore errors to provider exceptions."""
        try:
            return func(**kwargs)
        except ClientError as e:
            error = convert_client_error(e, operation_name)
            self._logger.error(f"{operation_name} failed: {str(error)}")
            raise error from e
