"""Creation and destruction workflows.

Each workflow object drives one run: it emits ``LifecycleStarted``, performs
its provider calls, and finishes with exactly one terminal event before the
stream is closed. Workflow objects are created per run and never shared.
"""
from abc import ABC, abstractmethod
from typing import Optional

from machete.application.lifecycle.event_stream import EventStream
from machete.config.schemas.wait_policy_schema import WaitPolicyConfig
from machete.domain.base.events import (
    LifecycleCompleted,
    LifecycleError,
    LifecycleEvent,
    LifecycleStarted,
)
from machete.domain.base.ports import ComputePort, LifecycleObserverPort
from machete.domain.core.exceptions import (
    InvalidRequestError,
    UnexpectedResponseError,
    ValidationError,
    WorkflowCancelledError,
)
from machete.domain.instance.request import CreateInstanceRequest
from machete.domain.instance.value_objects import ErrorKind, InstanceState, LifecycleOperation
from machete.infrastructure.logging.logger import get_logger
from machete.infrastructure.resilience import ConvergenceTimeoutError, SleepFunction, wait_until

logger = get_logger(__name__)


def classify_error(error: Exception) -> ErrorKind:
    """Map an exception raised during a run to its error classification."""
    if isinstance(error, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, UnexpectedResponseError):
        return ErrorKind.UNEXPECTED_RESPONSE
    if isinstance(error, InvalidRequestError):
        return ErrorKind.INVALID_REQUEST
    if isinstance(error, ConvergenceTimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, WorkflowCancelledError):
        return ErrorKind.CANCELLED
    return ErrorKind.PROVIDER


class LifecycleWorkflow(ABC):
    """Base class holding the event protocol shared by both workflows."""

    operation: LifecycleOperation

    def __init__(self,
                 compute: ComputePort,
                 wait_policy: WaitPolicyConfig,
                 sleep: Optional[SleepFunction],
                 observer: Optional[LifecycleObserverPort] = None):
        self._compute = compute
        self._wait_policy = wait_policy
        self._sleep = sleep
        self._observer = observer
        self.instance_id: Optional[str] = None

    def run(self, stream: EventStream) -> None:
        """Run the workflow to its terminal event, then close ``stream``."""
        try:
            self._emit(stream, LifecycleStarted(operation=self.operation, instance_id=self.instance_id))
            try:
                self._execute(stream)
            except Exception as e:
                self._emit(stream, LifecycleError(
                    operation=self.operation,
                    instance_id=self.instance_id,
                    error=e,
                    error_kind=classify_error(e),
                ))
                return
            self._emit(stream, LifecycleCompleted(operation=self.operation, instance_id=self.instance_id))
        finally:
            stream.close()

    @abstractmethod
    def _execute(self, stream: EventStream) -> None:
        """Perform the provider calls. Any exception becomes the terminal error."""

    def _emit(self, stream: EventStream, event: LifecycleEvent) -> None:
        if self._observer is not None:
            try:
                self._observer.on_event(event)
            except Exception as e:
                logger.error(f"Lifecycle observer failed for {event.event_type}: {e}")
        stream.send(event)

    def _check_cancelled(self, stream: EventStream) -> None:
        if stream.cancelled:
            raise WorkflowCancelledError(f"running the {self.operation.value} workflow")

    def _wait_for_state(self, stream: EventStream, instance_id: str, state: InstanceState) -> None:
        """Block until the instance reports ``state`` or the wait budget runs out."""
        def probe() -> bool:
            observed = self._compute.describe_instance(instance_id)
            logger.debug(f"Instance {instance_id} is {observed}, waiting for {state.value}")
            return InstanceState.matches(observed, state)

        attempts = wait_until(
            self._sleep or stream.cancel_token.wait,
            self._wait_policy.max_attempts,
            self._wait_policy.interval_seconds,
            probe,
            cancelled=stream.cancel_token,
            description=f"instance {instance_id} to be {state.value}",
        )
        logger.debug(f"Instance {instance_id} reached {state.value} after {attempts} attempts")


class CreateInstanceWorkflow(LifecycleWorkflow):
    """Launch one instance, wait for it to run, then tag it."""

    operation = LifecycleOperation.CREATE

    def __init__(self, request: CreateInstanceRequest, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._request = request

    def _execute(self, stream: EventStream) -> None:
        self._check_cancelled(stream)
        self.instance_id = self._compute.create_instance(self._request)
        logger.info(f"Launched instance {self.instance_id} from image {self._request.image_id}")

        self._wait_for_state(stream, self.instance_id, InstanceState.RUNNING)

        tags = self._request.sorted_tags()
        if tags:
            self._check_cancelled(stream)
            self._compute.create_tags(self.instance_id, tags)
            logger.info(f"Tagged instance {self.instance_id} with keys {[key for key, _ in tags]}")


class DestroyInstanceWorkflow(LifecycleWorkflow):
    """Terminate one instance and wait until it is gone."""

    operation = LifecycleOperation.DESTROY

    def __init__(self, instance_id: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.instance_id = instance_id

    def _execute(self, stream: EventStream) -> None:
        self._check_cancelled(stream)
        affected = self._compute.terminate_instance(self.instance_id)
        if affected != 1:
            # No match for the instance ID
            raise InvalidRequestError(self.instance_id, affected)
        logger.info(f"Terminating instance {self.instance_id}")

        self._wait_for_state(stream, self.instance_id, InstanceState.TERMINATED)
