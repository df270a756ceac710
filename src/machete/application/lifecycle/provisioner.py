"""Provisioner - entry point for instance lifecycle workflows.

``create_instance`` and ``destroy_instance`` return an ``EventStream``
immediately and run the workflow on its own thread. The stream always
yields ``LifecycleStarted`` first and exactly one terminal event last.
"""
from typing import Callable, Dict, Optional, Union

from machete._package import PROVISIONER_NAME, PROVISIONER_VERSION
from machete.application.lifecycle.event_stream import EventStream
from machete.application.lifecycle.workflows import CreateInstanceWorkflow, DestroyInstanceWorkflow
from machete.config.schemas.wait_policy_schema import WaitPolicyConfig
from machete.domain.base.events import LifecycleEvent
from machete.domain.base.ports import ComputePort, LifecycleObserverPort
from machete.domain.core.exceptions import ValidationError
from machete.domain.instance.request import CreateInstanceRequest
from machete.domain.instance.value_objects import LifecycleOperation, TaskType
from machete.infrastructure.events import LoggingLifecycleObserver
from machete.infrastructure.logging.logger import get_logger
from machete.infrastructure.resilience import SleepFunction

logger = get_logger(__name__)

EventSink = Callable[[LifecycleEvent], None]
TaskHandler = Callable[[CreateInstanceRequest, EventSink], None]

DEFAULT_WORKFLOW = (
    TaskType.SSH_KEY_GEN,
    TaskType.CREATE_INSTANCE,
    TaskType.USER_DATA,
    TaskType.INSTALL_DOCKER_ENGINE,
)


def new_machine_request(**fields) -> CreateInstanceRequest:
    """
    Return a canonical machine request for this provisioner.

    The request carries the provisioner identity and the standard workflow
    steps; any keyword argument overrides the matching request field.
    """
    fields.setdefault("provisioner", PROVISIONER_NAME)
    fields.setdefault("provisioner_version", PROVISIONER_VERSION)
    fields.setdefault("workflow", DEFAULT_WORKFLOW)
    return CreateInstanceRequest(**fields)


class Provisioner:
    """Creates and destroys instances through a compute port.

    The provisioner holds no per-run state, so one instance can serve any
    number of concurrent workflows.
    """

    def __init__(self,
                 compute: ComputePort,
                 observer: Optional[LifecycleObserverPort] = None,
                 wait_policy: Optional[WaitPolicyConfig] = None,
                 sleep_function: Optional[SleepFunction] = None):
        """
        Args:
            compute: Compute provider the workflows call
            observer: Notified of every event; defaults to logging them
            wait_policy: Polling budget for state waits (30 x 10s by default)
            sleep_function: Called between poll attempts; by default each
                run waits on its stream's cancel token, so cancel() wakes it
        """
        self.compute = compute
        self.observer = observer if observer is not None else LoggingLifecycleObserver()
        self.wait_policy = wait_policy or WaitPolicyConfig()
        self.sleep_function = sleep_function
        self._task_handlers: Dict[TaskType, Optional[TaskHandler]] = {
            TaskType.SSH_KEY_GEN: None,
            TaskType.CREATE_INSTANCE: self._handle_create_instance,
            TaskType.USER_DATA: None,
            TaskType.INSTALL_DOCKER_ENGINE: None,
        }

    def new_request(self, **fields) -> CreateInstanceRequest:
        """Canonical machine request for this provisioner."""
        return new_machine_request(**fields)

    def create_instance(self, request: CreateInstanceRequest) -> EventStream:
        """
        Start a creation workflow.

        Raises:
            RequestValidationError: If the request fails validation; no
                workflow is started and no events are produced
        """
        request.validate()

        stream = EventStream(LifecycleOperation.CREATE)
        workflow = CreateInstanceWorkflow(
            request, self.compute, self.wait_policy, self.sleep_function, self.observer
        )
        stream.start(workflow.run, name=f"machete-create-{request.image_id}")
        return stream

    def destroy_instance(self, instance_id: str) -> EventStream:
        """
        Start a destruction workflow.

        Raises:
            ValidationError: If ``instance_id`` is empty
        """
        if not instance_id:
            raise ValidationError("Instance ID is required")

        stream = EventStream(LifecycleOperation.DESTROY)
        workflow = DestroyInstanceWorkflow(
            instance_id, self.compute, self.wait_policy, self.sleep_function, self.observer
        )
        stream.start(workflow.run, name=f"machete-destroy-{instance_id}")
        return stream

    def get_task_handler(self, task_type: Union[TaskType, str]) -> Optional[TaskHandler]:
        """Return the handler for ``task_type``, or None if this provisioner does not run it."""
        try:
            return self._task_handlers.get(TaskType(task_type))
        except ValueError:
            return None

    def _handle_create_instance(self, request: CreateInstanceRequest, emit: EventSink) -> None:
        """Run a creation workflow to completion, forwarding each event to ``emit``."""
        logger.info(f"Create instance task: image={request.image_id} type={request.instance_type}")
        for event in self.create_instance(request):
            emit(event)
