import threading
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from machete.application.lifecycle.provisioner import Provisioner
from machete.config.schemas import WaitPolicyConfig
from machete.domain.base.events import LifecycleEvent
from machete.domain.base.ports import ComputePort, LifecycleObserverPort
from machete.domain.instance.request import CreateInstanceRequest


class FakeCompute(ComputePort):
    """In-memory compute port.

    Each created instance reports ``pending`` for ``running_after - 1``
    probes and ``running`` afterwards. Terminated instances report
    ``shutting-down`` for ``terminated_after - 1`` probes.
    """

    def __init__(self, running_after: int = 1, terminated_after: int = 1,
                 terminate_count: Optional[int] = None):
        self.running_after = running_after
        self.terminated_after = terminated_after
        self.terminate_count = terminate_count
        self.create_error: Optional[Exception] = None
        self.describe_error: Optional[Exception] = None
        self.terminate_error: Optional[Exception] = None
        self.tag_error: Optional[Exception] = None
        self.state_override: Optional[str] = None

        self.create_calls: List[CreateInstanceRequest] = []
        self.describe_calls: List[str] = []
        self.terminate_calls: List[str] = []
        self.tag_calls: List[Tuple[str, List[Tuple[str, str]]]] = []

        self._lock = threading.Lock()
        self._counter = 0
        self._probes: Dict[str, int] = {}
        self._terminating: Dict[str, bool] = {}

    def create_instance(self, request: CreateInstanceRequest) -> str:
        with self._lock:
            self.create_calls.append(request)
            if self.create_error:
                raise self.create_error
            self._counter += 1
            instance_id = f"i-{self._counter:03d}"
            self._probes[instance_id] = 0
            self._terminating[instance_id] = False
            return instance_id

    def describe_instance(self, instance_id: str) -> str:
        with self._lock:
            self.describe_calls.append(instance_id)
            if self.describe_error:
                raise self.describe_error
            if self.state_override is not None:
                return self.state_override
            self._probes[instance_id] = self._probes.get(instance_id, 0) + 1
            probes = self._probes[instance_id]
            if self._terminating.get(instance_id):
                return "terminated" if probes >= self.terminated_after else "shutting-down"
            return "running" if probes >= self.running_after else "pending"

    def terminate_instance(self, instance_id: str) -> int:
        with self._lock:
            self.terminate_calls.append(instance_id)
            if self.terminate_error:
                raise self.terminate_error
            self._terminating[instance_id] = True
            self._probes[instance_id] = 0
            return 1 if self.terminate_count is None else self.terminate_count

    def create_tags(self, instance_id: str, tags: List[Tuple[str, str]]) -> None:
        with self._lock:
            self.tag_calls.append((instance_id, list(tags)))
            if self.tag_error:
                raise self.tag_error


class FakeSleep:
    """Records requested sleeps instead of waiting."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class RecordingObserver(LifecycleObserverPort):
    def __init__(self):
        self.events: List[LifecycleEvent] = []

    def on_event(self, event: LifecycleEvent) -> None:
        self.events.append(event)


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture
def fake_compute():
    return FakeCompute()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def recording_observer():
    return RecordingObserver()


@pytest.fixture
def wait_policy():
    return WaitPolicyConfig()


@pytest.fixture
def provisioner(fake_compute, fake_sleep, recording_observer, wait_policy):
    return Provisioner(
        fake_compute,
        observer=recording_observer,
        wait_policy=wait_policy,
        sleep_function=fake_sleep,
    )


@pytest.fixture
def basic_request():
    return CreateInstanceRequest(image_id="img-1", instance_type="t.small", tags={"env": "dev"})


def event_types(events: Sequence[LifecycleEvent]) -> List[str]:
    return [event.event_type for event in events]


@pytest.fixture
def types_of():
    """Map a list of events to their event_type names."""
    return event_types
