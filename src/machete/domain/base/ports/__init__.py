"""Domain ports - interfaces the application layer depends on."""

from .compute_port import ComputePort
from .lifecycle_observer_port import LifecycleObserverPort

__all__ = ["ComputePort", "LifecycleObserverPort"]
