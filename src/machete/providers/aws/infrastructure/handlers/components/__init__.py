"""AWS handler components."""

from .instance_tag_builder import InstanceTagBuilder
from .run_instances_config_builder import RunInstancesConfigBuilder

__all__ = ["InstanceTagBuilder", "RunInstancesConfigBuilder"]
