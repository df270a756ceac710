"""AWS handlers."""

from .ec2_instance_handler import EC2InstanceHandler

__all__ = ["EC2InstanceHandler"]
