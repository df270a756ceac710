"""Machete - EC2 Instance Lifecycle Provisioner.

This package provisions and decommissions EC2 instances on behalf of a
higher-level orchestrator. Each create or destroy call runs on its own
worker thread and reports progress through an event stream instead of a
single blocking call.

Key Components:
    - domain: Requests, instance states, lifecycle events and ports
    - application: Creation/destruction workflows and the provisioner
    - infrastructure: Bounded poller, logging and lifecycle observers
    - providers: The AWS implementation of the compute port
    - config: pydantic configuration schemas and loading

Usage:
    >>> from machete.providers.aws.registration import build_provisioner
    >>> provisioner = build_provisioner({"REGION": "us-east-1"})
    >>> stream = provisioner.create_instance(request)
    >>> for event in stream:
    ...     print(event.event_type)
"""

from ._package import PACKAGE_NAME, __version__

__package_name__ = PACKAGE_NAME
