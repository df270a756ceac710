"""AWS provider wiring - build a provisioner backed by EC2."""

from typing import Dict, Optional

import boto3

from machete.application.lifecycle.provisioner import Provisioner
from machete.config.manager import ConfigurationManager
from machete.config.schemas import AppConfig
from machete.domain.base.ports import LifecycleObserverPort
from machete.infrastructure.logging.logger import get_logger
from machete.providers.aws.infrastructure.aws_client import AWSClient
from machete.providers.aws.infrastructure.handlers import EC2InstanceHandler

logger = get_logger(__name__)


def create_aws_provisioner(app_config: AppConfig,
                           observer: Optional[LifecycleObserverPort] = None,
                           session: Optional[boto3.Session] = None,
                           validate_credentials: bool = False) -> Provisioner:
    """
    Create an EC2-backed provisioner from configuration.

    Args:
        app_config: Validated application configuration
        observer: Optional lifecycle observer; defaults to logging events
        session: Optional boto3 session to build the EC2 client from
        validate_credentials: Call STS once before returning

    Returns:
        Configured Provisioner instance

    Raises:
        InfrastructureError: If credential validation was requested and failed
    """
    aws_client = AWSClient(app_config.provider, session=session)
    if validate_credentials:
        identity = aws_client.validate_credentials()
        logger.info(f"Using AWS identity {identity}")

    return Provisioner(
        EC2InstanceHandler(aws_client),
        observer=observer,
        wait_policy=app_config.wait_policy,
    )


def build_provisioner(params: Dict[str, str],
                      observer: Optional[LifecycleObserverPort] = None) -> Provisioner:
    """
    Build a provisioner from a flat parameter map.

    ``REGION`` is required; ``ACCESS_KEY``, ``SECRET_KEY``, ``SESSION_TOKEN``,
    ``RETRIES`` and ``ENDPOINT_URL`` are optional.

    Raises:
        ConfigurationError: If the parameters are missing or invalid
    """
    config_manager = ConfigurationManager.from_params(params)
    return create_aws_provisioner(config_manager.app_config, observer=observer)
