import boto3
from botocore.config import Config
from typing import Any, Dict, Optional

from machete.config.schemas.provider_schema import AWSProviderConfig
from machete.infrastructure.exceptions import InfrastructureError
from machete.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

class AWSClient:
    """
    Centralized AWS client management.
    Builds the boto3 EC2 client used by the compute handler.
    """

    def __init__(self, config: AWSProviderConfig, session: Optional[boto3.Session] = None):
        """
        Initialize AWS client with configuration.

        Args:
            config: AWS provider configuration
            session: Optional pre-built boto3 session. When omitted, a session is
                created from the static credentials in ``config`` or, without
                them, from boto3's default credential chain.
        """
        self.region_name = config.region
        self.endpoint_url = config.endpoint_url
        self.config = Config(
            region_name=config.region,
            retries={
                'max_attempts': config.max_retries,
                'mode': 'standard'
            },
            connect_timeout=config.connect_timeout_ms / 1000
        )

        self.session = session or boto3.Session(**self._session_kwargs(config))
        self.ec2_client = self.session.client('ec2', config=self.config, endpoint_url=config.endpoint_url)
        logger.debug(f"Created EC2 client for region {self.region_name}")

    @staticmethod
    def _session_kwargs(config: AWSProviderConfig) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {'region_name': config.region}
        if config.has_static_credentials:
            kwargs['aws_access_key_id'] = config.access_key_id
            kwargs['aws_secret_access_key'] = config.secret_access_key
            if config.session_token:
                kwargs['aws_session_token'] = config.session_token
        elif config.profile:
            kwargs['profile_name'] = config.profile
        return kwargs

    def validate_credentials(self) -> str:
        """
        Check that the resolved credentials are usable.

        Returns:
            The ARN of the calling identity

        Raises:
            InfrastructureError: If AWS credentials validation fails
        """
        try:
            sts = self.session.client('sts', config=self.config)
            return sts.get_caller_identity()['Arn']
        except Exception as e:
            logger.error(f"Failed to validate AWS credentials: {str(e)}")
            raise InfrastructureError(f"Failed to validate AWS credentials: {str(e)}")
