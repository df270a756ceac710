"""Main application configuration schema."""
from pydantic import BaseModel, Field

from .logging_schema import LoggingConfig
from .provider_schema import AWSProviderConfig
from .wait_policy_schema import WaitPolicyConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0", description="Configuration version")
    provider: AWSProviderConfig
    wait_policy: WaitPolicyConfig = Field(default_factory=lambda: WaitPolicyConfig())
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
