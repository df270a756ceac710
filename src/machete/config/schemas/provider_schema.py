"""AWS provider configuration schema."""
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_REGION_PATTERN = re.compile(r'^[a-z]{2}(-[a-z]+)+-\d$')


class AWSProviderConfig(BaseModel):
    """Configuration used to build the EC2 client behind the provisioner.

    Static credentials are optional. When they are absent boto3 resolves
    credentials through its own chain (environment, shared files, instance
    role).
    """

    region: str = Field(..., description="AWS region, e.g. us-east-1")
    access_key_id: Optional[str] = Field(None, repr=False, description="Static access key ID")
    secret_access_key: Optional[str] = Field(None, repr=False, description="Static secret access key")
    session_token: Optional[str] = Field(None, repr=False, description="Session token for temporary credentials")
    profile: Optional[str] = Field(None, description="Shared-credentials profile name")
    endpoint_url: Optional[str] = Field(None, description="Override the EC2 endpoint")
    max_retries: int = Field(5, description="botocore transport retry attempts")
    connect_timeout_ms: int = Field(10000, description="Connection timeout in milliseconds")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        """Validate region format."""
        v = v.strip()
        if not _REGION_PATTERN.match(v):
            raise ValueError(f"Invalid AWS region: {v!r}")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries cannot be negative")
        return v

    @field_validator("connect_timeout_ms")
    @classmethod
    def validate_connect_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("connect_timeout_ms must be positive")
        return v

    @model_validator(mode="after")
    def validate_static_credentials(self) -> "AWSProviderConfig":
        """Static credentials must be given as a pair."""
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError("access_key_id and secret_access_key must be set together")
        if self.session_token and not self.access_key_id:
            raise ValueError("session_token requires access_key_id and secret_access_key")
        return self

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)
