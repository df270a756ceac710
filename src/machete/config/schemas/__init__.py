"""Configuration schemas."""

from .app_schema import AppConfig
from .logging_schema import LoggingConfig
from .provider_schema import AWSProviderConfig
from .wait_policy_schema import WaitPolicyConfig

__all__ = ["AppConfig", "AWSProviderConfig", "LoggingConfig", "WaitPolicyConfig"]
