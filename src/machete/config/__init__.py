"""Configuration package - schemas. Loading lives in ``machete.config.manager``."""

from .schemas import AppConfig, AWSProviderConfig, LoggingConfig, WaitPolicyConfig

__all__ = [
    "AppConfig",
    "AWSProviderConfig",
    "LoggingConfig",
    "WaitPolicyConfig",
]
