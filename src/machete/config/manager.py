"""Configuration loading for the provisioner."""
from __future__ import annotations
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from machete.config.schemas import AppConfig, AWSProviderConfig, LoggingConfig, WaitPolicyConfig
from machete.config.utils.env_expansion import expand_env_vars
from machete.infrastructure.exceptions import ConfigurationError
from machete.infrastructure.logging.logger import get_logger

T = TypeVar('T', bound=BaseModel)
logger = get_logger(__name__)

# Flat parameter names accepted by ConfigurationManager.from_params
PARAM_REGION = "REGION"
PARAM_ACCESS_KEY = "ACCESS_KEY"
PARAM_SECRET_KEY = "SECRET_KEY"
PARAM_SESSION_TOKEN = "SESSION_TOKEN"
PARAM_RETRIES = "RETRIES"
PARAM_ENDPOINT_URL = "ENDPOINT_URL"


class ConfigurationManager:
    """
    Single source of truth for application configuration.

    Configuration can come from a dictionary, a JSON or YAML file, or the
    flat ``REGION`` / ``ACCESS_KEY`` / ... parameter map a scheduler passes
    to a provisioner builder. Environment references in string values are
    expanded before validation.
    """

    def __init__(self, config_data: Dict[str, Any]):
        self._raw = config_data
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @classmethod
    def from_file(cls, path: str) -> ConfigurationManager:
        """
        Load configuration from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                if config_path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        logger.debug(f"Loaded configuration from {path}")
        return cls(data)

    @classmethod
    def from_params(cls, params: Dict[str, str]) -> ConfigurationManager:
        """
        Build configuration from a flat parameter map.

        Raises:
            ConfigurationError: If REGION is missing or RETRIES is not an integer
        """
        region = params.get(PARAM_REGION, "")
        if not region:
            raise ConfigurationError(f"{PARAM_REGION} must be specified", details={"missing": [PARAM_REGION]})

        provider: Dict[str, Any] = {"region": region}
        optional = {
            PARAM_ACCESS_KEY: "access_key_id",
            PARAM_SECRET_KEY: "secret_access_key",
            PARAM_SESSION_TOKEN: "session_token",
            PARAM_ENDPOINT_URL: "endpoint_url",
        }
        for param, field_name in optional.items():
            if params.get(param):
                provider[field_name] = params[param]

        if params.get(PARAM_RETRIES):
            try:
                provider["max_retries"] = int(params[PARAM_RETRIES])
            except ValueError as e:
                raise ConfigurationError(f"{PARAM_RETRIES} must be an integer, got {params[PARAM_RETRIES]!r}") from e

        return cls({"provider": provider})

    @property
    def app_config(self) -> AppConfig:
        """Validated application configuration, built on first access."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._build(AppConfig, expand_env_vars(self._raw))
        return self._app_config

    @property
    def provider(self) -> AWSProviderConfig:
        return self.app_config.provider

    @property
    def wait_policy(self) -> WaitPolicyConfig:
        return self.app_config.wait_policy

    @property
    def logging(self) -> LoggingConfig:
        return self.app_config.logging

    @staticmethod
    def _build(config_type: Type[T], data: Dict[str, Any]) -> T:
        try:
            return config_type.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid {config_type.__name__}: {e}", details=e.errors()) from e
