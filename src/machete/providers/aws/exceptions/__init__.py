"""AWS provider exceptions."""

from .aws_exceptions import (
    AWSEntityNotFoundError,
    AWSError,
    AWSValidationError,
    AuthorizationError,
    NetworkError,
    QuotaExceededError,
    RateLimitError,
    ResourceInUseError,
    convert_client_error,
)

__all__: list[str] = [
    "AWSEntityNotFoundError",
    "AWSError",
    "AWSValidationError",
    "AuthorizationError",
    "NetworkError",
    "QuotaExceededError",
    "RateLimitError",
    "ResourceInUseError",
    "convert_client_error",
]
