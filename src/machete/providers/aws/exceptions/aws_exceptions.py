"""AWS provider exceptions and botocore error conversion."""
from typing import Any, Optional

from botocore.exceptions import ClientError

from machete.infrastructure.exceptions import InfrastructureError


class AWSError(InfrastructureError):
    """Raised when AWS operations fail."""
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.error_code = error_code

class AWSValidationError(AWSError):
    """Raised when AWS rejects request parameters."""
    pass

class QuotaExceededError(AWSError):
    """Raised when AWS service quotas are exceeded."""
    pass

class ResourceInUseError(AWSError):
    """Raised when a resource is in use by another operation."""
    pass

class AuthorizationError(AWSError):
    """Raised when the caller is not allowed to perform an operation."""
    pass

class RateLimitError(AWSError):
    """Raised when AWS throttles requests."""
    pass

class AWSEntityNotFoundError(AWSError):
    """Raised when an AWS resource cannot be found."""
    pass

class NetworkError(AWSError):
    """Raised when AWS cannot be reached or times out."""
    pass


def convert_client_error(error: ClientError, operation_name: str = "unknown") -> AWSError:
    """Convert AWS ClientError to a provider exception."""
    error_code = error.response.get('Error', {}).get('Code', 'Unknown')
    error_message = error.response.get('Error', {}).get('Message', str(error))
    message = f"{operation_name} failed: {error_message}"

    if error_code in ['ValidationError', 'InvalidParameterValue', 'InvalidParameterCombination',
                      'MissingParameter', 'InvalidAMIID.Malformed', 'InvalidAMIID.NotFound']:
        return AWSValidationError(message, error_code)
    elif error_code in ['LimitExceeded', 'InstanceLimitExceeded', 'InsufficientInstanceCapacity']:
        return QuotaExceededError(message, error_code)
    elif error_code in ['ResourceInUse', 'IncorrectInstanceState']:
        return ResourceInUseError(message, error_code)
    elif error_code in ['UnauthorizedOperation', 'AccessDenied', 'AuthFailure']:
        return AuthorizationError(message, error_code)
    elif error_code in ['RequestLimitExceeded', 'Throttling']:
        return RateLimitError(message, error_code)
    elif error_code in ['ResourceNotFound', 'InvalidInstanceID.NotFound', 'InvalidInstanceID.Malformed']:
        return AWSEntityNotFoundError(message, error_code)
    elif error_code in ['RequestTimeout', 'ServiceUnavailable', 'Unavailable']:
        return NetworkError(message, error_code)
    else:
        return AWSError(f"AWS Error: {error_code} - {message}", error_code)
