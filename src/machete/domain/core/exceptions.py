# src/machete/domain/core/exceptions.py
from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation fails."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class RequestValidationError(ValidationError):
    """Raised when a creation request fails its precondition checks."""
    def __init__(self, errors: Dict[str, str]):
        summary = "; ".join(f"{field}: {reason}" for field, reason in sorted(errors.items()))
        super().__init__(f"Request validation failed: {summary}", errors)
        self.errors = errors


class UnexpectedResponseError(DomainException):
    """Raised when a provider call succeeds but does not describe exactly one resource."""
    def __init__(self, operation: str, resource_count: Optional[int] = None):
        if resource_count is None:
            message = f"Unexpected response from {operation}"
        else:
            message = f"Unexpected response from {operation}: expected 1 resource, got {resource_count}"
        super().__init__(message)
        self.operation = operation
        self.resource_count = resource_count


class InvalidRequestError(DomainException):
    """Raised when an identifier does not match exactly one real resource."""
    def __init__(self, instance_id: str, affected_count: int = 0):
        super().__init__(
            f"Invalid request for instance {instance_id}: "
            f"{affected_count} instances affected"
        )
        self.instance_id = instance_id
        self.affected_count = affected_count


class WorkflowCancelledError(DomainException):
    """Raised when a running workflow observes its cancellation token."""
    def __init__(self, context: str):
        super().__init__(f"Cancelled while {context}")
        self.context = context
