"""Wait policy configuration schema."""
from pydantic import BaseModel, Field, field_validator


class WaitPolicyConfig(BaseModel):
    """Fixed-interval polling budget used while waiting on instance state.

    ``max_attempts * interval_seconds`` is the wall-clock budget of a wait.
    """

    max_attempts: int = Field(30, description="Number of state checks before giving up")
    interval_seconds: float = Field(10.0, description="Seconds between state checks")

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        """Validate attempt count."""
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v

    @field_validator("interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        """Validate polling interval."""
        if v < 0:
            raise ValueError("interval_seconds cannot be negative")
        return v

    @property
    def budget_seconds(self) -> float:
        return self.max_attempts * self.interval_seconds
