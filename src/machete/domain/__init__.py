"""Domain layer - requests, instance states, lifecycle events and ports."""
