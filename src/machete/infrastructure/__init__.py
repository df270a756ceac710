"""Infrastructure layer - polling, logging and lifecycle observers."""
