"""Domain base package - lifecycle events and ports."""
