"""AWS provider infrastructure."""
