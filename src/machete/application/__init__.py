"""Application layer - lifecycle workflows and the provisioner."""
