"""AWS provider - EC2 implementation of the compute port."""
