"""Document collection implementations."""
