"""Application layer: orchestrators, commands and queries."""
