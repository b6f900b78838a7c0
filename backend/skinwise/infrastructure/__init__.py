"""Infrastructure adapters (inference providers, persistence)."""
