"""Core domain: models, ports and the health check pipeline."""
