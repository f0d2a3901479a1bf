"""Core services: catalog, model registry, providers, graph generation and modification."""
