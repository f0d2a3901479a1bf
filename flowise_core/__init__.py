"""Workflow graph construction, configuration and validation for Flowise agents."""

__version__ = "0.1.0"
