"""Pydantic schemas and static registration tables."""
