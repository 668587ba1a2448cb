"""Domain layer — addresses, operations, metadata, and forms.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, plugins, or config.
"""
