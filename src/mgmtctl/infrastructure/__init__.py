"""Infrastructure layer — dispatcher, in-process model, metadata, context.

This layer depends on the domain layer and third-party libs (pydantic, pluggy).
It must never import from output.
"""
