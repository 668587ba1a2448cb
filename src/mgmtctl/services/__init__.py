"""Service layer — console orchestration returning ServiceResult.

Services may import from domain, infrastructure, and plugins.
They must never import from output.
"""
