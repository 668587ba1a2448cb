"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: Every user action handled by the service layer ends in exactly
one ServiceResult, delivered directly or through a Future.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# --- Error codes ---

REMOTE_FAILURE = "REMOTE_FAILURE"
CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
EMPTY_SELECTION = "EMPTY_SELECTION"
VALIDATION_FAILED = "VALIDATION_FAILED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"save"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (addresses, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
