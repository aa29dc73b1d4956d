"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: Script runs and sessions return ServiceResult.  Domain errors are
raised inside the service and converted here; they never escape to the CLI.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from udpcomm.domain.errors import UdpcommError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: UdpcommError, **detail: Any) -> ServiceError:
        """Build an error payload from a typed udpcomm exception."""
        return cls(code=exc.code, message=exc.message, detail={**exc.detail, **detail})


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"run_script"``).
        data: Operation-specific payload (also populated on failure).
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
