"""The ``{ok, data, error, errors, meta}`` wrapper every endpoint returns."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

FieldErrors = Dict[str, List[str]]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResponseMeta(BaseModel):
    generated_at: str = Field(default_factory=_utc_now)
    company_id: Optional[int] = None
    total: Optional[int] = None
    cache_hit: bool = False
    elapsed_ms: Optional[float] = None
    warnings: List[str] = Field(default_factory=list)


class ApiResponse(BaseModel):
    """Response body shared by success and failure paths.

    ``errors`` maps a field name to its messages and is only set when a
    request failed validation.
    """

    ok: bool = True
    data: Any = None
    error: Optional[str] = None
    errors: Optional[FieldErrors] = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)

    @classmethod
    def success(cls, data: Any, **meta: Any) -> "ApiResponse":
        return cls(data=data, meta=ResponseMeta(**meta))

    @classmethod
    def from_cached(cls, data: Any, **meta: Any) -> "ApiResponse":
        meta.setdefault("elapsed_ms", 0.0)
        return cls(data=data, meta=ResponseMeta(cache_hit=True, **meta))

    @classmethod
    def fail(cls, error: str, errors: Optional[FieldErrors] = None, **meta: Any) -> "ApiResponse":
        return cls(ok=False, error=error, errors=errors, meta=ResponseMeta(**meta))
