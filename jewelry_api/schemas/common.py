"""Shared response schemas: errors, pagination and plain messages."""

import math
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response produced by the app's exception handlers."""

    success: bool = False
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    errors: list[dict[str, Any]] | None = None


class MessageResponse(BaseModel):
    message: str


class Pagination(BaseModel):
    current_page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def build(cls, page: int, per_page: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            per_page=per_page,
            total=total,
            total_pages=math.ceil(total / per_page) if per_page else 0,
        )


def page_offset(page: int, per_page: int) -> int:
    """Row offset for a 1-based page number."""
    return (page - 1) * per_page
