"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (dev, test, prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a trivial query against the store",
    )
    timestamp: datetime = Field(description="Server time (UTC) when the check ran")
