"""Request/response schemas for custom design requests."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DesignStatus = Literal["pending", "in_progress", "completed", "rejected"]

DESIGN_NAME_MIN_LEN = 2
DESIGN_NAME_MAX_LEN = 255
MATERIAL_MIN_LEN = 2
MATERIAL_MAX_LEN = 255
MIN_APPROXIMATE_WEIGHT = 0.1
DESCRIPTION_MAX_LEN = 2000


class DesignOut(BaseModel):
    """Custom design request as returned to its owner or an admin."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    design_name: str
    material_preference: str
    approximate_weight: float
    description: str | None = None
    reference_image: str | None = Field(
        default=None, description="Stored filename under /uploads/designs"
    )
    status: DesignStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AdminDesignOut(DesignOut):
    """Design joined with the submitting user's name and email (admin listing)."""

    user_name: str | None = None
    user_email: str | None = None


class DesignResponse(BaseModel):
    design: DesignOut


class DesignListResponse(BaseModel):
    designs: list[DesignOut]
    count: int


class AdminDesignListResponse(BaseModel):
    designs: list[AdminDesignOut]
    count: int


class DesignStatusUpdate(BaseModel):
    """Body for PUT /designs/{id}/status (admin)."""

    status: DesignStatus
