"""Request/response schemas for catalog products."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from jewelry_api.schemas.common import Pagination

Availability = Literal["YES", "NO"]

PRODUCT_NAME_MIN_LEN = 2
PRODUCT_NAME_MAX_LEN = 255
GRAMS_MAX_LEN = 50
CATEGORY_MIN_LEN = 2
CATEGORY_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 2000
MAX_PAGE_SIZE = 100


class ProductOut(BaseModel):
    """Product as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    grams: str
    wastage: int
    category: str
    description: str | None = None
    availability: Availability
    image: str | None = Field(default=None, description="Stored filename under /uploads/products")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    product: ProductOut


class ProductListResponse(BaseModel):
    data: list[ProductOut]
    pagination: Pagination


class CategoriesResponse(BaseModel):
    categories: list[str]
