"""Pydantic request/response schemas."""

from jewelry_api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    Principal,
    RegisterRequest,
)
from jewelry_api.schemas.common import ErrorResponse, MessageResponse, Pagination
from jewelry_api.schemas.design import (
    AdminDesignListResponse,
    AdminDesignOut,
    DesignListResponse,
    DesignOut,
    DesignResponse,
    DesignStatusUpdate,
)
from jewelry_api.schemas.health import HealthResponse
from jewelry_api.schemas.product import (
    CategoriesResponse,
    ProductListResponse,
    ProductOut,
    ProductResponse,
)

__all__ = [
    "AdminDesignListResponse",
    "AdminDesignOut",
    "AuthResponse",
    "CategoriesResponse",
    "DesignListResponse",
    "DesignOut",
    "DesignResponse",
    "DesignStatusUpdate",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "Pagination",
    "Principal",
    "ProductListResponse",
    "ProductOut",
    "ProductResponse",
    "RegisterRequest",
]
