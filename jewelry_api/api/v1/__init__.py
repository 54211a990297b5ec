"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from jewelry_api.api.v1 import auth, designs, products

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(designs.router, prefix="/designs", tags=["designs"])
router.include_router(products.router, prefix="/products", tags=["products"])
