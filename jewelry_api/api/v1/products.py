"""Product catalog: public listing/reads, admin-only create/update/delete with image upload."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from jewelry_api.api.deps import AdminPrincipal, SingleFileUpload, save_upload
from jewelry_api.core.database import get_db
from jewelry_api.core.errors import NotFound, ValidationError
from jewelry_api.core.uploads import UploadCategory, UploadStore, get_upload_store
from jewelry_api.models import Product
from jewelry_api.schemas.common import MessageResponse, Pagination, page_offset
from jewelry_api.schemas.product import (
    CATEGORY_MAX_LEN,
    CATEGORY_MIN_LEN,
    DESCRIPTION_MAX_LEN,
    GRAMS_MAX_LEN,
    MAX_PAGE_SIZE,
    PRODUCT_NAME_MAX_LEN,
    PRODUCT_NAME_MIN_LEN,
    Availability,
    CategoriesResponse,
    ProductListResponse,
    ProductOut,
    ProductResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Product images always land in the products directory, whatever the request says.
UPLOAD_CATEGORY = UploadCategory.PRODUCTS
IMAGE_FIELD = "image"
product_image = SingleFileUpload(IMAGE_FIELD)


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


@router.get("", response_model=ProductListResponse)
def list_products(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 10,
    category: str | None = None,
    availability: Availability | None = None,
) -> ProductListResponse:
    """List products newest first, optionally filtered by category and availability."""
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if availability:
        query = query.filter(Product.availability == availability)

    total = query.count()
    products = (
        query.order_by(Product.created_at.desc(), Product.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return ProductListResponse(
        data=[ProductOut.model_validate(p) for p in products],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/categories/list", response_model=CategoriesResponse)
def list_categories(db: Annotated[Session, Depends(get_db)]) -> CategoriesResponse:
    """Distinct product categories in alphabetical order."""
    rows = db.query(func.distinct(Product.category)).order_by(Product.category).all()
    return CategoriesResponse(categories=[r[0] for r in rows])


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ProductResponse:
    product = _get_product_or_404(db, product_id)
    return ProductResponse(product=ProductOut.model_validate(product))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    admin: AdminPrincipal,
    image: Annotated[UploadFile | None, Depends(product_image)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[UploadStore, Depends(get_upload_store)],
    name: Annotated[str, Form(min_length=PRODUCT_NAME_MIN_LEN, max_length=PRODUCT_NAME_MAX_LEN)],
    grams: Annotated[str, Form(min_length=1, max_length=GRAMS_MAX_LEN)],
    wastage: Annotated[int, Form(ge=0)],
    category: Annotated[str, Form(min_length=CATEGORY_MIN_LEN, max_length=CATEGORY_MAX_LEN)],
    description: Annotated[str | None, Form(max_length=DESCRIPTION_MAX_LEN)] = None,
    availability: Annotated[Availability, Form()] = "YES",
) -> ProductResponse:
    """
    Create a product (admin only). Send multipart/form-data; the optional image
    goes in the `image` field (jpeg, jpg, png, gif or webp, 5 MB max by default).
    """
    stored = save_upload(store, image, UPLOAD_CATEGORY, IMAGE_FIELD) if image else None
    product = Product(
        name=name.strip(),
        grams=grams.strip(),
        wastage=wastage,
        category=category.strip(),
        description=description.strip() if description else None,
        availability=availability,
        image=stored.filename if stored else None,
    )
    try:
        db.add(product)
        db.commit()
    except Exception:
        db.rollback()
        if stored:
            store.delete(UPLOAD_CATEGORY, stored.filename)
        raise
    db.refresh(product)
    logger.info("Product created: id=%s by admin %s", product.id, admin.email)
    return ProductResponse(product=ProductOut.model_validate(product))


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    admin: AdminPrincipal,
    image: Annotated[UploadFile | None, Depends(product_image)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[UploadStore, Depends(get_upload_store)],
    name: Annotated[
        str | None, Form(min_length=PRODUCT_NAME_MIN_LEN, max_length=PRODUCT_NAME_MAX_LEN)
    ] = None,
    grams: Annotated[str | None, Form(max_length=GRAMS_MAX_LEN)] = None,
    wastage: Annotated[int | None, Form(ge=0)] = None,
    category: Annotated[
        str | None, Form(min_length=CATEGORY_MIN_LEN, max_length=CATEGORY_MAX_LEN)
    ] = None,
    description: Annotated[str | None, Form(max_length=DESCRIPTION_MAX_LEN)] = None,
    availability: Annotated[Availability | None, Form()] = None,
) -> ProductResponse:
    """
    Update any subset of product fields (admin only). A new image replaces the
    previous one, whose file is removed from disk once the update is committed.
    """
    product = _get_product_or_404(db, product_id)

    updates = {
        "name": name.strip() if name is not None else None,
        "grams": grams.strip() if grams is not None else None,
        "wastage": wastage,
        "category": category.strip() if category is not None else None,
        "description": description.strip() if description is not None else None,
        "availability": availability,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates and image is None:
        raise ValidationError("No fields to update", code="no_changes")

    previous_image = product.image
    stored = save_upload(store, image, UPLOAD_CATEGORY, IMAGE_FIELD) if image else None
    for key, value in updates.items():
        setattr(product, key, value)
    if stored:
        product.image = stored.filename
    try:
        db.commit()
    except Exception:
        db.rollback()
        if stored:
            store.delete(UPLOAD_CATEGORY, stored.filename)
        raise
    if stored and previous_image:
        store.delete(UPLOAD_CATEGORY, previous_image)

    db.refresh(product)
    logger.info("Product %s updated by admin %s", product_id, admin.email)
    return ProductResponse(product=ProductOut.model_validate(product))


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[UploadStore, Depends(get_upload_store)],
) -> MessageResponse:
    """Delete a product and its image file (admin only)."""
    product = _get_product_or_404(db, product_id)
    image = product.image
    db.delete(product)
    db.commit()
    store.delete(UPLOAD_CATEGORY, image)
    logger.info("Product %s deleted by admin %s", product_id, admin.email)
    return MessageResponse(message="Product deleted successfully")
