"""Custom design requests: users submit and read their own; admins list all and triage status."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from jewelry_api.api.deps import AdminPrincipal, CurrentPrincipal, SingleFileUpload, save_upload
from jewelry_api.core.database import get_db
from jewelry_api.core.errors import Forbidden, NotFound
from jewelry_api.core.uploads import UploadCategory, UploadStore, get_upload_store
from jewelry_api.models import CustomDesign, User
from jewelry_api.schemas.design import (
    DESCRIPTION_MAX_LEN,
    DESIGN_NAME_MAX_LEN,
    DESIGN_NAME_MIN_LEN,
    MATERIAL_MAX_LEN,
    MATERIAL_MIN_LEN,
    MIN_APPROXIMATE_WEIGHT,
    AdminDesignListResponse,
    AdminDesignOut,
    DesignListResponse,
    DesignOut,
    DesignResponse,
    DesignStatusUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()

UPLOAD_CATEGORY = UploadCategory.DESIGNS
IMAGE_FIELD = "reference_image"
reference_image_upload = SingleFileUpload(IMAGE_FIELD)


def _get_design_or_404(db: Session, design_id: int) -> CustomDesign:
    design = db.get(CustomDesign, design_id)
    if design is None:
        raise NotFound("Design not found")
    return design


@router.post("", response_model=DesignResponse, status_code=status.HTTP_201_CREATED)
def create_design(
    principal: CurrentPrincipal,
    reference_image: Annotated[UploadFile | None, Depends(reference_image_upload)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[UploadStore, Depends(get_upload_store)],
    design_name: Annotated[
        str, Form(min_length=DESIGN_NAME_MIN_LEN, max_length=DESIGN_NAME_MAX_LEN)
    ],
    material_preference: Annotated[
        str, Form(min_length=MATERIAL_MIN_LEN, max_length=MATERIAL_MAX_LEN)
    ],
    approximate_weight: Annotated[float, Form(ge=MIN_APPROXIMATE_WEIGHT)],
    description: Annotated[str | None, Form(max_length=DESCRIPTION_MAX_LEN)] = None,
) -> DesignResponse:
    """
    Submit a custom design request as multipart/form-data. An optional reference
    image may be attached in the `reference_image` field. New requests start as 'pending'.
    """
    stored = (
        save_upload(store, reference_image, UPLOAD_CATEGORY, IMAGE_FIELD)
        if reference_image
        else None
    )
    design = CustomDesign(
        user_id=principal.id,
        design_name=design_name.strip(),
        material_preference=material_preference.strip(),
        approximate_weight=approximate_weight,
        description=description.strip() if description else None,
        reference_image=stored.filename if stored else None,
        status="pending",
    )
    try:
        db.add(design)
        db.commit()
    except Exception:
        db.rollback()
        if stored:
            store.delete(UPLOAD_CATEGORY, stored.filename)
        raise
    db.refresh(design)
    logger.info("Custom design %s created by user %s", design.id, principal.id)
    return DesignResponse(design=DesignOut.model_validate(design))


@router.get("", response_model=DesignListResponse)
def list_my_designs(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> DesignListResponse:
    """Designs submitted by the authenticated user, newest first."""
    designs = (
        db.query(CustomDesign)
        .filter(CustomDesign.user_id == principal.id)
        .order_by(CustomDesign.created_at.desc(), CustomDesign.id.desc())
        .all()
    )
    return DesignListResponse(
        designs=[DesignOut.model_validate(d) for d in designs],
        count=len(designs),
    )


@router.get("/admin/all", response_model=AdminDesignListResponse)
def list_all_designs(
    _admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> AdminDesignListResponse:
    """Every design with the submitter's name and email (admin only)."""
    rows = (
        db.query(CustomDesign, User.name, User.email)
        .join(User, CustomDesign.user_id == User.id)
        .order_by(CustomDesign.created_at.desc(), CustomDesign.id.desc())
        .all()
    )
    designs = [
        AdminDesignOut(
            **DesignOut.model_validate(design).model_dump(),
            user_name=user_name,
            user_email=user_email,
        )
        for design, user_name, user_email in rows
    ]
    return AdminDesignListResponse(designs=designs, count=len(designs))


@router.get("/{design_id}", response_model=DesignResponse)
def get_design(
    design_id: int,
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> DesignResponse:
    """A single design. Users may only read their own; admins may read any."""
    design = _get_design_or_404(db, design_id)
    if not principal.is_admin and design.user_id != principal.id:
        raise Forbidden("Not authorized to access this design")
    return DesignResponse(design=DesignOut.model_validate(design))


@router.put("/{design_id}/status", response_model=DesignResponse)
def update_design_status(
    design_id: int,
    body: DesignStatusUpdate,
    _admin: AdminPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> DesignResponse:
    """Move a design to pending, in_progress, completed or rejected (admin only)."""
    design = _get_design_or_404(db, design_id)
    design.status = body.status
    db.commit()
    db.refresh(design)
    logger.info("Design %s status updated to %s", design_id, body.status)
    return DesignResponse(design=DesignOut.model_validate(design))
