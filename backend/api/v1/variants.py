"""
Variant master API endpoints.

Every successful response wraps its payload in ``{"data": ...}``.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.core.database import get_db
from backend.models.schemas import VariantPayload
from backend.services.variant_service import (
    variant_service,
    VariantNotFoundError,
    DuplicateVariantError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pharma/variant", tags=["Variants"])


@router.get("/getAll")
async def list_variants(db: Session = Depends(get_db)) -> dict:
    """
    List all variants with their units, ordered by name.
    """
    variants = variant_service.list_variants(db)
    return {"data": [variant.to_dict() for variant in variants]}


@router.get("/getById/{variant_id}")
async def get_variant(variant_id: str, db: Session = Depends(get_db)) -> dict:
    """
    Get a specific variant by ID.

    Args:
        variant_id: UUID of the variant

    Returns:
        Variant with its units
    """
    try:
        variant = variant_service.get_variant(db, variant_id)
    except VariantNotFoundError:
        raise HTTPException(status_code=404, detail="Variant not found")
    return {"data": variant.to_dict()}


@router.post("/save", status_code=201)
async def create_variant(payload: VariantPayload, db: Session = Depends(get_db)) -> dict:
    """
    Create a variant with its units.

    Returns:
        The stored variant including server-assigned ids
    """
    try:
        variant = variant_service.create_variant(db, payload)
    except DuplicateVariantError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"data": variant.to_dict()}


@router.put("/update/{variant_id}")
async def update_variant(
    variant_id: str,
    payload: VariantPayload,
    db: Session = Depends(get_db),
) -> dict:
    """
    Replace a variant's name and units.

    Args:
        variant_id: UUID of the variant
        payload: Full variant; units without a known ``unitId`` are created

    Returns:
        The stored variant after the update
    """
    try:
        variant = variant_service.update_variant(db, variant_id, payload)
    except VariantNotFoundError:
        raise HTTPException(status_code=404, detail="Variant not found")
    except DuplicateVariantError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"data": variant.to_dict()}


@router.delete("/delete/{variant_id}")
async def delete_variant(variant_id: str, db: Session = Depends(get_db)) -> dict:
    """
    Delete a variant and its units.

    Args:
        variant_id: UUID of the variant

    Returns:
        Confirmation with the deleted id
    """
    try:
        variant_service.delete_variant(db, variant_id)
    except VariantNotFoundError:
        raise HTTPException(status_code=404, detail="Variant not found")
    return {"data": {"variantId": variant_id, "message": "Variant deleted successfully"}}
