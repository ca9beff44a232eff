"""
Variant service for CRUD operations on the variant master.
Enforces name uniqueness and the full-replacement semantics of updates.
"""
import logging
import threading
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.models.database import Variant, Unit
from backend.models.schemas import VariantPayload, VARIANT_NAME_LABEL

logger = logging.getLogger(__name__)

# Module-level lock for SQLite write serialization
# The duplicate check and the write must not interleave between requests
_db_write_lock = threading.Lock()


class VariantNotFoundError(Exception):
    """Raised when a variant id does not exist."""

    def __init__(self, variant_id: str):
        self.variant_id = variant_id
        super().__init__(f"Variant not found: {variant_id}")


class DuplicateVariantError(Exception):
    """Raised when another variant already uses the (normalized) name."""

    def __init__(self, variant_name: str):
        self.variant_name = variant_name
        super().__init__(f"{VARIANT_NAME_LABEL} already exists")


def name_key(name: str) -> str:
    """Normalized form used for uniqueness checks."""
    return name.strip().lower()


class VariantService:
    """Service for variant management operations."""

    def list_variants(self, db: Session) -> List[Variant]:
        """All variants ordered by name."""
        return db.query(Variant).order_by(Variant.name_key).all()

    def get_variant(self, db: Session, variant_id: str) -> Variant:
        """
        Get a variant by ID.

        Raises:
            VariantNotFoundError: If no variant has this ID
        """
        variant = db.query(Variant).filter(Variant.id == variant_id).first()
        if variant is None:
            raise VariantNotFoundError(variant_id)
        return variant

    def _ensure_unique_name(self, db: Session, variant_name: str, exclude_id: str = None) -> None:
        query = db.query(Variant).filter(Variant.name_key == name_key(variant_name))
        if exclude_id:
            query = query.filter(Variant.id != exclude_id)
        if query.first() is not None:
            raise DuplicateVariantError(variant_name)

    def create_variant(self, db: Session, payload: VariantPayload) -> Variant:
        """
        Create a variant with its units.

        Args:
            db: Database session
            payload: Validated request body (names already trimmed)

        Returns:
            Created Variant with server-assigned ids

        Raises:
            DuplicateVariantError: If the name is taken
        """
        with _db_write_lock:
            self._ensure_unique_name(db, payload.variant_name)

            variant = Variant(
                name=payload.variant_name,
                name_key=name_key(payload.variant_name),
                units=[
                    Unit(name=unit.unit_name, position=position)
                    for position, unit in enumerate(payload.units)
                ],
            )
            db.add(variant)
            try:
                db.flush()
            except IntegrityError as e:
                db.rollback()
                logger.warning(f"Concurrent create of variant '{payload.variant_name}': {e}")
                raise DuplicateVariantError(payload.variant_name) from e
            db.refresh(variant)

        logger.info(f"Created variant {variant.id} '{variant.name}' with {len(variant.units)} units")
        return variant

    def update_variant(self, db: Session, variant_id: str, payload: VariantPayload) -> Variant:
        """
        Replace a variant's name and unit list.

        Units whose ``unitId`` matches an existing unit of this variant are
        renamed in place; other existing units are deleted; units without a
        known id are created. Each existing unit is claimed at most once. The
        request order becomes the stored order.

        Raises:
            VariantNotFoundError: If the variant does not exist
            DuplicateVariantError: If another variant uses the name
        """
        with _db_write_lock:
            variant = self.get_variant(db, variant_id)
            self._ensure_unique_name(db, payload.variant_name, exclude_id=variant_id)

            existing = {unit.id: unit for unit in variant.units}
            units = []
            for position, item in enumerate(payload.units):
                unit = existing.pop(item.unit_id, None) if item.unit_id else None
                if unit is None:
                    unit = Unit(name=item.unit_name, position=position)
                else:
                    unit.name = item.unit_name
                    unit.position = position
                units.append(unit)

            removed = len(existing)
            variant.name = payload.variant_name
            variant.name_key = name_key(payload.variant_name)
            variant.units = units

            try:
                db.flush()
            except IntegrityError as e:
                db.rollback()
                logger.warning(f"Concurrent rename of variant {variant_id}: {e}")
                raise DuplicateVariantError(payload.variant_name) from e
            db.refresh(variant)

        logger.info(
            f"Updated variant {variant_id} '{variant.name}' "
            f"({len(variant.units)} units, {removed} removed)"
        )
        return variant

    def delete_variant(self, db: Session, variant_id: str) -> None:
        """
        Delete a variant and its units.

        Raises:
            VariantNotFoundError: If the variant does not exist
        """
        with _db_write_lock:
            variant = self.get_variant(db, variant_id)
            db.delete(variant)
            db.flush()

        logger.info(f"Deleted variant {variant_id}")


# Singleton instance
variant_service = VariantService()
