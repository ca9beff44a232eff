"""
SQLAlchemy ORM models for the variant master.

A variant (dosage form, e.g. "Tablet") owns an ordered list of units
(packaging, e.g. "Box", "Strip"). Units are deleted with their variant.
"""
import uuid

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from backend.core.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Variant(Base):
    """Variant master table."""

    __tablename__ = "variants"

    id = Column(String(36), primary_key=True, default=_new_id)  # UUID
    name = Column(String(50), nullable=False)
    # Lower-cased, trimmed name; unique so concurrent creates cannot both win
    name_key = Column(String(50), nullable=False, unique=True, index=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    units = relationship(
        "Unit",
        back_populates="variant",
        cascade="all, delete-orphan",
        order_by="Unit.position",
        lazy="selectin",
    )

    def to_dict(self) -> dict:
        """Convert to the API wire format."""
        return {
            "variantId": self.id,
            "variantName": self.name,
            "unitDtos": [unit.to_dict() for unit in self.units],
        }

    def __repr__(self) -> str:
        return f"<Variant {self.id}: {self.name}>"


class Unit(Base):
    """Units belonging to a variant."""

    __tablename__ = "units"

    id = Column(String(36), primary_key=True, default=_new_id)  # UUID
    variant_id = Column(String(36), ForeignKey("variants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    variant = relationship("Variant", back_populates="units")

    def to_dict(self) -> dict:
        """Convert to the API wire format."""
        return {"unitId": self.id, "unitName": self.name}

    def __repr__(self) -> str:
        return f"<Unit {self.id}: {self.name}>"
