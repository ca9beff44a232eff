"""
Pydantic schemas for API request/response validation.

Field aliases follow the camelCase wire format used by the frontend
(``variantId``, ``variantName``, ``unitDtos``, ``unitId``, ``unitName``).
"""
import re
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from backend.config import settings

# Whitelist pattern for master data names
NAME_PATTERN = re.compile(r'[A-Za-z0-9 \-]+')

VARIANT_NAME_LABEL = "Variant Name"
UNIT_NAME_LABEL = "Unit Name"


def check_name(value: str, label: str) -> str:
    """Apply the master data name rules and return the trimmed name.

    Raises:
        ValueError: With a user-facing message for the first failing rule
    """
    if len(value.strip()) < settings.NAME_MIN_LENGTH:
        raise ValueError(f"{label} must be at least {settings.NAME_MIN_LENGTH} characters")
    if len(value) > settings.NAME_MAX_LENGTH:
        raise ValueError(f"{label} cannot exceed {settings.NAME_MAX_LENGTH} characters")
    if not NAME_PATTERN.fullmatch(value):
        raise ValueError(f"{label} can contain alphabets, numbers, spaces, and hyphens only")
    return value.strip()


# Variant Schemas
class UnitPayload(BaseModel):
    """A unit inside a variant request or response."""

    model_config = ConfigDict(populate_by_name=True)

    unit_id: Optional[str] = Field(None, alias="unitId")
    unit_name: str = Field(..., alias="unitName")

    @field_validator('unit_name')
    @classmethod
    def validate_unit_name(cls, v: str) -> str:
        return check_name(v, UNIT_NAME_LABEL)


class VariantPayload(BaseModel):
    """Request schema for creating or replacing a variant.

    ``variantId`` in the body is ignored; the path parameter (update) or the
    server (create) decides the identifier.
    """

    model_config = ConfigDict(populate_by_name=True)

    variant_id: Optional[str] = Field(None, alias="variantId")
    variant_name: str = Field(..., alias="variantName")
    units: List[UnitPayload] = Field(default_factory=list, alias="unitDtos", validate_default=True)

    @field_validator('variant_name')
    @classmethod
    def validate_variant_name(cls, v: str) -> str:
        return check_name(v, VARIANT_NAME_LABEL)

    @field_validator('units')
    @classmethod
    def validate_units(cls, v: List[UnitPayload]) -> List[UnitPayload]:
        """Require at least one unit, unique unit names and unique unit ids."""
        if not v:
            raise ValueError("At least one unit is required")
        seen = set()
        seen_ids = set()
        for unit in v:
            key = unit.unit_name.strip().lower()
            if key in seen:
                raise ValueError("Duplicate unit names are not allowed")
            seen.add(key)
            # Empty ids mark new units; a known id may appear only once
            if unit.unit_id:
                if unit.unit_id in seen_ids:
                    raise ValueError("Duplicate unit ids are not allowed")
                seen_ids.add(unit.unit_id)
        return v


# Health Schemas
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
    timestamp: datetime
