# Services package
from backend.services.variant_service import (
    variant_service,
    VariantService,
    VariantNotFoundError,
    DuplicateVariantError,
)

__all__ = [
    "variant_service",
    "VariantService",
    "VariantNotFoundError",
    "DuplicateVariantError",
]
