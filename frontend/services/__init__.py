"""Services for PharmaDesk frontend."""
from frontend.services.backend_client import (
    PharmaAPIClient,
    get_api_client,
)
from frontend.services.variant_gateway import (
    Unit,
    Variant,
    VariantGateway,
    get_variant_gateway,
)

__all__ = [
    # Backend client
    "PharmaAPIClient",
    "get_api_client",
    # Variant gateway
    "Unit",
    "Variant",
    "VariantGateway",
    "get_variant_gateway",
]
