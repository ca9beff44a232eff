"""
Variant gateway for PharmaDesk Frontend.

CRUD access to the variant master (variants and their units) on the
backend. Every call issues one request and either returns data or raises
a RemoteError subclass; nothing is cached or retried here.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from frontend.config.settings import config
from frontend.services.backend_client import PharmaAPIClient, get_api_client
from frontend.utils.validators import normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unit:
    """A packaging unit of a variant (e.g., Box, Strip)."""
    unit_id: str = ""
    unit_name: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {"unitId": self.unit_id, "unitName": self.unit_name}

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Unit":
        return cls(
            unit_id=data.get("unitId") or "",
            unit_name=data.get("unitName") or "",
        )


@dataclass(frozen=True)
class Variant:
    """A variant record as exchanged with the backend.

    ``variant_id`` is empty until the backend assigns one.
    """
    variant_id: str = ""
    variant_name: str = ""
    units: tuple = field(default_factory=tuple)

    @property
    def unit_names(self) -> List[str]:
        return [unit.unit_name for unit in self.units]

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the backend's camelCase wire format."""
        return {
            "variantId": self.variant_id,
            "variantName": self.variant_name,
            "unitDtos": [unit.to_payload() for unit in self.units],
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Variant":
        """Build from the backend's wire format (missing fields tolerated)."""
        return cls(
            variant_id=data.get("variantId") or "",
            variant_name=data.get("variantName") or "",
            units=tuple(Unit.from_payload(u) for u in (data.get("unitDtos") or [])),
        )


class VariantGateway:
    """Remote CRUD operations for variants."""

    def __init__(self, client: PharmaAPIClient = None, endpoint: str = None):
        """Initialize gateway.

        Args:
            client: Shared API client (default: singleton)
            endpoint: Path of the variant resource (default from config)
        """
        self.client = client or get_api_client()
        self.endpoint = endpoint or config.VARIANT_ENDPOINT

    def list(self) -> List[Variant]:
        """Fetch all variants.

        Returns:
            Variants in the order the backend returns them
        """
        data = self.client.request_json('GET', f'{self.endpoint}/getAll', 'fetching variants')
        return [Variant.from_payload(item) for item in (data or [])]

    def get_by_id(self, variant_id: str) -> Variant:
        """Fetch one variant.

        Raises:
            NotFoundError: If the variant does not exist
        """
        data = self.client.request_json(
            'GET', f'{self.endpoint}/getById/{variant_id}', 'fetching variant',
            entity_id=variant_id
        )
        return Variant.from_payload(data or {})

    def create(self, variant: Variant) -> Variant:
        """Create a variant with its units.

        Returns:
            The stored variant, including backend-assigned identifiers
        """
        data = self.client.request_json(
            'POST', f'{self.endpoint}/save', 'creating variant', json=variant.to_payload()
        )
        created = Variant.from_payload(data or {})
        logger.info(f"Created variant '{created.variant_name}' ({created.variant_id})")
        return created

    def update(self, variant_id: str, variant: Variant) -> Variant:
        """Replace a variant and its units.

        Returns:
            The stored variant after the update
        """
        data = self.client.request_json(
            'PUT', f'{self.endpoint}/update/{variant_id}', 'updating variant',
            entity_id=variant_id, json=variant.to_payload()
        )
        updated = Variant.from_payload(data or {})
        logger.info(f"Updated variant '{updated.variant_name}' ({variant_id})")
        return updated

    def delete(self, variant_id: str) -> None:
        """Delete a variant.

        Raises:
            NotFoundError: If the variant is already gone
        """
        self.client.request_json(
            'DELETE', f'{self.endpoint}/delete/{variant_id}', 'deleting variant',
            entity_id=variant_id
        )
        logger.info(f"Deleted variant {variant_id}")

    # Duplicate detection helpers
    def existing_names(self, exclude_id: Optional[str] = None) -> FrozenSet[str]:
        """Normalized names of all variants except ``exclude_id``.

        Used as the reference set for the variant name duplicate check.
        """
        return frozenset(
            normalize_name(variant.variant_name)
            for variant in self.list()
            if not exclude_id or variant.variant_id != exclude_id
        )

    def find_duplicate(self, variant_name: str, exclude_id: Optional[str] = None) -> Optional[Variant]:
        """Find another variant with the same (normalized) name.

        Returns:
            The clashing variant, or None
        """
        key = normalize_name(variant_name)
        for variant in self.list():
            if variant.variant_id == exclude_id and exclude_id:
                continue
            if normalize_name(variant.variant_name) == key:
                return variant
        return None


_variant_gateway: Optional[VariantGateway] = None
_variant_gateway_lock = threading.Lock()


def get_variant_gateway() -> VariantGateway:
    """Get singleton variant gateway instance (thread-safe)."""
    global _variant_gateway
    if _variant_gateway is None:
        with _variant_gateway_lock:
            if _variant_gateway is None:
                _variant_gateway = VariantGateway()
    return _variant_gateway
