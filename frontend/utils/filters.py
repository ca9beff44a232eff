"""Search filtering for the variant list."""

from typing import Iterable, List


def variant_matches(variant, search_text: str) -> bool:
    """Check whether a variant matches the table search box.

    A variant matches when its name or any of its unit names contains the
    search text, ignoring case. Empty search text matches everything.

    Example:
        >>> variant_matches(Variant(variant_name="Tablet", units=(Unit(unit_name="Strip"),)), "str")
        True
    """
    search = (search_text or "").lower()
    if not search:
        return True
    if search in (variant.variant_name or "").lower():
        return True
    return any(search in (unit.unit_name or "").lower() for unit in variant.units)


def filter_variants(variants: Iterable, search_text: str) -> List:
    """Return the variants matching ``search_text``, preserving order."""
    return [variant for variant in variants if variant_matches(variant, search_text)]
