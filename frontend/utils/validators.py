"""Input validation utilities.

This module provides validation for master-data names (variants and their
units). The same rules apply to both; only the label used in messages
differs.

Rules are checked in a fixed order and the first failing rule is reported,
so every field shows a single message:

1. TOO_SHORT - fewer than 2 characters after trimming
2. TOO_LONG - more than 50 characters
3. INVALID_CHARACTERS - anything other than letters, digits, spaces, hyphens
4. DUPLICATE_NAME - trimmed, lower-cased name already in the reference set

All validators return ValidationResult objects for consistent error handling.
"""

import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Iterable, List, Optional, FrozenSet

from frontend.config.settings import config

logger = logging.getLogger(__name__)

VARIANT_NAME_LABEL = "Variant Name"
UNIT_NAME_LABEL = "Unit Name"

# Letters, digits, spaces and hyphens only
NAME_PATTERN = re.compile(r'[A-Za-z0-9 \-]+')


class ValidationErrorKind(str, Enum):
    """Why a name was rejected."""
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARACTERS = "invalid_characters"
    DUPLICATE_NAME = "duplicate_name"
    # Structural checks applied only when the whole form is submitted
    REQUIRED = "required"
    NO_LINE_ITEMS = "no_line_items"


@dataclass
class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        errors: List of error messages (empty if valid)
        kind: Rule that failed first (None if valid)

    Example:
        >>> result = ValidationResult(is_valid=True)
        >>> if result.is_valid:
        ...     save()
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    kind: Optional[ValidationErrorKind] = None

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.is_valid

    def add_error(self, error: str, kind: ValidationErrorKind) -> None:
        """Add an error and mark as invalid.

        The first error added decides the reported kind.
        """
        self.errors.append(error)
        self.is_valid = False
        if self.kind is None:
            self.kind = kind

    @property
    def message(self) -> Optional[str]:
        """First error message, or None if valid."""
        return self.errors[0] if self.errors else None


def normalize_name(value: Optional[str]) -> str:
    """Normalize a name for duplicate comparison.

    Example:
        >>> normalize_name("  Strip ")
        'strip'
    """
    return (value or "").strip().lower()


def normalized_names(names: Iterable[str], exclude_index: Optional[int] = None) -> FrozenSet[str]:
    """Build a duplicate-check reference set from raw names.

    Args:
        names: Raw names (any case, untrimmed)
        exclude_index: Position to leave out, used when a row is checked
            against its siblings

    Returns:
        Frozen set of normalized names
    """
    return frozenset(
        normalize_name(name)
        for i, name in enumerate(names)
        if i != exclude_index
    )


def validate_name(
    candidate: str,
    existing_normalized_names: Optional[AbstractSet[str]] = None,
    label: str = "Name"
) -> ValidationResult:
    """Validate a variant or unit name.

    Only the first failing rule is reported.

    Args:
        candidate: Name as typed by the user
        existing_normalized_names: Names it must not collide with, already
            normalized with normalize_name()
        label: Field label used in messages (e.g., "Variant Name")

    Returns:
        ValidationResult with is_valid flag, message and kind

    Example:
        >>> validate_name("Box", {"box"}, label="Unit Name").kind
        <ValidationErrorKind.DUPLICATE_NAME: 'duplicate_name'>
        >>> validate_name("Box", {"boxes"}).is_valid
        True
    """
    result = ValidationResult(is_valid=True)
    candidate = candidate if isinstance(candidate, str) else ""

    if len(candidate.strip()) < config.NAME_MIN_LENGTH:
        result.add_error(
            f"{label} must be at least {config.NAME_MIN_LENGTH} characters",
            ValidationErrorKind.TOO_SHORT
        )
        return result

    if len(candidate) > config.NAME_MAX_LENGTH:
        result.add_error(
            f"{label} cannot exceed {config.NAME_MAX_LENGTH} characters",
            ValidationErrorKind.TOO_LONG
        )
        return result

    if not NAME_PATTERN.fullmatch(candidate):
        result.add_error(
            f"{label} can contain alphabets, numbers, spaces, and hyphens only",
            ValidationErrorKind.INVALID_CHARACTERS
        )
        return result

    if existing_normalized_names and normalize_name(candidate) in existing_normalized_names:
        result.add_error(f"{label} already exists", ValidationErrorKind.DUPLICATE_NAME)
        return result

    return result


def validate_variant_name(candidate: str, existing_normalized_names: Optional[AbstractSet[str]] = None) -> ValidationResult:
    """Validate a variant name against the names of other variants."""
    return validate_name(candidate, existing_normalized_names, label=VARIANT_NAME_LABEL)


def validate_unit_name(candidate: str, sibling_normalized_names: Optional[AbstractSet[str]] = None) -> ValidationResult:
    """Validate a unit name against the other units of the same variant."""
    return validate_name(candidate, sibling_normalized_names, label=UNIT_NAME_LABEL)


def find_duplicate_indexes(names: Iterable[str]) -> List[int]:
    """Return positions whose normalized name already appeared earlier.

    Example:
        >>> find_duplicate_indexes(["Strip", "Box", "strip "])
        [2]
    """
    seen = set()
    duplicates = []
    for i, name in enumerate(names):
        key = normalize_name(name)
        if key in seen:
            duplicates.append(i)
        seen.add(key)
    return duplicates
