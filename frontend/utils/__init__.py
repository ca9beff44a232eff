"""Utilities for PharmaDesk frontend.

The variant form controller lives in frontend.utils.form_state; it depends
on frontend.services and is imported from there directly.
"""

from frontend.utils.session_state import (
    SessionState,
    Notification,
    VIEW_VARIANTS,
    ACTION_EDIT,
    ACTION_DELETE,
)
from frontend.utils.exceptions import (
    PharmaDeskError,
    RemoteError,
    NotFoundError,
    DuplicateNameError,
)
from frontend.utils.validators import (
    ValidationResult,
    ValidationErrorKind,
    VARIANT_NAME_LABEL,
    UNIT_NAME_LABEL,
    normalize_name,
    normalized_names,
    validate_name,
    validate_variant_name,
    validate_unit_name,
    find_duplicate_indexes,
)
from frontend.utils.filters import (
    variant_matches,
    filter_variants,
)

__all__ = [
    # Session state
    "SessionState",
    "Notification",
    "VIEW_VARIANTS",
    "ACTION_EDIT",
    "ACTION_DELETE",
    # Exceptions
    "PharmaDeskError",
    "RemoteError",
    "NotFoundError",
    "DuplicateNameError",
    # Validators
    "ValidationResult",
    "ValidationErrorKind",
    "VARIANT_NAME_LABEL",
    "UNIT_NAME_LABEL",
    "normalize_name",
    "normalized_names",
    "validate_name",
    "validate_variant_name",
    "validate_unit_name",
    "find_duplicate_indexes",
    # Filters
    "variant_matches",
    "filter_variants",
]
