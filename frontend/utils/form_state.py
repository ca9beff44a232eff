"""Form state for the variant add/edit drawer.

VariantFormController holds the draft variant (name plus its units), runs
the name rules on every keystroke and orchestrates saving. It has no
Streamlit dependencies: the page reads immutable FormSnapshot objects
(via ``snapshot`` or a ``subscribe`` listener) and presents the Outcome
returned by ``load()`` and ``submit()`` however it likes.

Duplicate checks use two different scopes:
- the variant name is checked against the names of all other variants,
  fetched once from the backend when the form opens
- a unit name is checked against the other units of the current draft only
"""

import itertools
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from frontend.services.variant_gateway import Unit, Variant, VariantGateway
from frontend.utils.exceptions import DuplicateNameError, RemoteError
from frontend.utils.validators import (
    ValidationErrorKind,
    find_duplicate_indexes,
    normalize_name,
    normalized_names,
    validate_unit_name,
    validate_variant_name,
)

logger = logging.getLogger(__name__)

# Field targets
TARGET_NAME = "name"
TARGET_LINE_ITEM = "line_item"
TARGET_LINE_ITEMS = "line_items"

MSG_NAME_REQUIRED = "Variant name is required"
MSG_UNIT_REQUIRED = "Unit Name is required"
MSG_NO_UNITS = "At least one unit is required"
MSG_DUPLICATE_UNITS = "Duplicate unit names are not allowed"
MSG_LOAD_FAILED = "Failed to fetch variant data"
MSG_BUSY = "Save already in progress"
MSG_CREATED = "Variant created successfully"
MSG_UPDATED = "Variant updated successfully"


class OutcomeStatus(str, Enum):
    """Result of a controller action."""
    SUCCESS = "success"
    FIELD_ERRORS = "field_errors"
    SUMMARY_ERROR = "summary_error"
    REJECTED = "rejected"


@dataclass(frozen=True)
class FieldError:
    """Validation failure attached to one form field.

    Attributes:
        target: TARGET_NAME, TARGET_LINE_ITEM or TARGET_LINE_ITEMS
        kind: Rule that failed
        message: Text shown under the field
        index: Line item position (TARGET_LINE_ITEM only)
    """
    target: str
    kind: ValidationErrorKind
    message: str
    index: Optional[int] = None


@dataclass(frozen=True)
class DraftLineItem:
    """A unit row in the draft.

    ``key`` identifies the row inside this form only; it is never sent to
    the backend. ``unit_id`` stays empty until the backend assigns one.
    """
    key: int
    unit_id: str = ""
    unit_name: str = ""


@dataclass(frozen=True)
class FormSnapshot:
    """Immutable view of the form state after an operation."""
    variant_id: str
    name: str
    line_items: Tuple[DraftLineItem, ...]
    field_errors: Tuple[FieldError, ...]
    submitting: bool

    @property
    def is_edit(self) -> bool:
        return bool(self.variant_id)

    @property
    def name_error(self) -> Optional[FieldError]:
        for error in self.field_errors:
            if error.target == TARGET_NAME:
                return error
        return None

    def line_item_error(self, index: int) -> Optional[FieldError]:
        for error in self.field_errors:
            if error.target == TARGET_LINE_ITEM and error.index == index:
                return error
        return None

    @property
    def line_items_error(self) -> Optional[FieldError]:
        for error in self.field_errors:
            if error.target == TARGET_LINE_ITEMS:
                return error
        return None

    @property
    def can_remove_line_item(self) -> bool:
        return len(self.line_items) > 1


@dataclass(frozen=True)
class Outcome:
    """What ``load()`` or ``submit()`` produced.

    ``message`` is the single form-level text to notify the user with.
    For FIELD_ERRORS it equals the message of the first invalid field.
    """
    status: OutcomeStatus
    message: Optional[str] = None
    field_errors: Tuple[FieldError, ...] = field(default_factory=tuple)
    variant: Optional[Variant] = None

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


Listener = Callable[[FormSnapshot], None]


class VariantFormController:
    """Draft state and save workflow for one variant form.

    Example:
        >>> form = VariantFormController(gateway)
        >>> form.load()
        >>> form.set_name("Tablet")
        >>> form.set_line_item_name(0, "Box")
        >>> outcome = form.submit()
        >>> outcome.success
        True
    """

    def __init__(self, gateway: VariantGateway, variant_id: Optional[str] = None):
        """Create a form.

        Args:
            gateway: Remote access to variants
            variant_id: Variant to edit, or None to create a new one
        """
        self.gateway = gateway
        self._keys = itertools.count()
        self._variant_id = variant_id or ""
        self._name = ""
        self._line_items: List[DraftLineItem] = [self._new_line_item()]
        self._name_error: Optional[FieldError] = None
        # Keyed by DraftLineItem.key so errors follow their row when others are removed
        self._line_item_errors: Dict[int, FieldError] = {}
        self._line_items_error: Optional[FieldError] = None
        self._existing_names: Optional[FrozenSet[str]] = None
        self._submitting = False
        self._listeners: List[Listener] = []

    # State access
    @property
    def variant_id(self) -> str:
        return self._variant_id

    @property
    def is_edit(self) -> bool:
        return bool(self._variant_id)

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def existing_names(self) -> Optional[FrozenSet[str]]:
        """Normalized names of the other variants (None until fetched)."""
        return self._existing_names

    @property
    def snapshot(self) -> FormSnapshot:
        errors: List[FieldError] = []
        if self._name_error:
            errors.append(self._name_error)
        for index, item in enumerate(self._line_items):
            error = self._line_item_errors.get(item.key)
            if error:
                errors.append(replace(error, index=index))
        if self._line_items_error:
            errors.append(self._line_items_error)

        return FormSnapshot(
            variant_id=self._variant_id,
            name=self._name,
            line_items=tuple(self._line_items),
            field_errors=tuple(errors),
            submitting=self._submitting,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a new snapshot after every state change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    def _new_line_item(self, unit_id: str = "", unit_name: str = "") -> DraftLineItem:
        return DraftLineItem(key=next(self._keys), unit_id=unit_id, unit_name=unit_name)

    # Loading
    def load(self) -> Outcome:
        """Fetch what the form needs from the backend.

        The duplicate-check name list is fetched once; if that fails the
        form stays usable and ``submit()`` tries again. In edit mode the
        variant itself is fetched into the draft.
        """
        self._refresh_existing_names()

        if self.is_edit:
            try:
                variant = self.gateway.get_by_id(self._variant_id)
            except RemoteError as e:
                logger.error(f"Failed to fetch variant details for {self._variant_id}: {e}")
                return Outcome(OutcomeStatus.SUMMARY_ERROR, message=MSG_LOAD_FAILED)
            self._set_draft(variant)

        self._notify()
        return Outcome(OutcomeStatus.SUCCESS)

    def _refresh_existing_names(self) -> bool:
        try:
            self._existing_names = self.gateway.existing_names(exclude_id=self._variant_id or None)
        except RemoteError as e:
            logger.error(f"Error fetching existing variants: {e}")
            return False
        logger.debug(f"Loaded {len(self._existing_names)} existing variant names")
        return True

    def _set_draft(self, variant: Variant) -> None:
        self._name = variant.variant_name
        units = variant.units or (Unit(),)
        self._line_items = [self._new_line_item(u.unit_id, u.unit_name) for u in units]
        self._clear_errors()

    # Editing
    def set_name(self, value: str) -> None:
        """Update the variant name and re-validate it."""
        self._name = value
        result = validate_variant_name(value, self._existing_names or frozenset())
        if result.is_valid:
            self._name_error = None
        else:
            self._name_error = FieldError(TARGET_NAME, result.kind, result.message)
        self._notify()

    def set_line_item_name(self, index: int, value: str) -> None:
        """Update a unit name and re-validate it against its sibling units.

        Raises:
            IndexError: If there is no line item at ``index``
        """
        item = self._line_items[index]
        siblings = normalized_names(
            (other.unit_name for other in self._line_items), exclude_index=index
        )
        self._line_items[index] = replace(item, unit_name=value)

        result = validate_unit_name(value, siblings)
        if result.is_valid:
            self._line_item_errors.pop(item.key, None)
        else:
            self._line_item_errors[item.key] = FieldError(TARGET_LINE_ITEM, result.kind, result.message)
        self._notify()

    def add_line_item(self) -> None:
        """Append an empty unit row."""
        self._line_items.append(self._new_line_item())
        self._notify()

    def remove_line_item(self, index: int) -> None:
        """Remove a unit row, keeping at least one.

        Raises:
            IndexError: If there is no line item at ``index``
        """
        if len(self._line_items) <= 1:
            return
        item = self._line_items.pop(index)
        self._line_item_errors.pop(item.key, None)
        self._notify()

    def _clear_errors(self) -> None:
        self._name_error = None
        self._line_item_errors = {}
        self._line_items_error = None

    # Saving
    def submit(self) -> Outcome:
        """Validate the whole draft and save it.

        Calls while a save is in flight are rejected without side effects.
        """
        if self._submitting:
            logger.warning("Ignoring submit while a save is in progress")
            return Outcome(OutcomeStatus.REJECTED, message=MSG_BUSY)

        self._submitting = True
        self._clear_errors()
        self._notify()
        try:
            return self._submit()
        finally:
            self._submitting = False
            self._notify()

    def _submit(self) -> Outcome:
        if self._existing_names is None and not self._refresh_existing_names():
            return Outcome(OutcomeStatus.SUMMARY_ERROR, message="Error fetching variants, please try again")

        # Variant name
        result = validate_variant_name(self._name, self._existing_names)
        if not result.is_valid:
            self._name_error = FieldError(TARGET_NAME, result.kind, result.message)
            return self._field_failure()

        if not self._name.strip():
            self._name_error = FieldError(TARGET_NAME, ValidationErrorKind.REQUIRED, MSG_NAME_REQUIRED)
            return self._field_failure()

        # Units present and filled in
        blank = [item for item in self._line_items if not item.unit_name.strip()]
        if blank:
            for item in blank:
                self._line_item_errors[item.key] = FieldError(
                    TARGET_LINE_ITEM, ValidationErrorKind.REQUIRED, MSG_UNIT_REQUIRED
                )
            return self._field_failure()

        if not self._line_items:
            self._line_items_error = FieldError(
                TARGET_LINE_ITEMS, ValidationErrorKind.NO_LINE_ITEMS, MSG_NO_UNITS
            )
            return self._field_failure()

        # Each unit against its siblings
        names = [item.unit_name for item in self._line_items]
        for index, item in enumerate(self._line_items):
            unit_result = validate_unit_name(item.unit_name, normalized_names(names, exclude_index=index))
            if not unit_result.is_valid:
                self._line_item_errors[item.key] = FieldError(
                    TARGET_LINE_ITEM, unit_result.kind, unit_result.message
                )
        if self._line_item_errors:
            return self._field_failure()

        # Any pair of units that normalize to the same name
        duplicates = find_duplicate_indexes(names)
        if duplicates:
            for index in duplicates:
                self._line_item_errors[self._line_items[index].key] = FieldError(
                    TARGET_LINE_ITEM, ValidationErrorKind.DUPLICATE_NAME, MSG_DUPLICATE_UNITS
                )
            return self._field_failure()

        return self._save()

    def _save(self) -> Outcome:
        payload = Variant(
            variant_id=self._variant_id,
            variant_name=self._name.strip(),
            units=tuple(
                Unit(unit_id=item.unit_id, unit_name=item.unit_name.strip())
                for item in self._line_items
            ),
        )

        try:
            if self.is_edit:
                saved = self.gateway.update(self._variant_id, payload)
                message = MSG_UPDATED
            else:
                saved = self.gateway.create(payload)
                message = MSG_CREATED
        except DuplicateNameError as e:
            # Someone else saved this name after the form loaded
            logger.info(f"Backend rejected duplicate variant name '{payload.variant_name}'")
            if self._existing_names is not None:
                self._existing_names = self._existing_names | {normalize_name(payload.variant_name)}
            self._name_error = FieldError(TARGET_NAME, ValidationErrorKind.DUPLICATE_NAME, e.message)
            return self._field_failure()
        except RemoteError as e:
            logger.error(f"Error saving variant: {e}")
            return Outcome(
                OutcomeStatus.SUMMARY_ERROR,
                message=e.message or "An error occurred while saving variant",
                field_errors=self.snapshot.field_errors,
            )

        self._variant_id = saved.variant_id or self._variant_id
        self._set_draft(saved)
        return Outcome(OutcomeStatus.SUCCESS, message=message, variant=saved)

    def _field_failure(self) -> Outcome:
        errors = self.snapshot.field_errors
        return Outcome(
            OutcomeStatus.FIELD_ERRORS,
            message=errors[0].message if errors else None,
            field_errors=errors,
        )
