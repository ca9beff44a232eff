"""
Unit tests for the variant form controller.

The gateway is a MagicMock; no HTTP is involved.
"""
import pytest
from unittest.mock import MagicMock

from frontend.services.variant_gateway import Unit, Variant
from frontend.utils.exceptions import DuplicateNameError, NotFoundError, RemoteError
from frontend.utils.form_state import (
    MSG_BUSY,
    MSG_CREATED,
    MSG_DUPLICATE_UNITS,
    MSG_LOAD_FAILED,
    MSG_UNIT_REQUIRED,
    MSG_UPDATED,
    TARGET_LINE_ITEM,
    TARGET_NAME,
    OutcomeStatus,
    VariantFormController,
)
from frontend.utils.validators import ValidationErrorKind


def _saved(variant_id="v-1", name="Tablet", units=("Box",)):
    return Variant(
        variant_id=variant_id,
        variant_name=name,
        units=tuple(Unit(unit_id=f"u-{i}", unit_name=u) for i, u in enumerate(units)),
    )


@pytest.fixture
def form(mock_gateway):
    controller = VariantFormController(mock_gateway)
    controller.load()
    return controller


def _fill(form, name, *units):
    form.set_name(name)
    for index, unit in enumerate(units):
        if index >= len(form.snapshot.line_items):
            form.add_line_item()
        form.set_line_item_name(index, unit)


class TestInitialState:
    """A new form starts with one empty unit row and no errors."""

    def test_create_mode(self, mock_gateway):
        form = VariantFormController(mock_gateway)
        snapshot = form.snapshot
        assert not snapshot.is_edit
        assert snapshot.name == ""
        assert len(snapshot.line_items) == 1
        assert snapshot.line_items[0].unit_name == ""
        assert snapshot.field_errors == ()
        assert not snapshot.submitting

    def test_existing_names_unknown_before_load(self, mock_gateway):
        form = VariantFormController(mock_gateway)
        assert form.existing_names is None


class TestLoad:
    """Tests for load()."""

    def test_fetches_existing_names(self, mock_gateway):
        mock_gateway.existing_names.return_value = frozenset({"tablet"})
        form = VariantFormController(mock_gateway)

        outcome = form.load()

        assert outcome.success
        assert form.existing_names == frozenset({"tablet"})
        mock_gateway.existing_names.assert_called_once_with(exclude_id=None)
        mock_gateway.get_by_id.assert_not_called()

    def test_edit_mode_excludes_self_and_loads_draft(self, mock_gateway):
        mock_gateway.get_by_id.return_value = _saved(units=("Box", "Strip"))
        form = VariantFormController(mock_gateway, variant_id="v-1")

        outcome = form.load()

        assert outcome.success
        mock_gateway.existing_names.assert_called_once_with(exclude_id="v-1")
        snapshot = form.snapshot
        assert snapshot.is_edit
        assert snapshot.name == "Tablet"
        assert [item.unit_name for item in snapshot.line_items] == ["Box", "Strip"]
        assert [item.unit_id for item in snapshot.line_items] == ["u-0", "u-1"]

    def test_variant_without_units_gets_empty_row(self, mock_gateway):
        mock_gateway.get_by_id.return_value = Variant(variant_id="v-1", variant_name="Tablet")
        form = VariantFormController(mock_gateway, variant_id="v-1")
        form.load()
        assert len(form.snapshot.line_items) == 1

    def test_fetch_failure_is_summary_error(self, mock_gateway):
        mock_gateway.get_by_id.side_effect = NotFoundError("Variant not found")
        form = VariantFormController(mock_gateway, variant_id="v-1")

        outcome = form.load()

        assert outcome.status == OutcomeStatus.SUMMARY_ERROR
        assert outcome.message == MSG_LOAD_FAILED

    def test_names_failure_keeps_form_usable(self, mock_gateway):
        mock_gateway.existing_names.side_effect = RemoteError("Error fetching variants: down")
        form = VariantFormController(mock_gateway)

        outcome = form.load()

        assert outcome.success
        assert form.existing_names is None


class TestEditing:
    """Tests for the per-keystroke editing operations."""

    def test_set_name_validates_against_existing(self, mock_gateway):
        mock_gateway.existing_names.return_value = frozenset({"tablet"})
        form = VariantFormController(mock_gateway)
        form.load()

        form.set_name("TABLET ")

        error = form.snapshot.name_error
        assert error.kind == ValidationErrorKind.DUPLICATE_NAME
        assert error.message == "Variant Name already exists"

    def test_set_name_clears_error(self, form):
        form.set_name("T")
        assert form.snapshot.name_error is not None
        form.set_name("Tablet")
        assert form.snapshot.name_error is None

    def test_unit_checked_against_siblings_only(self, mock_gateway):
        mock_gateway.existing_names.return_value = frozenset({"box"})
        form = VariantFormController(mock_gateway)
        form.load()

        form.set_line_item_name(0, "Box")

        assert form.snapshot.line_item_error(0) is None

    def test_unit_duplicate_of_sibling(self, form):
        _fill(form, "Tablet", "Strip", "strip ")
        error = form.snapshot.line_item_error(1)
        assert error.kind == ValidationErrorKind.DUPLICATE_NAME
        assert error.message == "Unit Name already exists"
        assert form.snapshot.line_item_error(0) is None

    def test_unit_error_cleared_when_fixed(self, form):
        form.set_line_item_name(0, "B")
        assert form.snapshot.line_item_error(0).kind == ValidationErrorKind.TOO_SHORT
        form.set_line_item_name(0, "Box")
        assert form.snapshot.line_item_error(0) is None

    def test_set_line_item_name_bad_index(self, form):
        with pytest.raises(IndexError):
            form.set_line_item_name(3, "Box")

    def test_add_line_item_does_not_validate(self, form):
        form.add_line_item()
        snapshot = form.snapshot
        assert len(snapshot.line_items) == 2
        assert snapshot.field_errors == ()

    def test_rows_have_distinct_keys(self, form):
        form.add_line_item()
        form.add_line_item()
        keys = [item.key for item in form.snapshot.line_items]
        assert len(set(keys)) == 3

    def test_remove_last_line_item_is_noop(self, form):
        form.set_line_item_name(0, "Box")
        form.remove_line_item(0)
        snapshot = form.snapshot
        assert len(snapshot.line_items) == 1
        assert snapshot.line_items[0].unit_name == "Box"
        assert not snapshot.can_remove_line_item

    def test_remove_line_item_drops_its_error(self, form):
        _fill(form, "Tablet", "Box", "B")
        form.remove_line_item(1)
        assert form.snapshot.field_errors == ()

    def test_error_follows_row_after_removal(self, form):
        _fill(form, "Tablet", "Box", "Strip", "S!")
        form.remove_line_item(0)
        snapshot = form.snapshot
        assert snapshot.line_item_error(0) is None
        error = snapshot.line_item_error(1)
        assert error.kind == ValidationErrorKind.INVALID_CHARACTERS
        assert error.index == 1


class TestSubscribe:
    """Tests for snapshot listeners."""

    def test_listener_receives_snapshots(self, form):
        seen = []
        form.subscribe(seen.append)

        form.set_name("Tablet")
        form.add_line_item()

        assert [s.name for s in seen] == ["Tablet", "Tablet"]
        assert len(seen[-1].line_items) == 2

    def test_unsubscribe(self, form):
        seen = []
        unsubscribe = form.subscribe(seen.append)
        unsubscribe()
        form.set_name("Tablet")
        assert seen == []
        unsubscribe()

    def test_snapshot_is_immutable(self, form):
        snapshot = form.snapshot
        with pytest.raises(AttributeError):
            snapshot.name = "x"
        form.set_name("Tablet")
        assert snapshot.name == ""


class TestSubmitValidation:
    """Submit-time checks that never reach the gateway."""

    def test_short_name(self, form, mock_gateway):
        _fill(form, "T", "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert outcome.message == "Variant Name must be at least 2 characters"
        assert outcome.field_errors[0].target == TARGET_NAME
        mock_gateway.create.assert_not_called()

    def test_duplicate_name(self, mock_gateway):
        mock_gateway.existing_names.return_value = frozenset({"tablet"})
        form = VariantFormController(mock_gateway)
        form.load()
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert outcome.message == "Variant Name already exists"
        mock_gateway.create.assert_not_called()

    def test_blank_units_all_marked(self, form, mock_gateway):
        form.set_name("Tablet")
        form.add_line_item()
        form.add_line_item()
        form.set_line_item_name(1, "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert outcome.message == MSG_UNIT_REQUIRED
        indexes = [e.index for e in outcome.field_errors if e.target == TARGET_LINE_ITEM]
        assert indexes == [0, 2]
        assert all(e.kind == ValidationErrorKind.REQUIRED for e in outcome.field_errors)
        mock_gateway.create.assert_not_called()

    def test_invalid_units_all_marked(self, form, mock_gateway):
        _fill(form, "Tablet", "B", "Box", "St@rip")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert outcome.message == "Unit Name must be at least 2 characters"
        kinds = {e.index: e.kind for e in outcome.field_errors}
        assert kinds == {
            0: ValidationErrorKind.TOO_SHORT,
            2: ValidationErrorKind.INVALID_CHARACTERS,
        }
        mock_gateway.create.assert_not_called()

    def test_case_insensitive_unit_duplicates(self, form, mock_gateway):
        _fill(form, "Tablet", "Strip", "strip ")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert all(e.kind == ValidationErrorKind.DUPLICATE_NAME for e in outcome.field_errors)
        assert {e.index for e in outcome.field_errors} == {0, 1}
        mock_gateway.create.assert_not_called()
        mock_gateway.update.assert_not_called()

    def test_field_errors_replace_previous_ones(self, form):
        _fill(form, "T", "Box")
        form.submit()
        form.set_name("Tablet")
        form.set_line_item_name(0, "B")

        outcome = form.submit()

        assert [e.target for e in outcome.field_errors] == [TARGET_LINE_ITEM]

    def test_names_fetched_on_submit_when_missing(self, mock_gateway):
        mock_gateway.existing_names.side_effect = [RemoteError("down"), frozenset({"tablet"})]
        form = VariantFormController(mock_gateway)
        form.load()
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.message == "Variant Name already exists"
        assert mock_gateway.existing_names.call_count == 2

    def test_names_fetch_failure_on_submit(self, mock_gateway):
        mock_gateway.existing_names.side_effect = RemoteError("down")
        form = VariantFormController(mock_gateway)
        form.load()
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.SUMMARY_ERROR
        assert outcome.message == "Error fetching variants, please try again"
        mock_gateway.create.assert_not_called()


class TestSubmitSave:
    """Submit paths that call the gateway."""

    def test_create(self, form, mock_gateway):
        mock_gateway.create.return_value = _saved(units=("Box", "Strip"))
        _fill(form, "  Tablet ", " Box", "Strip")

        outcome = form.submit()

        assert outcome.success
        assert outcome.message == MSG_CREATED
        assert outcome.variant.variant_id == "v-1"
        sent = mock_gateway.create.call_args[0][0]
        assert sent.variant_id == ""
        assert sent.variant_name == "Tablet"
        assert sent.unit_names == ["Box", "Strip"]
        mock_gateway.update.assert_not_called()

    def test_create_adopts_saved_record(self, form, mock_gateway):
        mock_gateway.create.return_value = _saved()
        _fill(form, "Tablet", "Box")

        form.submit()

        snapshot = form.snapshot
        assert snapshot.variant_id == "v-1"
        assert snapshot.line_items[0].unit_id == "u-0"
        assert not snapshot.submitting

    def test_update(self, mock_gateway):
        mock_gateway.get_by_id.return_value = _saved(units=("Box",))
        mock_gateway.update.return_value = _saved(name="Tablets", units=("Box", "Strip"))
        form = VariantFormController(mock_gateway, variant_id="v-1")
        form.load()
        form.set_name("Tablets")
        form.add_line_item()
        form.set_line_item_name(1, "Strip")

        outcome = form.submit()

        assert outcome.success
        assert outcome.message == MSG_UPDATED
        variant_id, sent = mock_gateway.update.call_args[0]
        assert variant_id == "v-1"
        assert [u.unit_id for u in sent.units] == ["u-0", ""]
        mock_gateway.create.assert_not_called()

    def test_update_keeping_own_name(self, mock_gateway):
        # The edited variant is excluded from the reference set
        mock_gateway.existing_names.return_value = frozenset({"capsule"})
        mock_gateway.get_by_id.return_value = _saved()
        mock_gateway.update.return_value = _saved()
        form = VariantFormController(mock_gateway, variant_id="v-1")
        form.load()

        outcome = form.submit()

        assert outcome.success

    def test_remote_duplicate_becomes_name_error(self, form, mock_gateway):
        mock_gateway.create.side_effect = DuplicateNameError("Variant Name already exists")
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.FIELD_ERRORS
        assert outcome.message == "Variant Name already exists"
        assert form.snapshot.name_error.kind == ValidationErrorKind.DUPLICATE_NAME
        assert "tablet" in form.existing_names

    def test_remote_failure_is_summary_error(self, form, mock_gateway):
        mock_gateway.create.side_effect = RemoteError("Error creating variant: boom", status_code=500)
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.status == OutcomeStatus.SUMMARY_ERROR
        assert outcome.message == "Error creating variant: boom"
        snapshot = form.snapshot
        assert snapshot.name == "Tablet"
        assert not snapshot.submitting


class TestReentrancy:
    """Only one save may be in flight."""

    def test_submit_during_submit_is_rejected(self, form, mock_gateway):
        nested = []

        def create(variant):
            nested.append(form.submit())
            return _saved()

        mock_gateway.create.side_effect = create
        _fill(form, "Tablet", "Box")

        outcome = form.submit()

        assert outcome.success
        assert nested[0].status == OutcomeStatus.REJECTED
        assert nested[0].message == MSG_BUSY
        assert mock_gateway.create.call_count == 1

    def test_submitting_flag_visible_to_listeners(self, form, mock_gateway):
        mock_gateway.create.return_value = _saved()
        _fill(form, "Tablet", "Box")
        flags = []
        form.subscribe(lambda s: flags.append(s.submitting))

        form.submit()

        assert flags[0] is True
        assert flags[-1] is False

    def test_flag_reset_after_unexpected_error(self, form, mock_gateway):
        mock_gateway.create.side_effect = KeyError("boom")
        _fill(form, "Tablet", "Box")

        with pytest.raises(KeyError):
            form.submit()

        assert not form.submitting
