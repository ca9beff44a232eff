"""Variant add/edit drawer for PharmaDesk.

Renders a VariantFormController: one input for the variant name, one row
per unit with add/remove buttons, and the save button. Widget callbacks
forward every change to the controller, which re-validates the field; the
component only draws the latest snapshot.
"""

import logging
from typing import Optional

import streamlit as st

from frontend.config.settings import config
from frontend.services import get_variant_gateway
from frontend.utils import SessionState, ACTION_EDIT
from frontend.utils.form_state import FormSnapshot, VariantFormController
from frontend.ui.components.notifications import notify, notify_outcome, KIND_ERROR

logger = logging.getLogger(__name__)


def get_variant_form() -> VariantFormController:
    """Get the controller for the open drawer, creating and loading it once."""
    form = SessionState.get('variant_form')
    if form is not None:
        return form

    variant_id = SessionState.get('form_variant_id')
    action = SessionState.get('form_action')
    form = VariantFormController(
        get_variant_gateway(),
        variant_id=variant_id if action == ACTION_EDIT else None,
    )
    form.subscribe(lambda snapshot: SessionState.set('variant_form_snapshot', snapshot))
    SessionState.set('variant_form', form)

    with st.spinner("Loading..."):
        outcome = form.load()
    if not outcome.success:
        notify(outcome.message, kind=KIND_ERROR)
    return form


def render_variant_form() -> bool:
    """Render the drawer contents.

    Returns:
        True if the variant was saved and the drawer should close
    """
    form = get_variant_form()
    snapshot: Optional[FormSnapshot] = SessionState.get('variant_form_snapshot') or form.snapshot
    form_id = id(form)

    # Variant name
    st.text_input(
        "Variant Name *",
        value=snapshot.name,
        max_chars=config.NAME_MAX_LENGTH,
        key=f"variant_name_{form_id}",
        on_change=_on_name_change,
        args=(form, f"variant_name_{form_id}"),
    )
    if snapshot.name_error:
        st.error(snapshot.name_error.message)

    # Units
    st.markdown("**Unit Types** \\*")
    for index, item in enumerate(snapshot.line_items):
        widget_key = f"unit_name_{form_id}_{item.key}"
        col_input, col_add, col_remove = st.columns([6, 1, 1])

        with col_input:
            st.text_input(
                "Unit Name *" if index == 0 else "Unit Name",
                value=item.unit_name,
                max_chars=config.NAME_MAX_LENGTH,
                key=widget_key,
                on_change=_on_unit_change,
                args=(form, item.key, widget_key),
            )
            error = snapshot.line_item_error(index)
            if error:
                st.error(error.message)

        with col_add:
            st.button(
                "➕",
                key=f"unit_add_{form_id}_{item.key}",
                help="Add another unit",
                disabled=snapshot.submitting,
                on_click=form.add_line_item,
            )

        with col_remove:
            if snapshot.can_remove_line_item:
                st.button(
                    "🗑️",
                    key=f"unit_remove_{form_id}_{item.key}",
                    help="Remove unit",
                    disabled=snapshot.submitting,
                    on_click=_on_unit_remove,
                    args=(form, item.key),
                )

    if snapshot.line_items_error:
        st.error(snapshot.line_items_error.message)

    st.divider()

    label = "Save" if snapshot.is_edit else "Add Variant"
    if st.button(label, type="primary", disabled=snapshot.submitting, key=f"variant_submit_{form_id}"):
        outcome = form.submit()
        notify_outcome(outcome)
        if outcome.success:
            return True
        st.rerun()

    return False


def _index_of(form: VariantFormController, row_key: int) -> Optional[int]:
    """Current position of a unit row (rows shift when others are removed)."""
    for index, item in enumerate(form.snapshot.line_items):
        if item.key == row_key:
            return index
    return None


def _on_name_change(form: VariantFormController, widget_key: str) -> None:
    form.set_name(st.session_state.get(widget_key, ""))


def _on_unit_change(form: VariantFormController, row_key: int, widget_key: str) -> None:
    index = _index_of(form, row_key)
    if index is None:
        logger.warning(f"Unit row {row_key} no longer exists")
        return
    form.set_line_item_name(index, st.session_state.get(widget_key, ""))


def _on_unit_remove(form: VariantFormController, row_key: int) -> None:
    index = _index_of(form, row_key)
    if index is not None:
        form.remove_line_item(index)
