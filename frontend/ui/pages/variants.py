"""Variant Master page for PharmaDesk.

Lists variants with their units, filters them with the search box and
drives the add/edit drawer and the delete confirmation.

Data flow:
- The list is fetched from the backend when first shown and again after
  every save, delete or drawer close
- Search filtering happens locally on the fetched list
"""

import logging
from typing import List, Optional

import streamlit as st

from frontend.services import Variant, get_variant_gateway
from frontend.utils import (
    SessionState,
    ACTION_EDIT,
    ACTION_DELETE,
    NotFoundError,
    RemoteError,
    filter_variants,
)
from frontend.ui.components import (
    render_variant_table,
    render_variant_dataframe,
    render_variant_form,
    render_delete_dialog,
    notify,
    KIND_SUCCESS,
    KIND_ERROR,
)

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load variant data"


def render_variants_page() -> None:
    """Render the variant list page."""
    render_header()

    if SessionState.get('show_delete_confirmation'):
        render_delete_confirmation()

    if SessionState.get('show_variant_form'):
        render_variant_drawer()

    st.divider()

    render_variant_list()


def render_header() -> None:
    """Render the title, search box and add button."""
    col1, col2, col3, col4 = st.columns([3, 3, 1, 1])

    with col1:
        st.title("Variant List")

    with col2:
        search_query = st.text_input(
            "Search",
            value=SessionState.get('variant_search_query', ''),
            placeholder="Search Table...",
            label_visibility="collapsed"
        )
        SessionState.set('variant_search_query', search_query)

    with col3:
        view_mode = st.selectbox(
            "View",
            ["Table", "Compact"],
            index=0,
            label_visibility="collapsed"
        )
        SessionState.set('variant_view_mode', view_mode)

    with col4:
        if st.button("+ Add Variant", type="primary", width='stretch'):
            SessionState.open_variant_form()
            st.rerun()


def render_variant_drawer() -> None:
    """Render the add/edit form in a bordered panel above the list."""
    with st.container(border=True):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.subheader("Variant Master")
        with col2:
            if st.button("✖ Close", key="variant_form_close", width='stretch'):
                SessionState.close_variant_form()
                st.rerun()

        if render_variant_form():
            SessionState.close_variant_form()
            st.rerun()


def render_delete_confirmation() -> None:
    """Render the delete confirmation and perform the delete."""
    variant = SessionState.get('variant_to_delete')
    if variant is None:
        SessionState.cancel_delete()
        return

    decision = render_delete_dialog(variant)
    if decision == "cancel":
        SessionState.cancel_delete()
        st.rerun()
    elif decision == "confirm":
        delete_variant(variant)
        SessionState.cancel_delete()
        SessionState.mark_variants_stale()
        st.rerun()


def delete_variant(variant: Variant) -> bool:
    """Delete a variant and report the result as a toast.

    Returns:
        True if the backend deleted it
    """
    try:
        get_variant_gateway().delete(variant.variant_id)
    except NotFoundError:
        logger.warning(f"Variant {variant.variant_id} was already deleted")
        notify("Variant no longer exists", kind=KIND_ERROR)
        return False
    except RemoteError as e:
        logger.error(f"Error deleting variant: {e}")
        notify(e.message or "Failed to delete variant", kind=KIND_ERROR)
        return False

    notify("Variant deleted successfully", kind=KIND_SUCCESS)
    return True


def render_variant_list() -> None:
    """Render the (filtered) variant list."""
    variants = _fetch_variants()

    if variants is None:
        st.error(f"**Error!** {SessionState.get('variants_error') or LOAD_ERROR_MESSAGE}")
        if st.button("Retry", key="variants_retry"):
            SessionState.mark_variants_stale()
            st.rerun()
        return

    search_query = SessionState.get('variant_search_query', '')
    variants = filter_variants(variants, search_query)

    st.caption(f"Showing {len(variants)} variant(s)")

    if SessionState.get('variant_view_mode', 'Table') == "Compact":
        render_variant_dataframe(variants)
        return

    clicked = render_variant_table(variants)
    if clicked:
        action, variant = clicked
        if action == ACTION_EDIT:
            SessionState.cancel_delete()
            SessionState.open_variant_form(variant.variant_id, ACTION_EDIT)
        elif action == ACTION_DELETE:
            SessionState.request_delete(variant)
        st.rerun()


def _fetch_variants() -> Optional[List[Variant]]:
    """Get the variant list, fetching it from the backend when stale.

    Returns:
        List of variants, or None if the last fetch failed
    """
    if not SessionState.get('variants_stale', True) and SessionState.get('variants') is not None:
        return SessionState.get('variants')

    try:
        with st.spinner("loading ..."):
            variants = get_variant_gateway().list()
    except RemoteError as e:
        logger.error(f"Failed to fetch variants: {e}")
        SessionState.set('variants', None)
        SessionState.set('variants_error', LOAD_ERROR_MESSAGE)
        SessionState.set('variants_stale', True)
        return None

    SessionState.set('variants', variants)
    SessionState.set('variants_error', None)
    SessionState.set('variants_stale', False)
    return variants
