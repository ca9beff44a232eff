"""Variant table component for PharmaDesk.

Two renderings of the same list:
- Table: one row per variant with Edit/Delete actions
- Compact: read-only dataframe view
"""

import logging
from typing import List, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from frontend.config.settings import config
from frontend.utils import SessionState, ACTION_EDIT, ACTION_DELETE

logger = logging.getLogger(__name__)

NO_UNITS_LABEL = "No units"


def format_units(variant) -> str:
    """Comma-separated unit names for the Units column."""
    names = [unit.unit_name for unit in variant.units if unit.unit_name]
    return ", ".join(names) if names else NO_UNITS_LABEL


def variants_to_dataframe(variants: Sequence) -> pd.DataFrame:
    """Build the display frame for the compact view."""
    return pd.DataFrame(
        {
            "Variant Name": [v.variant_name for v in variants],
            "Units": [format_units(v) for v in variants],
        },
        columns=["Variant Name", "Units"],
    )


def paginate(items: Sequence, page: int, per_page: int = None) -> Tuple[List, int]:
    """Slice one page out of ``items``.

    Args:
        items: Full list
        page: 1-indexed page number (clamped to the valid range)
        per_page: Page size (default from config)

    Returns:
        Tuple of (items on the page, total number of pages)
    """
    per_page = per_page or config.RESULTS_PER_PAGE
    pages = max(1, (len(items) + per_page - 1) // per_page)
    page = min(max(page, 1), pages)
    start = (page - 1) * per_page
    return list(items[start:start + per_page]), pages


def render_variant_table(variants: Sequence) -> Optional[Tuple[str, object]]:
    """Render the variant table with row actions.

    Args:
        variants: Variants to show (already filtered)

    Returns:
        Optional tuple of (action, variant) when Edit or Delete was clicked
    """
    if not variants:
        st.info("No variants found")
        return None

    page_items, pages = paginate(variants, SessionState.get('variant_table_page', 1))

    header = st.columns([3, 5, 2])
    header[0].markdown("**Variant Name**")
    header[1].markdown("**Units**")
    header[2].markdown("**Action**")

    clicked = None
    for variant in page_items:
        col1, col2, col3 = st.columns([3, 5, 2])

        with col1:
            st.markdown(variant.variant_name)

        with col2:
            st.caption(format_units(variant))

        with col3:
            edit_col, delete_col = st.columns(2)
            with edit_col:
                if st.button("Edit", key=f"variant_edit_{variant.variant_id}"):
                    clicked = (ACTION_EDIT, variant)
            with delete_col:
                if st.button("Delete", key=f"variant_delete_{variant.variant_id}"):
                    clicked = (ACTION_DELETE, variant)

    if pages > 1:
        page = st.number_input(
            "Page",
            min_value=1,
            max_value=pages,
            value=min(SessionState.get('variant_table_page', 1), pages),
            step=1,
        )
        SessionState.set('variant_table_page', int(page))
        st.caption(f"Page {int(page)} of {pages}")

    return clicked


def render_variant_dataframe(variants: Sequence) -> None:
    """Render the compact, read-only view."""
    if not variants:
        st.info("No variants found")
        return
    st.dataframe(variants_to_dataframe(variants), width='stretch', hide_index=True)
