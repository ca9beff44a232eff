"""Delete confirmation dialog for PharmaDesk.

Shown before a variant is deleted so a stray click on the row menu cannot
remove master data.
"""

import logging
from typing import Optional

import streamlit as st

logger = logging.getLogger(__name__)


def render_delete_dialog(variant) -> Optional[str]:
    """Render the delete confirmation.

    Args:
        variant: Variant about to be deleted

    Returns:
        'confirm', 'cancel', or None if the user has not decided yet
    """
    with st.container(border=True):
        st.warning("**Confirm Deletion**")
        st.markdown("Are you sure you want to delete it ?")
        st.caption(f"Variant: {variant.variant_name}")

        col1, col2 = st.columns(2)

        with col1:
            if st.button("Cancel", width="stretch", key="delete_cancel"):
                return "cancel"

        with col2:
            if st.button("Delete", type="primary", width="stretch", key="delete_confirm"):
                logger.debug(f"Delete confirmed for variant {variant.variant_id}")
                return "confirm"

    return None
