"""Sidebar component for PharmaDesk.

Navigation between master-data pages and backend connection status.
"""

import logging

import streamlit as st

from frontend.config.settings import config
from frontend.services import get_api_client
from frontend.utils import SessionState

logger = logging.getLogger(__name__)


def render_sidebar() -> None:
    """Render the sidebar with navigation and backend status."""
    with st.sidebar:
        st.markdown(f"## {config.APP_NAME}")
        st.markdown("*Pharmacy administration*")

        st.divider()

        st.markdown("**Masters**")
        if st.button("Variant Master", key="nav_variants", width='stretch'):
            SessionState.navigate_to_variants()
            SessionState.mark_variants_stale()
            st.rerun()

        snapshot = SessionState.get('variant_form_snapshot')
        if SessionState.get('show_variant_form') and snapshot is not None:
            st.caption(f"Editing: {snapshot.name or 'new variant'}")

        st.divider()

        render_backend_status()
        st.caption(f"v{config.APP_VERSION}")


def render_backend_status() -> None:
    """Render backend health status."""
    client = get_api_client()

    if client.health_check():
        st.caption("🟢 Backend connected")
    else:
        st.caption("🔴 Backend unavailable")
