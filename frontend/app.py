"""PharmaDesk Frontend Application.

Streamlit app that uses modular components and the backend API.
"""

import logging
import sys
from pathlib import Path

# Load environment variables from .env file BEFORE any other imports
# so the frozen config picks up API_BASE_URL and friends
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

import streamlit as st

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.config.settings import config
from frontend.utils import SessionState, VIEW_VARIANTS
from frontend.ui.components import render_sidebar, flush_notifications
from frontend.ui.pages import render_variants_page

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Main application entry point."""
    # Page configuration - must be first Streamlit command
    st.set_page_config(
        page_title=config.APP_NAME,
        page_icon=config.APP_ICON,
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _apply_custom_css()

    # Initialize session state with defaults
    SessionState.init_defaults()

    # Show toasts queued before the last rerun
    flush_notifications()

    render_sidebar()

    # Route to appropriate page based on current view
    current_view = SessionState.get_current_view()

    if current_view == VIEW_VARIANTS:
        render_variants_page()

    else:
        # Fallback to the variant master
        SessionState.navigate_to_variants()
        render_variants_page()


def _apply_custom_css():
    """Apply custom CSS styling."""
    st.markdown("""
        <style>
        /* Better sidebar styling */
        section[data-testid="stSidebar"] > div {
            padding-top: 1rem;
        }

        /* Improve button consistency */
        .stButton > button {
            font-size: 0.875rem;
        }

        /* Inline field errors */
        div[data-testid="stAlert"] {
            padding: 0.25rem 0.75rem;
        }

        /* Hide Streamlit footer only (keep menu for theme settings) */
        footer {visibility: hidden;}
        </style>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
