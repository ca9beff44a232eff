"""Page components for PharmaDesk."""
from frontend.ui.pages.variants import render_variants_page

__all__ = [
    "render_variants_page",
]
