"""Reusable UI components for PharmaDesk."""
from frontend.ui.components.notifications import (
    notify,
    notify_outcome,
    flush_notifications,
    KIND_SUCCESS,
    KIND_ERROR,
    KIND_WARNING,
    KIND_INFO,
)
from frontend.ui.components.sidebar import (
    render_sidebar,
    render_backend_status,
)
from frontend.ui.components.variant_form import (
    render_variant_form,
    get_variant_form,
)
from frontend.ui.components.variant_table import (
    render_variant_table,
    render_variant_dataframe,
    variants_to_dataframe,
    format_units,
    paginate,
)
from frontend.ui.components.delete_dialog import (
    render_delete_dialog,
)

__all__ = [
    # Notifications
    "notify",
    "notify_outcome",
    "flush_notifications",
    "KIND_SUCCESS",
    "KIND_ERROR",
    "KIND_WARNING",
    "KIND_INFO",
    # Sidebar
    "render_sidebar",
    "render_backend_status",
    # Variant form
    "render_variant_form",
    "get_variant_form",
    # Variant table
    "render_variant_table",
    "render_variant_dataframe",
    "variants_to_dataframe",
    "format_units",
    "paginate",
    # Delete dialog
    "render_delete_dialog",
]
