"""Session state management for PharmaDesk frontend.

This module provides centralized session state management for Streamlit,
with features like:
- Default value initialization
- Type-safe access
- View management
- Variant drawer and delete-confirmation state
- A notification queue that survives st.rerun()
"""

import copy
import logging
from typing import Any, Optional, Dict, List, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _default_factory(value: Any) -> Callable[[], Any]:
    """Create a factory function that returns a deep copy of the value.

    This prevents mutable default values from being shared across sessions.
    Uses deepcopy to handle nested mutable structures safely.
    """
    if isinstance(value, (list, dict, set)):
        return lambda: copy.deepcopy(value)
    return lambda: value


# View constants
VIEW_VARIANTS = "variants"

# Drawer actions
ACTION_EDIT = "edit"
ACTION_DELETE = "delete"


@dataclass
class Notification:
    """A toast waiting to be shown."""
    message: str
    kind: str = "info"
    duration_ms: int = 3000


class SessionState:
    """Centralized session state management for PharmaDesk.

    This class provides a clean interface for managing Streamlit session state.
    It handles initialization, access, and cleanup of session state values.

    Example:
        >>> from frontend.utils import SessionState
        >>> SessionState.init_defaults()
        >>> SessionState.set('my_key', 'my_value')
        >>> value = SessionState.get('my_key')
    """

    # Default value factories for session state keys
    # Using factories prevents mutable defaults from being shared across sessions
    _DEFAULT_FACTORIES: Dict[str, Callable[[], Any]] = {
        # Navigation state
        'current_view': _default_factory(VIEW_VARIANTS),
        'variant_search_query': _default_factory(""),

        # Variant list
        'variants': _default_factory(None),
        'variants_error': _default_factory(None),
        'variants_stale': _default_factory(True),

        # Drawer (add/edit form)
        'show_variant_form': _default_factory(False),
        'form_variant_id': _default_factory(None),
        'form_action': _default_factory(None),
        'variant_form': _default_factory(None),
        'variant_form_snapshot': _default_factory(None),

        # Delete confirmation
        'show_delete_confirmation': _default_factory(False),
        'variant_to_delete': _default_factory(None),

        # Notifications
        'pending_notifications': _default_factory([]),
    }

    # Keys associated with each mode/view
    MODE_KEYS: Dict[str, List[str]] = {
        'variant_form': [
            'show_variant_form',
            'form_variant_id',
            'form_action',
            'variant_form',
            'variant_form_snapshot',
        ],
        'delete': [
            'show_delete_confirmation',
            'variant_to_delete',
        ],
    }

    @classmethod
    def _get_session_state(cls):
        """Get Streamlit session state (patched in tests)."""
        import streamlit as st
        return st.session_state

    @classmethod
    def init_defaults(cls) -> None:
        """Initialize default session state values.

        Call this at the start of your Streamlit app to ensure
        all expected keys exist with sensible defaults.
        """
        session_state = cls._get_session_state()

        for key, factory in cls._DEFAULT_FACTORIES.items():
            if key not in session_state:
                session_state[key] = factory()
                logger.debug(f"Initialized session state key: {key}")

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a value from session state."""
        session_state = cls._get_session_state()
        return session_state.get(key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Set a value in session state."""
        session_state = cls._get_session_state()
        session_state[key] = value
        logger.debug(f"Set session state: {key} = {type(value).__name__}")

    @classmethod
    def clear(cls, key: str) -> None:
        """Clear a session state key."""
        session_state = cls._get_session_state()
        if key in session_state:
            del session_state[key]
            logger.debug(f"Cleared session state key: {key}")

    @classmethod
    def clear_mode(cls, mode: str) -> None:
        """Reset all state associated with a specific mode to its defaults."""
        for key in cls.MODE_KEYS.get(mode, []):
            factory = cls._DEFAULT_FACTORIES.get(key)
            if factory:
                cls.set(key, factory())
            else:
                cls.clear(key)
        logger.debug(f"Cleared session state for mode: {mode}")

    @classmethod
    def has(cls, key: str) -> bool:
        """Check if a key exists in session state."""
        session_state = cls._get_session_state()
        return key in session_state

    @classmethod
    def get_or_set(cls, key: str, default: Any) -> Any:
        """Get value if exists, otherwise set and return default."""
        if not cls.has(key):
            cls.set(key, default)
        return cls.get(key)

    # View management helpers
    @classmethod
    def get_current_view(cls) -> str:
        """Get the current view."""
        return cls.get('current_view', VIEW_VARIANTS)

    @classmethod
    def set_view(cls, view: str) -> None:
        """Set the current view."""
        cls.set('current_view', view)

    @classmethod
    def navigate_to_variants(cls) -> None:
        """Navigate to the variant list."""
        cls.set_view(VIEW_VARIANTS)

    # Variant list helpers
    @classmethod
    def mark_variants_stale(cls) -> None:
        """Force the variant list to be fetched again on the next render."""
        cls.set('variants_stale', True)

    # Drawer helpers
    @classmethod
    def open_variant_form(cls, variant_id: Optional[str] = None, action: Optional[str] = None) -> None:
        """Open the add/edit drawer.

        Args:
            variant_id: Variant to edit, or None to add a new one
            action: ACTION_EDIT when editing
        """
        cls.clear_mode('variant_form')
        cls.set('form_variant_id', variant_id)
        cls.set('form_action', action)
        cls.set('show_variant_form', True)

    @classmethod
    def close_variant_form(cls) -> None:
        """Close the drawer and refresh the list."""
        cls.clear_mode('variant_form')
        cls.mark_variants_stale()

    # Delete confirmation helpers
    @classmethod
    def request_delete(cls, variant: Any) -> None:
        """Ask for confirmation before deleting ``variant``."""
        cls.set('variant_to_delete', variant)
        cls.set('show_delete_confirmation', True)

    @classmethod
    def cancel_delete(cls) -> None:
        """Dismiss the delete confirmation."""
        cls.clear_mode('delete')

    # Notification helpers
    @classmethod
    def push_notification(cls, message: str, kind: str = "info", duration_ms: int = 3000) -> None:
        """Queue a toast to be shown on the next render."""
        queue = cls.get('pending_notifications') or []
        queue.append(Notification(message=message, kind=kind, duration_ms=duration_ms))
        cls.set('pending_notifications', queue)

    @classmethod
    def pop_notifications(cls) -> List[Notification]:
        """Take all queued toasts."""
        queue = cls.get('pending_notifications') or []
        cls.set('pending_notifications', [])
        return queue
