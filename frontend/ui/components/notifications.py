"""Toast notifications for PharmaDesk.

Messages are queued in session state and shown on the next render, so a
toast raised right before st.rerun() is not lost.
"""

import logging
from typing import Optional

import streamlit as st

from frontend.config.settings import config
from frontend.utils import SessionState
from frontend.utils.form_state import Outcome, OutcomeStatus

logger = logging.getLogger(__name__)

KIND_SUCCESS = "success"
KIND_ERROR = "error"
KIND_WARNING = "warning"
KIND_INFO = "info"

_ICONS = {
    KIND_SUCCESS: "✅",
    KIND_ERROR: "❌",
    KIND_WARNING: "⚠️",
    KIND_INFO: "ℹ️",
}


def notify(message: str, kind: str = KIND_INFO, duration_ms: Optional[int] = None) -> None:
    """Queue a toast notification.

    Args:
        message: Text to show
        kind: 'success', 'error', 'warning' or 'info'
        duration_ms: How long to show it (default from config)
    """
    SessionState.push_notification(
        message,
        kind=kind,
        duration_ms=duration_ms or config.NOTIFICATION_DURATION_MS,
    )
    logger.debug(f"Queued {kind} notification: {message}")


def notify_outcome(outcome: Outcome) -> None:
    """Turn a form outcome into a toast (rejected submits stay silent)."""
    if outcome.status == OutcomeStatus.REJECTED or not outcome.message:
        return
    kind = KIND_SUCCESS if outcome.success else KIND_ERROR
    notify(outcome.message, kind=kind)


def flush_notifications() -> None:
    """Show every queued toast. Call once near the top of each render."""
    for notification in SessionState.pop_notifications():
        st.toast(notification.message, icon=_ICONS.get(notification.kind))
