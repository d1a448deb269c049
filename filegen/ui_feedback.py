"""
UI feedback utilities for the file generator.
Provides toast notifications, loading indicators and the confirmation prompt
used before destructive actions.
"""

import streamlit as st
from typing import Optional
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


@contextmanager
def show_loading(message: str = "Loading..."):
    """Context manager for spinner loading indicator."""
    with st.spinner(message):
        yield


class Notify:
    """
    Toast notification helper.

    Usage:
    Notify.success("Field added")
    """

    ICONS = {
        'success': '✅',
    }

    @staticmethod
    def _display_notification(message: str, notification_type: str = 'info') -> None:
        icon = Notify.ICONS.get(notification_type, 'ℹ️')
        st.toast(message, icon=icon)

    @staticmethod
    def success(message: str) -> None:
        Notify._display_notification(message, 'success')


class UserFeedback:
    """User prompts."""

    @staticmethod
    def confirmation_dialog(
        title: str,
        message: str,
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        key: str = "confirm"
    ) -> Optional[bool]:
        """
        Show a confirmation prompt.

        Returns:
            True if confirmed, False if cancelled, None if no answer yet
        """
        st.warning(f"**{title}**  \n{message}")

        col1, col2 = st.columns(2)
        with col1:
            confirmed = st.button(confirm_text, type="primary", key=f"{key}_yes")
        with col2:
            cancelled = st.button(cancel_text, key=f"{key}_no")

        if confirmed:
            return True
        elif cancelled:
            return False
        return None
