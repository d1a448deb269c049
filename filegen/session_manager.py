"""
Session state management for the file generator Streamlit app.
Keeps one schema store, field editor session and generation client per
browser session, plus the output parameters chosen by the user.
"""

import streamlit as st
from typing import Dict, Any, Optional
from datetime import datetime
import logging

from .config_loader import get_config_value
from .field_editor import FieldEditorSession
from .field_model import FileType, coerce_file_size, coerce_file_type
from .generation_client import GenerationClient
from .schema_store import SchemaStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages Streamlit session state for the file generator."""

    @staticmethod
    def initialize():
        """Initialize all session state variables. Existing keys are kept."""
        if 'schema_store' not in st.session_state:
            store = SchemaStore()
            st.session_state['schema_store'] = store
            st.session_state['field_editor'] = FieldEditorSession(store)

        try:
            default_type = coerce_file_type(get_config_value('generation', 'default_file_type', 'json'))
        except ValueError:
            default_type = FileType.JSON

        defaults = {
            'generation_client': None,
            'file_type': default_type,
            'file_size': coerce_file_size(get_config_value('generation', 'default_file_size', 1)),
            'pending_delete': None,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if st.session_state.generation_client is None:
            st.session_state.generation_client = GenerationClient()

        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_store() -> SchemaStore:
        """Get the schema store."""
        return st.session_state['schema_store']

    @staticmethod
    def get_editor() -> FieldEditorSession:
        """Get the field editor session."""
        return st.session_state['field_editor']

    @staticmethod
    def get_client() -> GenerationClient:
        """Get the generation client."""
        return st.session_state['generation_client']

    @staticmethod
    def get_file_type() -> FileType:
        return st.session_state.get('file_type', FileType.JSON)

    @staticmethod
    def set_file_type(file_type: Any):
        """Set the output file type; unknown values are ignored."""
        try:
            parsed = coerce_file_type(file_type)
        except ValueError:
            logger.warning(f"Ignoring unsupported file type: {file_type}")
            return
        st.session_state.file_type = parsed
        SessionManager.update_activity()

    @staticmethod
    def get_file_size() -> int:
        return st.session_state.get('file_size', 1)

    @staticmethod
    def set_file_size(file_size: Any):
        """Set the output size, clamped to the allowed range."""
        st.session_state.file_size = coerce_file_size(file_size)
        SessionManager.update_activity()

    @staticmethod
    def request_delete(field_id: str):
        """Remember a field awaiting delete confirmation."""
        st.session_state.pending_delete = field_id

    @staticmethod
    def get_pending_delete() -> Optional[str]:
        return st.session_state.get('pending_delete')

    @staticmethod
    def clear_pending_delete():
        st.session_state.pending_delete = None

    @staticmethod
    def resolve_pending_delete(confirmed: Optional[bool]) -> bool:
        """
        Apply the outcome of a delete confirmation.

        Args:
            confirmed: True to delete, False to keep, None when no answer yet

        Returns:
            True if a field was deleted
        """
        field_id = SessionManager.get_pending_delete()
        if confirmed is None or field_id is None:
            return False

        SessionManager.clear_pending_delete()
        if not confirmed:
            logger.debug(f"Delete cancelled for field id={field_id}")
            return False

        deleted = SessionManager.get_store().delete_field(field_id)
        SessionManager.update_activity()
        return deleted

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_session_id() -> str:
        """Get the session ID."""
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_session():
        """Reset the entire session state, releasing any generated file."""
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        client = st.session_state.get('generation_client')
        if client is not None:
            client.teardown()

        for key in list(st.session_state.keys()):
            del st.session_state[key]

        SessionManager.initialize()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        store = SessionManager.get_store()
        client = SessionManager.get_client()
        primary = store.primary_key_field()
        return {
            'session_id': SessionManager.get_session_id(),
            'field_count': len(store),
            'primary_key': primary.name if primary else None,
            'editor_open': SessionManager.get_editor().is_open,
            'file_type': SessionManager.get_file_type().value,
            'file_size': SessionManager.get_file_size(),
            'generating': client.is_generating,
            'artifact_ready': client.current_handle is not None,
        }
