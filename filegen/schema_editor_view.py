"""
Schema Editor View for the file generator.
Renders the field list with its primary key, reorder, edit and delete controls,
and the add/edit form backed by the field editor session.
"""

import streamlit as st
import logging
from typing import Optional

from .exceptions import ValidationError
from .error_handler import ErrorHandler
from .field_model import FieldType, SchemaField
from .session_manager import SessionManager
from .ui_feedback import Notify, UserFeedback

logger = logging.getLogger(__name__)

EDITOR_NAME_KEY = "editor_name"
EDITOR_TYPE_KEY = "editor_type"
EDITOR_ERROR_KEY = "editor_error"

TYPE_OPTIONS = [t.value for t in FieldType]


def _pk_key(field_id: str) -> str:
    return f"pk_{field_id}"


class SchemaEditor:
    """Controller for the field list and the add/edit form."""

    @staticmethod
    def render() -> None:
        """Render the whole schema editing area."""
        if st.button("Add Property", use_container_width=True, key="add_property"):
            SchemaEditor._open_editor(None)

        if SessionManager.get_editor().is_open:
            SchemaEditor._render_editor_form()

        SchemaEditor._render_delete_confirmation()
        SchemaEditor._render_field_list()

    @staticmethod
    def _open_editor(field: Optional[SchemaField]) -> None:
        draft = SessionManager.get_editor().open(field)
        st.session_state[EDITOR_NAME_KEY] = draft.name
        st.session_state[EDITOR_TYPE_KEY] = draft.type.value
        st.session_state[EDITOR_ERROR_KEY] = None

    @staticmethod
    def _render_editor_form() -> None:
        editor = SessionManager.get_editor()
        title = "Edit Property" if editor.is_editing else "Add Property"

        with st.container(border=True):
            st.subheader(title)
            st.text_input("Field Name:", key=EDITOR_NAME_KEY)
            st.selectbox(
                "Data Type:",
                TYPE_OPTIONS,
                key=EDITOR_TYPE_KEY,
                format_func=lambda t: t.capitalize(),
            )

            error = st.session_state.get(EDITOR_ERROR_KEY)
            if error:
                st.error(error)

            col1, col2 = st.columns(2)
            with col1:
                st.button(
                    "Update" if editor.is_editing else "Add",
                    type="primary",
                    key="editor_commit",
                    on_click=SchemaEditor._commit_editor,
                )
            with col2:
                st.button("Cancel", key="editor_cancel", on_click=SchemaEditor._cancel_editor)

    @staticmethod
    def _commit_editor() -> None:
        editor = SessionManager.get_editor()
        editor.set_draft_field(
            name=st.session_state.get(EDITOR_NAME_KEY, ""),
            type=st.session_state.get(EDITOR_TYPE_KEY, FieldType.STRING.value),
        )
        try:
            field = editor.commit()
        except ValidationError as e:
            # Draft stays open so the user can correct it
            st.session_state[EDITOR_ERROR_KEY] = ErrorHandler.message_for(e)
            logger.debug(f"Editor commit rejected: {e}")
            return
        except Exception as e:
            ErrorHandler.handle_error(e, "saving field")
            return

        st.session_state[EDITOR_ERROR_KEY] = None
        SessionManager.update_activity()
        Notify.success(f"Saved field: {field.name}")

    @staticmethod
    def _cancel_editor() -> None:
        SessionManager.get_editor().cancel()
        st.session_state[EDITOR_ERROR_KEY] = None

    @staticmethod
    def _render_field_list() -> None:
        store = SessionManager.get_store()
        fields = store.fields
        if not fields:
            st.info("No properties yet. Use **Add Property** to define the first field.")
            return

        st.subheader("Properties:")
        last_index = len(fields) - 1

        for index, field in enumerate(fields):
            pk_key = _pk_key(field.id)
            # Keep the checkbox in sync with the store, which may have cleared it
            st.session_state[pk_key] = field.primary_key

            with st.container(border=True):
                col_name, col_pk, col_up, col_down, col_edit, col_delete = st.columns([5, 2, 1, 1, 1, 1])
                with col_name:
                    badge = " 🔑 `PK`" if field.primary_key else ""
                    st.markdown(f"**{field.name}** ({field.type.value}){badge}")
                with col_pk:
                    st.checkbox(
                        "Primary Key",
                        key=pk_key,
                        on_change=SchemaEditor._toggle_primary_key,
                        args=(field.id,),
                    )
                with col_up:
                    st.button("↑", key=f"up_{field.id}", disabled=index == 0,
                              on_click=SchemaEditor._move_field, args=(index, index - 1))
                with col_down:
                    st.button("↓", key=f"down_{field.id}", disabled=index == last_index,
                              on_click=SchemaEditor._move_field, args=(index, index + 1))
                with col_edit:
                    st.button("✏️", key=f"edit_{field.id}", help="Edit Property",
                              on_click=SchemaEditor._open_editor, args=(field,))
                with col_delete:
                    st.button("🗑️", key=f"delete_{field.id}", help="Delete Property",
                              on_click=SessionManager.request_delete, args=(field.id,))

        if len(fields) > 1:
            SchemaEditor._render_move_controls(fields)

    @staticmethod
    def _render_move_controls(fields) -> None:
        """Move any field to any position in one step."""
        positions = list(range(len(fields)))
        with st.expander("Move property"):
            col1, col2, col3 = st.columns([3, 3, 1])
            with col1:
                source = st.selectbox(
                    "Property",
                    positions,
                    format_func=lambda i: f"{i + 1}. {fields[i].name}",
                    key="move_source",
                )
            with col2:
                destination = st.selectbox(
                    "To position",
                    positions,
                    format_func=lambda i: str(i + 1),
                    key="move_destination",
                )
            with col3:
                st.button("Move", key="move_apply", on_click=SchemaEditor._move_field,
                          args=(source, destination))

    @staticmethod
    def _move_field(source_index: int, destination_index: int) -> None:
        if SessionManager.get_store().reorder(source_index, destination_index):
            SessionManager.update_activity()

    @staticmethod
    def _toggle_primary_key(field_id: str) -> None:
        value = bool(st.session_state.get(_pk_key(field_id)))
        ErrorHandler.with_error_handling(
            lambda: SessionManager.get_store().set_primary_key(field_id, value),
            "toggling primary key",
        )
        SessionManager.update_activity()

    @staticmethod
    def _render_delete_confirmation() -> None:
        field_id = SessionManager.get_pending_delete()
        if field_id is None:
            return

        store = SessionManager.get_store()
        match = [f for f in store.fields if f.id == field_id]
        if not match:
            SessionManager.clear_pending_delete()
            return

        answer = UserFeedback.confirmation_dialog(
            "Delete property",
            f"Are you sure you want to delete **{match[0].name}**?",
            confirm_text="Delete",
            key="delete_field",
        )
        if answer is not None:
            if SessionManager.resolve_pending_delete(answer):
                Notify.success(f"Deleted field: {match[0].name}")
            st.rerun()
