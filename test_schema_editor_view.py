"""
Tests for the schema editor view: callbacks with a mocked Streamlit, and full
page runs through Streamlit's AppTest harness.
"""

import pytest
from unittest.mock import patch
from streamlit.testing.v1 import AppTest

from filegen.field_editor import FieldEditorSession
from filegen.field_model import SchemaField, FieldType
from filegen.schema_editor_view import (
    SchemaEditor,
    EDITOR_NAME_KEY,
    EDITOR_TYPE_KEY,
    EDITOR_ERROR_KEY,
)
from filegen.schema_store import SchemaStore

APP_FILE = "streamlit_app.py"


@pytest.fixture
def view_state(mock_streamlit, abc_store):
    """Session state holding the a, b, c store and its editor."""
    state = mock_streamlit['session_state']
    state['schema_store'] = abc_store
    state['field_editor'] = FieldEditorSession(abc_store)
    state['pending_delete'] = None
    return state


def run_app(store=None):
    at = AppTest.from_file(APP_FILE, default_timeout=10)
    if store is not None:
        at.session_state['schema_store'] = store
        at.session_state['field_editor'] = FieldEditorSession(store)
    return at.run()


def keys_of(widgets):
    return [w.key for w in widgets]


class TestCommitEditor:
    """Test cases for the form's commit callback."""

    def test_commit_adds_field_and_closes(self, view_state, mock_streamlit, abc_store):
        SchemaEditor._open_editor(None)
        view_state[EDITOR_NAME_KEY] = " email "
        view_state[EDITOR_TYPE_KEY] = "email"

        SchemaEditor._commit_editor()

        assert abc_store.find_by_name("email").type == FieldType.EMAIL
        assert not view_state['field_editor'].is_open
        assert view_state[EDITOR_ERROR_KEY] is None
        mock_streamlit['toast'].assert_called_once()

    def test_failed_commit_keeps_draft_and_records_error(self, view_state, abc_store):
        SchemaEditor._open_editor(None)
        view_state[EDITOR_NAME_KEY] = "B"

        SchemaEditor._commit_editor()

        assert view_state[EDITOR_ERROR_KEY] == "⚠️ Field name must be unique."
        assert view_state['field_editor'].is_open
        assert view_state['field_editor'].draft.name == "B"
        assert len(abc_store) == 3

    def test_cancel_clears_error_and_draft(self, view_state):
        SchemaEditor._open_editor(None)
        view_state[EDITOR_ERROR_KEY] = "⚠️ Field name cannot be empty."

        SchemaEditor._cancel_editor()

        assert not view_state['field_editor'].is_open
        assert view_state[EDITOR_ERROR_KEY] is None


class TestTogglePrimaryKey:
    """Test cases for the list's primary key checkbox callback."""

    def test_checking_moves_primary_key(self, view_state, abc_store):
        a, b, _ = abc_store.fields
        abc_store.set_primary_key(a.id, True)
        view_state[f"pk_{b.id}"] = True

        SchemaEditor._toggle_primary_key(b.id)

        assert abc_store.primary_key_field().id == b.id

    def test_unchecking_clears_only_that_field(self, view_state, abc_store):
        a = abc_store.fields[0]
        abc_store.set_primary_key(a.id, True)
        view_state[f"pk_{a.id}"] = False

        SchemaEditor._toggle_primary_key(a.id)

        assert abc_store.primary_key_field() is None

    def test_unknown_field_reports_error(self, view_state, mock_streamlit, abc_store):
        view_state["pk_missing"] = True

        SchemaEditor._toggle_primary_key("missing")

        mock_streamlit['error'].assert_called_once()
        assert abc_store.primary_key_field() is None


class TestDeleteConfirmation:
    """Test cases for the two-step delete prompt."""

    def _render(self, answer):
        with patch('filegen.schema_editor_view.UserFeedback.confirmation_dialog', return_value=answer) as dialog, \
             patch('streamlit.rerun') as mock_rerun:
            SchemaEditor._render_delete_confirmation()
        return dialog, mock_rerun

    def test_nothing_pending_shows_no_prompt(self, view_state):
        dialog, _ = self._render(None)
        dialog.assert_not_called()

    def test_confirm_deletes_field(self, view_state, abc_store):
        b = abc_store.fields[1]
        view_state['pending_delete'] = b.id

        _, mock_rerun = self._render(True)

        assert [f.name for f in abc_store.fields] == ["a", "c"]
        assert view_state['pending_delete'] is None
        mock_rerun.assert_called_once()

    def test_cancel_keeps_field(self, view_state, abc_store):
        view_state['pending_delete'] = abc_store.fields[1].id

        self._render(False)

        assert [f.name for f in abc_store.fields] == ["a", "b", "c"]
        assert view_state['pending_delete'] is None

    def test_unanswered_prompt_keeps_pending(self, view_state, abc_store):
        b = abc_store.fields[1]
        view_state['pending_delete'] = b.id

        _, mock_rerun = self._render(None)

        assert view_state['pending_delete'] == b.id
        assert len(abc_store) == 3
        mock_rerun.assert_not_called()

    def test_pending_field_already_gone_is_dropped(self, view_state):
        view_state['pending_delete'] = "missing"

        dialog, _ = self._render(None)

        dialog.assert_not_called()
        assert view_state['pending_delete'] is None


class TestEditorPage:
    """Full page runs of the schema editor."""

    def test_failed_commit_shows_error_and_keeps_form(self):
        at = run_app()
        at.button(key="add_property").click().run()
        at.text_input(key=EDITOR_NAME_KEY).input("   ")
        at.button(key="editor_commit").click().run()

        assert [e.value for e in at.error] == ["⚠️ Field name cannot be empty."]
        assert at.text_input(key=EDITOR_NAME_KEY).value == "   "
        assert len(at.session_state['schema_store']) == 0

        at.text_input(key=EDITOR_NAME_KEY).input("id")
        at.button(key="editor_commit").click().run()

        assert not at.error
        assert EDITOR_NAME_KEY not in keys_of(at.text_input)
        assert [f.name for f in at.session_state['schema_store'].fields] == ["id"]

    def test_primary_key_checkbox_is_exclusive(self, abc_store):
        a, b, c = abc_store.fields
        at = run_app(abc_store)

        at.checkbox(key=f"pk_{a.id}").check().run()
        at.checkbox(key=f"pk_{b.id}").check().run()

        assert at.checkbox(key=f"pk_{a.id}").value is False
        assert at.checkbox(key=f"pk_{b.id}").value is True
        assert abc_store.primary_key_field().id == b.id

        at.checkbox(key=f"pk_{b.id}").uncheck().run()

        assert abc_store.primary_key_field() is None
        assert not any(cb.value for cb in at.checkbox)

    def test_rename_keeps_primary_key_ticked_while_form_open(self):
        store = SchemaStore()
        a = store.add_field(SchemaField(name="a"))
        bb = store.add_field(SchemaField(name="bb"))
        store.set_primary_key(bb.id, True)
        at = run_app(store)

        at.button(key=f"edit_{a.id}").click().run()
        at.checkbox(key=f"pk_{a.id}").check().run()
        at.text_input(key=EDITOR_NAME_KEY).input("aa")
        at.button(key="editor_commit").click().run()

        assert [(f.name, f.primary_key) for f in store.fields] == [("aa", True), ("bb", False)]

    def test_delete_asks_before_removing(self, abc_store):
        b = abc_store.fields[1]
        at = run_app(abc_store)

        at.button(key=f"delete_{b.id}").click().run()
        assert "delete_field_yes" in keys_of(at.button)
        assert len(abc_store) == 3

        at.button(key="delete_field_no").click().run()
        assert "delete_field_yes" not in keys_of(at.button)
        assert len(abc_store) == 3

        at.button(key=f"delete_{b.id}").click().run()
        at.button(key="delete_field_yes").click().run()

        assert [f.name for f in abc_store.fields] == ["a", "c"]
        assert "delete_field_yes" not in keys_of(at.button)
