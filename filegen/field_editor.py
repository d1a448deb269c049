"""
Field editor session.
Holds the draft behind the add/edit form so edits can be discarded without
touching the schema store.
"""

import logging
from typing import Optional, Union

from .exceptions import ValidationError, EditorClosedError
from .field_model import SchemaField, FieldType
from .schema_store import SchemaStore

logger = logging.getLogger(__name__)


class FieldEditorSession:
    """
    Draft state machine for adding or editing one field.

    States are Closed (no draft) and Open (draft present). A failed commit
    leaves the session open with the draft retained so the user can correct it.
    """

    def __init__(self, store: SchemaStore):
        self._store = store
        self._draft: Optional[SchemaField] = None
        self._opened_primary_key = False

    @property
    def is_open(self) -> bool:
        return self._draft is not None

    @property
    def is_editing(self) -> bool:
        """True when the draft belongs to an existing field."""
        return self._draft is not None and bool(self._draft.id)

    @property
    def draft(self) -> Optional[SchemaField]:
        """Copy of the current draft, or None when closed."""
        return self._draft.model_copy() if self._draft is not None else None

    def open(self, existing: Optional[SchemaField] = None) -> SchemaField:
        """Start a draft, either blank or copied from an existing field."""
        if existing is not None:
            self._draft = existing.model_copy()
            logger.debug(f"Editor opened for field id={existing.id}")
        else:
            self._draft = SchemaField(id="", name="", type=FieldType.STRING, primary_key=False)
            logger.debug("Editor opened for a new field")
        self._opened_primary_key = self._draft.primary_key
        return self._draft.model_copy()

    def set_draft_field(self, name: Optional[str] = None,
                        type: Optional[Union[str, FieldType]] = None,
                        primary_key: Optional[bool] = None) -> SchemaField:
        """Change draft values without validating them."""
        draft = self._require_draft()
        if name is not None:
            draft.name = name
        if type is not None:
            draft.type = FieldType(type)
        if primary_key is not None:
            draft.primary_key = primary_key
        return draft.model_copy()

    def commit(self) -> SchemaField:
        """
        Validate the draft and write it to the store.

        Returns:
            The stored field

        Raises:
            ValidationError: empty name or duplicate name; the session stays open
            EditorClosedError: if no draft is open
        """
        draft = self._require_draft()
        trimmed = draft.name.strip()
        if not trimmed:
            raise ValidationError("empty name", field_name=draft.name)

        exclude_id = draft.id or None
        if self._store.name_conflicts(trimmed, exclude_id=exclude_id):
            raise ValidationError("duplicate name", field_name=trimmed)

        if draft.id:
            stored = self._store.update_field(
                draft.id,
                name=trimmed,
                type=draft.type,
                primary_key=self._changed_primary_key(draft),
            )
        else:
            stored = self._store.add_field(
                SchemaField(name=trimmed, type=draft.type, primary_key=draft.primary_key)
            )

        self._draft = None
        logger.info(f"Editor committed field '{stored.name}' id={stored.id}")
        return stored

    def cancel(self) -> None:
        """Discard the draft and close the session."""
        if self._draft is not None:
            logger.debug("Editor draft discarded")
        self._draft = None

    def _changed_primary_key(self, draft: SchemaField) -> Optional[bool]:
        # The list checkboxes can change the stored flag while the form is open
        if draft.primary_key == self._opened_primary_key:
            return None
        return draft.primary_key

    def _require_draft(self) -> SchemaField:
        if self._draft is None:
            raise EditorClosedError()
        return self._draft
