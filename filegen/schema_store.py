"""
Schema store for the file generator.
Owns the ordered field list and enforces the unique-name and single
primary key rules for every add, update, delete, toggle and reorder.
"""

import uuid
import logging
from typing import Iterator, List, Optional, Tuple, Union

from .exceptions import (
    ValidationError,
    NotFoundError,
    EmptySchemaError,
    NoPrimaryKeyError,
)
from .field_model import SchemaField, FieldType
from .reorder import reorder_fields, is_valid_move

logger = logging.getLogger(__name__)

EMPTY_NAME_MESSAGE = "Field name cannot be empty."
DUPLICATE_NAME_MESSAGE = "Field name must be unique."


def _new_field_id() -> str:
    return str(uuid.uuid4())


def _coerce_type(value: Union[str, FieldType], field_name: str) -> FieldType:
    try:
        return FieldType(value)
    except ValueError:
        raise ValidationError(f"Unsupported field type '{value}'", field_name=field_name)


class SchemaStore:
    """Single authority over the ordered list of schema fields."""

    def __init__(self):
        self._fields: List[SchemaField] = []

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self.fields)

    @property
    def fields(self) -> Tuple[SchemaField, ...]:
        """Ordered snapshot of the stored fields."""
        return tuple(f.model_copy() for f in self._fields)

    def get(self, field_id: str) -> SchemaField:
        """Return a copy of the field with the given id."""
        return self._find(field_id).model_copy()

    def find_by_name(self, name: str) -> Optional[SchemaField]:
        """Find a field by case-insensitive, whitespace-insensitive name."""
        key = name.strip().lower()
        for field in self._fields:
            if field.normalized_name == key:
                return field.model_copy()
        return None

    def primary_key_field(self) -> Optional[SchemaField]:
        """Return the primary key field, if one is marked."""
        for field in self._fields:
            if field.primary_key:
                return field.model_copy()
        return None

    def name_conflicts(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """
        Check whether a name collides with another stored field.

        Args:
            name: Candidate name (trimmed and lowercased before comparison)
            exclude_id: Id of the field being edited, which never conflicts with itself

        Returns:
            True if another field already uses the name
        """
        key = name.strip().lower()
        return any(
            f.normalized_name == key and f.id != exclude_id
            for f in self._fields
        )

    def check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        """Validate a candidate name and return it trimmed."""
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError(EMPTY_NAME_MESSAGE, field_name=name)
        if self.name_conflicts(trimmed, exclude_id):
            raise ValidationError(DUPLICATE_NAME_MESSAGE, field_name=trimmed)
        return trimmed

    def add_field(self, candidate: SchemaField) -> SchemaField:
        """
        Append a new field with a freshly minted id.

        Args:
            candidate: Field values; any id on the candidate is ignored

        Returns:
            Copy of the stored field

        Raises:
            ValidationError: If the name is empty or already used
        """
        name = self.check_name(candidate.name)
        field_type = _coerce_type(candidate.type, name)

        field = SchemaField(
            id=_new_field_id(),
            name=name,
            type=field_type,
            primary_key=False,
        )
        self._fields.append(field)
        if candidate.primary_key:
            self._apply_primary_key(field.id)

        logger.info(f"Added field '{field.name}' ({field.type.value}) id={field.id}")
        return field.model_copy()

    def update_field(self, field_id: str, name: Optional[str] = None,
                     type: Optional[Union[str, FieldType]] = None,
                     primary_key: Optional[bool] = None) -> SchemaField:
        """
        Update a field in place, keeping its id and position.

        A primary_key of True clears the flag on every other field.

        Raises:
            NotFoundError: If no field has the id
            ValidationError: If the new name is empty or used by another field
        """
        field = self._find(field_id)

        new_name = field.name if name is None else self.check_name(name, exclude_id=field_id)
        new_type = field.type if type is None else _coerce_type(type, new_name)

        field.name = new_name
        field.type = new_type
        if primary_key is True:
            self._apply_primary_key(field_id)
        elif primary_key is False:
            field.primary_key = False

        logger.info(f"Updated field id={field_id}: name='{field.name}' type={field.type.value} pk={field.primary_key}")
        return field.model_copy()

    def delete_field(self, field_id: str) -> bool:
        """
        Remove a field. Unknown ids are ignored.

        Returns:
            True if a field was removed
        """
        for index, field in enumerate(self._fields):
            if field.id == field_id:
                del self._fields[index]
                logger.info(f"Deleted field '{field.name}' id={field_id}")
                return True
        logger.debug(f"delete_field: id={field_id} not present, nothing to delete")
        return False

    def set_primary_key(self, field_id: str, value: bool) -> SchemaField:
        """
        Set or clear the primary key flag of one field.

        Enabling clears every other field's flag in the same update.
        Disabling only clears this field.
        """
        field = self._find(field_id)
        if value:
            self._apply_primary_key(field_id)
        else:
            field.primary_key = False
        logger.debug(f"set_primary_key id={field_id} value={value}")
        return field.model_copy()

    def reorder(self, source_index: Optional[int], destination_index: Optional[int]) -> bool:
        """
        Move a field from source_index to destination_index.

        Returns:
            True if the order changed; invalid or identical indices are a no-op
        """
        if not is_valid_move(len(self._fields), source_index, destination_index):
            logger.debug(f"reorder ignored: source={source_index} destination={destination_index} size={len(self._fields)}")
            return False
        self._fields = reorder_fields(self._fields, source_index, destination_index)
        logger.debug(f"reorder: moved index {source_index} -> {destination_index}")
        return True

    def validate_for_generation(self) -> None:
        """
        Check that the schema can be sent to the generation service.

        Raises:
            EmptySchemaError: If there are no fields
            NoPrimaryKeyError: If no field is marked as primary key
        """
        if not self._fields:
            raise EmptySchemaError()
        if not any(f.primary_key for f in self._fields):
            raise NoPrimaryKeyError()

    def _find(self, field_id: str) -> SchemaField:
        for field in self._fields:
            if field.id == field_id:
                return field
        raise NotFoundError(field_id)

    def _apply_primary_key(self, field_id: str) -> None:
        for field in self._fields:
            field.primary_key = field.id == field_id
