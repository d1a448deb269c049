"""
Unit tests for the field and request models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from filegen.field_model import (
    SchemaField,
    FieldType,
    FileType,
    GenerationRequest,
    coerce_file_size,
    coerce_file_type,
)


class TestCoerceFileSize:
    """Test cases for coerce_file_size."""

    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        (500, 500),
        (1000, 1000),
        (1001, 1000),
        (999999, 1000),
        (0, 1),
        (-5, 1),
        ("42", 42),
        (7.9, 7),
    ])
    def test_numeric_values_are_clamped(self, value, expected):
        assert coerce_file_size(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", None, float("nan"), float("inf")])
    def test_non_numeric_values_use_default(self, value):
        assert coerce_file_size(value) == 1


class TestCoerceFileType:
    """Test cases for coerce_file_type."""

    def test_accepts_enum_and_strings(self):
        assert coerce_file_type(FileType.CSV) is FileType.CSV
        assert coerce_file_type(" XML ") is FileType.XML

    def test_rejects_unknown(self):
        with pytest.raises(ValueError):
            coerce_file_type("yaml")


class TestSchemaField:
    """Test cases for SchemaField."""

    def test_accepts_camel_case_alias(self):
        field = SchemaField(id="1", name="id", type="number", primaryKey=True)
        assert field.primary_key is True
        assert field.type is FieldType.NUMBER

    def test_rejects_unknown_type(self):
        with pytest.raises(PydanticValidationError):
            SchemaField(name="x", type="array")

    def test_normalized_name(self):
        assert SchemaField(name="  Email ").normalized_name == "email"


class TestGenerationRequest:
    """Test cases for the request payload."""

    def test_payload_keeps_order_and_strips_ids(self):
        fields = [
            SchemaField(id="1", name="id", type=FieldType.NUMBER, primary_key=True),
            SchemaField(id="2", name="email", type=FieldType.EMAIL),
        ]

        payload = GenerationRequest.from_fields(fields, FileType.CSV, 10).to_payload()

        assert payload == {
            "fileType": "csv",
            "fileSize": 10,
            "properties": [
                {"name": "id", "type": "number", "primaryKey": True},
                {"name": "email", "type": "email", "primaryKey": False},
            ],
        }

    def test_file_size_out_of_range_rejected(self):
        with pytest.raises(PydanticValidationError):
            GenerationRequest.from_fields([], FileType.JSON, 1001)
