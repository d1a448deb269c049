"""
Pydantic models for schema fields and generation requests.
Defines the field type enumeration, output file types and the wire payload
sent to the generation service.
"""

from enum import Enum
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field
import logging

logger = logging.getLogger(__name__)

MIN_FILE_SIZE = 1
MAX_FILE_SIZE = 1000
DEFAULT_FILE_SIZE = 1


class FieldType(str, Enum):
    """Supported column types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"


class FileType(str, Enum):
    """Output file formats offered by the generation service."""
    JSON = "json"
    CSV = "csv"
    XML = "xml"


DEFAULT_CONTENT_TYPES = {
    FileType.JSON: "application/json",
    FileType.CSV: "text/csv",
    FileType.XML: "application/xml",
}


class SchemaField(BaseModel):
    """One column definition in the schema being edited."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    type: FieldType = FieldType.STRING
    primary_key: bool = Field(default=False, alias="primaryKey")

    @property
    def normalized_name(self) -> str:
        """Name used for uniqueness comparison."""
        return self.name.strip().lower()


class FieldSpec(BaseModel):
    """A field as transmitted to the generation service (no local id)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: FieldType
    primary_key: bool = Field(alias="primaryKey")


class GenerationRequest(BaseModel):
    """Payload for POST /api/generate."""

    model_config = ConfigDict(populate_by_name=True)

    file_type: FileType = Field(alias="fileType")
    file_size: int = Field(alias="fileSize", ge=MIN_FILE_SIZE, le=MAX_FILE_SIZE)
    properties: List[FieldSpec]

    @classmethod
    def from_fields(cls, fields, file_type: FileType, file_size: int) -> "GenerationRequest":
        """Build a request from schema fields, keeping their order and dropping ids."""
        properties = [
            FieldSpec(name=f.name, type=f.type, primary_key=f.primary_key)
            for f in fields
        ]
        return cls(file_type=file_type, file_size=file_size, properties=properties)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with the service's camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


def coerce_file_size(value: Any) -> int:
    """
    Turn user input into a valid file size.

    Non-numeric input falls back to DEFAULT_FILE_SIZE; numeric input is
    clamped to MIN_FILE_SIZE..MAX_FILE_SIZE.
    """
    try:
        size = int(value)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Non-numeric file size {value!r}, using default {DEFAULT_FILE_SIZE}")
        return DEFAULT_FILE_SIZE
    return max(MIN_FILE_SIZE, min(MAX_FILE_SIZE, size))


def coerce_file_type(value: Any) -> FileType:
    """Parse a file type, raising ValueError for anything outside the enumeration."""
    if isinstance(value, FileType):
        return value
    return FileType(str(value).strip().lower())
