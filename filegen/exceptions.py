"""
Custom exception classes for the file generator.

This module provides the error taxonomy shared by the schema store, the
field editor session and the generation client. Every error carries a
message, optional context and a list of suggested recovery actions so the
UI layer can present them consistently.
"""

import logging
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class FileGenError(Exception):
    """
    Base exception for file generator errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class ValidationError(FileGenError):
    """
    Raised when a field name is empty or collides with an existing field.

    The operation is aborted before any state is mutated.
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        context = {'field_name': field_name}
        recovery_suggestions = [
            "Enter a non-empty field name",
            "Field names must be unique (case-insensitive)"
        ]
        super().__init__(message, context, recovery_suggestions)


class NotFoundError(FileGenError):
    """Raised when an operation references a field id that is not in the schema."""

    def __init__(self, field_id: str, message: Optional[str] = None):
        self.field_id = field_id
        if message is None:
            message = f"No field with id '{field_id}'"
        super().__init__(message, {'field_id': field_id})


class EmptySchemaError(FileGenError):
    """Raised at generation time when the schema has no fields."""

    def __init__(self, message: str = "Please add at least one property."):
        super().__init__(message, recovery_suggestions=["Add at least one field before generating"])


class NoPrimaryKeyError(FileGenError):
    """Raised at generation time when no field is marked as primary key."""

    def __init__(self, message: str = "Please mark one property as the Primary Key."):
        super().__init__(message, recovery_suggestions=["Mark one field as the primary key"])


class GenerationFailedError(FileGenError):
    """
    Raised when the generation service call fails.

    This covers transport errors, non-success HTTP statuses and response
    bodies that cannot be interpreted as a file.
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        self.status_code = status_code
        self.original_error = original_error

        context: Dict[str, Any] = {'status_code': status_code}
        if original_error is not None:
            context['original_error_type'] = type(original_error).__name__
            context['original_error_message'] = str(original_error)

        recovery_suggestions = [
            "Check that the generation service is running",
            "Verify generation_service.base_url in config.yaml",
            "Try generating again"
        ]
        super().__init__(message, context, recovery_suggestions)


class GenerationInProgressError(FileGenError):
    """Raised when generate is called while another generation is in flight."""

    def __init__(self, message: str = "A file is already being generated."):
        super().__init__(message, recovery_suggestions=["Wait for the current generation to finish"])


class InvalidHandleError(FileGenError):
    """Raised when a released artifact handle is used again."""

    def __init__(self, message: str = "This file has already been downloaded or replaced."):
        super().__init__(message, recovery_suggestions=["Generate the file again"])


class EditorClosedError(FileGenError):
    """Raised when a field editor operation is attempted with no open draft."""

    def __init__(self, message: str = "The field editor is not open."):
        super().__init__(message)
