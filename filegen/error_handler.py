"""
Error handling utilities for the file generator.
Turns core exceptions into user-friendly messages, logs them, and wraps UI
callbacks so a failure is reported instead of crashing the page.
"""

import streamlit as st
import logging
from typing import Any, Callable, List, Optional

import requests

from .exceptions import (
    FileGenError,
    ValidationError,
    NotFoundError,
    EmptySchemaError,
    NoPrimaryKeyError,
    GenerationFailedError,
    GenerationInProgressError,
    InvalidHandleError,
    EditorClosedError,
)

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    VALIDATION = "validation"
    SCHEMA = "schema"
    GENERATION = "generation"
    NETWORK = "network"
    INTEGRITY = "integrity"
    FILE_SYSTEM = "file_system"
    SYSTEM = "system"


# Errors the user can fix themselves; logged without a stack trace
USER_CORRECTABLE = (ValidationError, EmptySchemaError, NoPrimaryKeyError, GenerationInProgressError)


def classify_error(error: Exception) -> str:
    """Map an exception to an ErrorType constant."""
    if isinstance(error, ValidationError):
        return ErrorType.VALIDATION
    if isinstance(error, (EmptySchemaError, NoPrimaryKeyError)):
        return ErrorType.SCHEMA
    if isinstance(error, (GenerationFailedError, GenerationInProgressError)):
        return ErrorType.GENERATION
    if isinstance(error, (NotFoundError, InvalidHandleError, EditorClosedError)):
        return ErrorType.INTEGRITY
    if isinstance(error, requests.RequestException):
        return ErrorType.NETWORK
    if isinstance(error, OSError):
        return ErrorType.FILE_SYSTEM
    return ErrorType.SYSTEM


class ErrorHandler:
    """Error reporting for the file generator UI."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: Optional[str] = None,
        user_message: Optional[str] = None,
    ) -> str:
        """
        Log an error and show it to the user.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants); derived if omitted
            user_message: Custom user-friendly message

        Returns:
            The message shown to the user
        """
        if error_type is None:
            error_type = classify_error(error)

        if isinstance(error, USER_CORRECTABLE):
            logger.warning(f"{context}: {error}")
        else:
            logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, ErrorHandler._get_suggestions(error))
        return user_message

    @staticmethod
    def message_for(error: Exception) -> str:
        """User-friendly message for an error, without logging or displaying it."""
        return ErrorHandler._get_user_friendly_message(error, classify_error(error))

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        if isinstance(error, ValidationError):
            if str(error) == "empty name":
                return "⚠️ Field name cannot be empty."
            if str(error) == "duplicate name":
                return "⚠️ Field name must be unique."
            return f"⚠️ {error}"

        if isinstance(error, FileGenError) and error_type == ErrorType.SCHEMA:
            return f"📋 {error}"

        error_messages = {
            ErrorType.GENERATION: "🌐 Error generating file. Please check the generation service and try again.",
            ErrorType.NETWORK: "🌐 Network error occurred. Please check your connection and try again.",
            ErrorType.INTEGRITY: "🔧 That item is no longer available. Please refresh and try again.",
            ErrorType.FILE_SYSTEM: "📁 The file could not be saved. Please check the downloads directory.",
            ErrorType.SYSTEM: "💻 System error occurred. Please try again.",
        }
        if isinstance(error, GenerationInProgressError):
            return "⏳ A file is already being generated. Please wait."
        if isinstance(error, InvalidHandleError):
            return "🔧 This file has already been downloaded. Generate it again to download another copy."
        return error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

    @staticmethod
    def _get_suggestions(error: Exception) -> List[str]:
        if isinstance(error, FileGenError):
            return list(error.recovery_suggestions)
        return []

    @staticmethod
    def _display_error(user_message: str, suggestions: List[str]) -> None:
        """Display error message to user with recovery suggestions."""
        st.error(user_message)
        if suggestions:
            st.caption(" • ".join(suggestions))

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: Optional[str] = None,
        user_message: Optional[str] = None,
        default_return: Any = None
    ) -> Any:
        """
        Run an operation and report any failure.

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(e, context, error_type, user_message)
            return default_return

