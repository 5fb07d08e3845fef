"""Shared utilities for the backend."""
from utils.errors import (
    GENERIC_ERROR_MESSAGE,
    error_response,
    format_validation_errors,
    log_error,
    sanitize_error_message,
)

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "error_response",
    "format_validation_errors",
    "log_error",
    "sanitize_error_message",
]
