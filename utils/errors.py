"""
User-safe error messages and context-tagged error logging.

Raw exception detail is only exposed when running in development.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi.responses import JSONResponse

from config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
VALIDATION_FAILED_MESSAGE = "Validation failed. Please check your input."

# Checked in order; first matching substring wins
_KNOWN_ERRORS: list[tuple[tuple[str, ...], str]] = [
    (("network", "connect"), "Network connection error. Please check your internet connection and try again."),
    (("timeout", "timed out"), "The request timed out. Please try again later."),
    (("permission", "access"), "You don't have permission to perform this action."),
    (("not found", "404"), "The requested resource was not found."),
    (("validation", "invalid"), "Please check your input and try again."),
]


def _raw_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, str):
        return error
    try:
        return json.dumps(error, default=str)
    except (TypeError, ValueError):
        return repr(error)


def sanitize_error_message(error: Any, development: Optional[bool] = None) -> str:
    if development is None:
        development = settings.is_development
    if development:
        return _raw_message(error) or GENERIC_ERROR_MESSAGE

    if isinstance(error, BaseException):
        message = str(error).lower()
        for needles, phrase in _KNOWN_ERRORS:
            if any(n in message for n in needles):
                return phrase
    return GENERIC_ERROR_MESSAGE


def log_error(error: Any, context: Optional[str] = None) -> None:
    prefix = f"[{context}] " if context else ""
    exc_info = error if isinstance(error, BaseException) and settings.is_development else None
    logger.error("%sError: %s", prefix, _raw_message(error), exc_info=exc_info)


def format_validation_errors(errors: dict[str, list[str]]) -> dict[str, Any]:
    out: dict[str, Any] = {"error": VALIDATION_FAILED_MESSAGE}
    if settings.is_development:
        out["details"] = errors
    return out


def error_response(error: Any, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": sanitize_error_message(error)})
