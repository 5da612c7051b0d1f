"""Utility functions and helpers."""

from .exceptions import (
    format_validation_errors,
    raise_bad_request,
    raise_internal_error,
    raise_not_found,
    raise_too_many_requests,
    raise_unauthorized,
)

__all__ = [
    "format_validation_errors",
    "raise_bad_request",
    "raise_internal_error",
    "raise_not_found",
    "raise_too_many_requests",
    "raise_unauthorized",
]
