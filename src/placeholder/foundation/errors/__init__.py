"""Error types for placeholder misuse."""

from .errors import ErrorCode, PlaceholderError, PlaceholderException

__all__ = [
    "ErrorCode",
    "PlaceholderError",
    "PlaceholderException",
]
