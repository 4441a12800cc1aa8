"""Standardized error handling for placeholder usage errors.

Operation failures raised by a strategy are never wrapped here; they reach
the caller verbatim. These types only describe misuse of a Placeholder or
of the strategy registry.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable codes for placeholder errors."""
    INVALID_REVIVER = "INVALID_REVIVER"
    UNKNOWN_STRATEGY = "UNKNOWN_STRATEGY"
    INVALID_STRATEGY = "INVALID_STRATEGY"
    DUPLICATE_REFERENCE = "DUPLICATE_REFERENCE"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    RESULT_MISMATCH = "RESULT_MISMATCH"
    INVALID_POLICY = "INVALID_POLICY"
    UNKNOWN = "UNKNOWN"


# Errors raised while scanning containers, before anything is executed
_COLLECTION_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.DUPLICATE_REFERENCE,
    ErrorCode.CYCLE_DETECTED,
})


class PlaceholderError(BaseModel):
    """Structured description of a placeholder failure.
    
    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional extra context (offending key, strategy name, ...)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    details: str | None = Field(default=None, description="Optional detailed error info")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def during_collection(self) -> bool:
        """Whether this error was raised while collecting rather than executing."""
        return self.code in _COLLECTION_CODES

    def render(self) -> str:
        return f"[{self.code}] {self.message}" + (f" ({self.details})" if self.details else "")

    __str__ = render


class PlaceholderException(Exception):
    """Exception wrapping a PlaceholderError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: PlaceholderError) -> None:
        self.error = error
        super().__init__(error.render())

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, message: str, code: ErrorCode = ErrorCode.UNKNOWN, *, details: str | None = None) -> Self:
        """Create placeholder exception."""
        return cls(PlaceholderError(message=message, code=code, details=details))
