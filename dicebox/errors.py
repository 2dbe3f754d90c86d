"""Error taxonomy for dice evaluation.

ValidationError and ResourceLimitError are caller-correctable and carry
enough detail to fix the expression in one pass. RandomSourceError (see
dicebox.rng) is an internal failure and is never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dicebox.expression import FieldError


class DiceboxError(Exception):
    """Base class for every error raised by dicebox."""


class ValidationError(DiceboxError):
    """Raised when an expression (or a roll request) is malformed.

    Carries every collected FieldError, not just the first one.
    """

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    @classmethod
    def from_errors(cls, errors: list[FieldError]) -> ValidationError:
        return cls("; ".join(e.message for e in errors), errors)


class ResourceLimitError(DiceboxError):
    """Raised when a dice group exceeds the configured count or sides ceiling."""

    def __init__(self, field: str, maximum: int, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.maximum = maximum
        self.message = message
