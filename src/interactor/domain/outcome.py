"""FieldError and ValidationOutcome: the result of validating an interaction.

INVARIANT: ``valid`` is derived from ``errors``; an outcome can never be
valid while carrying errors.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, computed_field


class FieldError(BaseModel):
    """One validation failure on one attribute."""

    model_config = {"frozen": True}

    field: str
    message: str

    def full_message(self) -> str:
        return f"{self.field} {self.message}"


class ValidationOutcome(BaseModel):
    """Validity flag plus the ordered list of failures.

    Attributes:
        errors: Every failure, in declaration order then rule order.
        valid: True exactly when ``errors`` is empty.
    """

    model_config = {"frozen": True}

    errors: tuple[FieldError, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.errors

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> ValidationOutcome:
        """Build an outcome from ``(field, message)`` pairs."""
        return cls(errors=tuple(FieldError(field=f, message=m) for f, m in pairs))

    def messages_for(self, field: str) -> list[str]:
        """Messages recorded against *field*, in order."""
        return [e.message for e in self.errors if e.field == field]

    def full_messages(self) -> list[str]:
        """Messages prefixed with their field name, e.g. ``"b is required"``."""
        return [e.full_message() for e in self.errors]

    def as_dict(self) -> dict[str, list[str]]:
        """Group messages by field, preserving first-seen field order."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped
