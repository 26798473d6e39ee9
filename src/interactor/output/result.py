"""CommandResult and CommandError: the envelope every CLI command emits.

INVARIANT: ``error`` is set exactly when ``ok`` is False.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CommandError(BaseModel):
    """Structured error payload within a CommandResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class CommandResult(BaseModel):
    """Return type for CLI command handlers.

    Attributes:
        ok: Whether the command succeeded.
        op: Name of the command (``"inspect"`` or ``"run"``).
        data: Command-specific payload on success.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: CommandError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> CommandResult:
        return cls(ok=False, op=op, error=CommandError(code=code, message=message, detail=detail))
