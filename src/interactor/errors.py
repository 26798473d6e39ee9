"""Exception hierarchy for interactor.

Two families:
- UsageError: programmer mistakes (bad declarations, reserved or unknown
  options). Always raised immediately, never recoverable at runtime.
- InteractionInvalid: data-driven validation failure, raised only by
  ``run_or_raise``. ``run`` reports the same failure through the
  returned instance instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from interactor.domain.outcome import FieldError, ValidationOutcome


class InteractorError(Exception):
    """Base class for every error raised by interactor."""


class UsageError(InteractorError):
    """The library was used incorrectly."""


class UnsupportedDeclarationError(UsageError, AttributeError):
    """A declaration named a kind, rule, or option that does not exist."""


class InvalidDeclarationError(UsageError, ValueError):
    """A declaration is well-formed but not allowed (reserved name, bad default)."""


class InvalidConstructionInput(UsageError, TypeError):
    """An interaction was built with a reserved, unknown, or non-string option key."""


class ConfigError(InteractorError):
    """The configuration file could not be read."""


class InteractionInvalid(InteractorError):
    """Validation failed inside ``run_or_raise``.

    Attributes:
        outcome: The failing :class:`ValidationOutcome`.
        interaction: The rejected instance, for callers that want its inputs.
    """

    def __init__(self, outcome: ValidationOutcome, interaction: Any = None) -> None:
        self.outcome = outcome
        self.interaction = interaction
        details = "; ".join(outcome.full_messages()) or "validation failed"
        name = type(interaction).__name__ if interaction is not None else "Interaction"
        super().__init__(f"{name} is invalid: {details}")

    @property
    def errors(self) -> tuple[FieldError, ...]:
        return self.outcome.errors
