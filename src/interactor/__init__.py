"""interactor: business logic behind declared, validated inputs."""

from interactor.base import Interaction, attribute, boolean
from interactor.domain.outcome import FieldError, ValidationOutcome
from interactor.errors import (
    ConfigError,
    InteractionInvalid,
    InteractorError,
    InvalidConstructionInput,
    InvalidDeclarationError,
    UnsupportedDeclarationError,
    UsageError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "FieldError",
    "Interaction",
    "InteractionInvalid",
    "InteractorError",
    "InvalidConstructionInput",
    "InvalidDeclarationError",
    "UnsupportedDeclarationError",
    "UsageError",
    "ValidationOutcome",
    "__version__",
    "attribute",
    "boolean",
]
