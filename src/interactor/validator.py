"""Validate an interaction's current attribute values.

For every declared attribute, in declaration order, the kind check runs
first and then each attached rule. Failures are aggregated rather than
short-circuited so callers see every invalid field at once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from interactor.domain.outcome import ValidationOutcome

if TYPE_CHECKING:
    from interactor.base import Interaction


def validate(interaction: Interaction) -> ValidationOutcome:
    """Compute a fresh :class:`ValidationOutcome` for *interaction*."""
    failures: list[tuple[str, str]] = []
    values = interaction.attributes
    for declaration in type(interaction).declarations():
        value = values.get(declaration.name)
        problem = declaration.filter.check(value, allow_nil=declaration.allow_nil)
        if problem is not None:
            failures.append((declaration.name, problem))
        for validation in declaration.validations:
            message = validation.check(value)
            if message is not None:
                failures.append((declaration.name, message))
    return ValidationOutcome.from_pairs(failures)
