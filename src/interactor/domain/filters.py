"""Attribute kinds ("filters") and their type checks.

Each kind is looked up in the static :data:`FILTERS` table; a kind that is
not in the table is a declaration error, never a silent fallback.
Type checks are delegated to pydantic in strict mode so that, for
example, ``0`` and ``"true"`` are not accepted as booleans.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import StrictBool, TypeAdapter, ValidationError

from interactor.errors import UnsupportedDeclarationError

REQUIRED_MESSAGE = "is required"

# Options every kind understands; anything else must be a validation rule.
FILTER_OPTIONS: frozenset[str] = frozenset({"default", "allow_nil"})


class Filter:
    """Base kind: decides whether a raw value has the right shape.

    Subclasses set ``kind`` and either ``adapter`` (a pydantic
    ``TypeAdapter``) or override :meth:`check_value`.
    """

    kind: ClassVar[str]
    allow_nil_by_default: ClassVar[bool] = False
    adapter: ClassVar[TypeAdapter[Any] | None] = None
    invalid_message: ClassVar[str] = "is invalid"

    def check(self, value: Any, *, allow_nil: bool) -> str | None:
        """Return an error message for *value*, or None if it is acceptable."""
        if value is None:
            return None if allow_nil else REQUIRED_MESSAGE
        return self.check_value(value)

    def check_value(self, value: Any) -> str | None:
        if self.adapter is None:
            return None
        try:
            self.adapter.validate_python(value)
        except ValidationError:
            return self.invalid_message
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind!r}>"


class AnyFilter(Filter):
    """Untyped attribute: any value, including None."""

    kind = "any"
    allow_nil_by_default = True


class BooleanFilter(Filter):
    """``True`` or ``False``; nothing is coerced."""

    kind = "boolean"
    adapter = TypeAdapter(StrictBool)
    invalid_message = "is not a valid boolean"


FILTERS: dict[str, Filter] = {f.kind: f for f in (AnyFilter(), BooleanFilter())}


def get_filter(kind: str) -> Filter:
    """Look up the filter for *kind*.

    Raises:
        UnsupportedDeclarationError: *kind* is not a known kind.
    """
    try:
        return FILTERS[kind]
    except (KeyError, TypeError):
        known = ", ".join(sorted(FILTERS))
        msg = f"Unknown attribute kind {kind!r} (known kinds: {known})"
        raise UnsupportedDeclarationError(msg) from None
