"""Validation rules attached to attributes.

Rules are plain functions ``(value, config) -> message | None`` registered
in :data:`RULES`. Only ``presence`` and ``inclusion`` exist; an unknown
rule name is a declaration error.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from typing import Any

from interactor.errors import InvalidDeclarationError, UnsupportedDeclarationError

BLANK_MESSAGE = "can't be blank"
INCLUSION_MESSAGE = "is not included in the list"

PRESENCE_KEYS: frozenset[str] = frozenset({"message"})
INCLUSION_KEYS: frozenset[str] = frozenset({"in", "message", "allow_nil"})

RuleCheck = Callable[[Any, Any], str | None]


def is_blank(value: Any) -> bool:
    """Model-validation blankness: None, False, whitespace, empty collections.

    Examples:
        >>> is_blank("  ")
        True
        >>> is_blank(0)
        False
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Collection):
        return len(value) == 0
    return False


def _same(a: Any, b: Any) -> bool:
    # bool is an int subclass; keep True distinct from 1.
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return bool(a == b)


def check_presence(value: Any, config: Any) -> str | None:
    if config is False:
        return None
    message = config.get("message", BLANK_MESSAGE) if isinstance(config, Mapping) else BLANK_MESSAGE
    return message if is_blank(value) else None


def check_inclusion(value: Any, config: Any) -> str | None:
    choices, message, allow_nil = _inclusion_settings(config)
    if value is None and allow_nil:
        return None
    if any(_same(value, choice) for choice in choices):
        return None
    return message


def _check_keys(rule: str, config: Mapping[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(str(k) for k in set(config) - allowed)
    if unknown:
        raise UnsupportedDeclarationError(f"Unknown {rule} option(s): {', '.join(unknown)}")


def _choices(config: Any, collection: Any) -> tuple[Any, ...]:
    if isinstance(collection, Collection) and not isinstance(collection, str):
        return tuple(collection)
    raise InvalidDeclarationError(f"inclusion rule expects a collection, got {config!r}")


def _inclusion_settings(config: Any) -> tuple[tuple[Any, ...], str, bool]:
    if isinstance(config, Mapping):
        if "in" not in config:
            raise InvalidDeclarationError("inclusion rule needs an 'in' collection")
        _check_keys("inclusion", config, INCLUSION_KEYS)
        return (
            _choices(config, config["in"]),
            config.get("message", INCLUSION_MESSAGE),
            bool(config.get("allow_nil", False)),
        )
    return _choices(config, config), INCLUSION_MESSAGE, False


RULES: dict[str, RuleCheck] = {
    "presence": check_presence,
    "inclusion": check_inclusion,
}


def get_rule(name: str) -> RuleCheck:
    """Look up a rule check by name.

    Raises:
        UnsupportedDeclarationError: *name* is not a known rule.
    """
    try:
        return RULES[name]
    except KeyError:
        known = ", ".join(sorted(RULES))
        msg = f"Unknown validation rule {name!r} (known rules: {known})"
        raise UnsupportedDeclarationError(msg) from None


def normalize_config(name: str, config: Any) -> Any:
    """Validate a rule's configuration at declaration time and freeze it."""
    get_rule(name)
    if name == "presence":
        if isinstance(config, Mapping):
            _check_keys("presence", config, PRESENCE_KEYS)
        return config
    choices, message, allow_nil = _inclusion_settings(config)
    if isinstance(config, Mapping):
        return {"in": choices, "message": message, "allow_nil": allow_nil}
    return choices
