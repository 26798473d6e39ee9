"""AttributeDeclaration and AttributeRegistry: what an interaction accepts.

Declarations are created at class-definition time and never mutated; a
registry replaces a declaration wholesale when rules are added later.
Each interaction class owns its own registry, built by merging copies of
its bases' registries, so declaring on a subclass never leaks upward.
"""

from __future__ import annotations

import copy
import keyword
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel

from interactor.domain.filters import FILTER_OPTIONS, Filter, get_filter
from interactor.domain.rules import get_rule, normalize_config
from interactor.errors import InvalidDeclarationError

logger = logging.getLogger(__name__)


class Validation(BaseModel):
    """One rule attached to an attribute, e.g. ``inclusion`` in ``[True]``."""

    model_config = {"frozen": True}

    rule: str
    config: Any = None

    def check(self, value: Any) -> str | None:
        return get_rule(self.rule)(value, self.config)


def build_validations(rules: Mapping[str, Any]) -> tuple[Validation, ...]:
    """Turn ``{rule_name: config}`` into validated, frozen :class:`Validation` objects."""
    return tuple(
        Validation(rule=name, config=normalize_config(name, config))
        for name, config in rules.items()
    )


class AttributeDeclaration(BaseModel):
    """A declared input attribute.

    Attributes:
        name: Accessor name on the interaction instance.
        kind: Key into the filter table (``"boolean"``, ``"any"``).
        allow_nil: Whether the kind check accepts None.
        default: Starting value when the option is omitted.
        has_default: Distinguishes ``default=None`` from no default.
        validations: Rules run after the kind check, in order.
    """

    model_config = {"frozen": True}

    name: str
    kind: str
    allow_nil: bool = False
    default: Any = None
    has_default: bool = False
    validations: tuple[Validation, ...] = ()

    @classmethod
    def build(cls, kind: str, name: str, options: Mapping[str, Any]) -> AttributeDeclaration:
        """Create a declaration from raw declaration options.

        ``default`` and ``allow_nil`` configure the kind; every other key
        must name a validation rule.
        """
        flt = get_filter(kind)
        has_default = "default" in options
        default = options.get("default")
        allow_nil = options.get("allow_nil")
        if allow_nil is None:
            # An explicit ``default=None`` makes the attribute optional.
            allow_nil = flt.allow_nil_by_default or (has_default and default is None)

        rules = {k: v for k, v in options.items() if k not in FILTER_OPTIONS}
        declaration = cls(
            name=name,
            kind=kind,
            allow_nil=bool(allow_nil),
            default=default,
            has_default=has_default,
            validations=build_validations(rules),
        )
        if has_default:
            problem = flt.check(default, allow_nil=declaration.allow_nil)
            if problem is not None:
                msg = f"Default for {name!r} {problem}: {default!r}"
                raise InvalidDeclarationError(msg)
        return declaration

    @property
    def filter(self) -> Filter:
        return get_filter(self.kind)

    def initial_value(self) -> Any:
        """Value an instance starts with; defaults are copied per instance."""
        return copy.deepcopy(self.default) if self.has_default else None

    def with_rules(self, rules: Mapping[str, Any]) -> AttributeDeclaration:
        """Return a copy with *rules* appended after the existing validations."""
        return self.model_copy(update={"validations": self.validations + build_validations(rules)})

    def describe(self) -> dict[str, Any]:
        """JSON-friendly summary for inspection output."""
        info: dict[str, Any] = {"name": self.name, "kind": self.kind, "allow_nil": self.allow_nil}
        if self.has_default:
            info["default"] = self.default
        info["validations"] = [
            {"rule": v.rule, "config": list(v.config) if isinstance(v.config, tuple) else v.config}
            for v in self.validations
        ]
        return info


class AttributeRegistry:
    """Ordered collection of declarations for one interaction class.

    Usage::

        registry = AttributeRegistry(reserved={"result"})
        registry.declare("boolean", ["flag"], {"presence": True})
        "flag" in registry  # True
    """

    def __init__(
        self,
        declarations: Iterable[AttributeDeclaration] = (),
        *,
        reserved: Iterable[str] = (),
    ) -> None:
        self._declarations: dict[str, AttributeDeclaration] = {d.name: d for d in declarations}
        self.reserved: frozenset[str] = frozenset(reserved)

    @classmethod
    def merge(cls, *registries: AttributeRegistry) -> AttributeRegistry:
        """Combine registries; later registries override earlier ones by name."""
        merged = cls()
        reserved: set[str] = set()
        for registry in registries:
            merged._declarations.update(registry._declarations)
            reserved |= registry.reserved
        merged.reserved = frozenset(reserved)
        return merged

    def derive(self) -> AttributeRegistry:
        """A copy for a subclass to extend."""
        return AttributeRegistry.merge(self)

    def declare(
        self,
        kind: str,
        names: Iterable[str],
        options: Mapping[str, Any] | None = None,
    ) -> list[AttributeDeclaration]:
        """Register one declaration per name under *kind*.

        Raises:
            UnsupportedDeclarationError: Unknown kind or rule.
            InvalidDeclarationError: Reserved or malformed name, no names,
                or a default the kind rejects.
        """
        get_filter(kind)
        names = list(names)
        if not names:
            raise InvalidDeclarationError(f"Declaring a {kind!r} attribute requires a name")
        for name in names:
            self._check_name(name)

        declarations = [AttributeDeclaration.build(kind, name, options or {}) for name in names]
        for declaration in declarations:
            self._declarations[declaration.name] = declaration
            logger.debug("Declared %s attribute %r", kind, declaration.name)
        return declarations

    def add_rules(self, names: Iterable[str], rules: Mapping[str, Any]) -> None:
        """Attach extra validation rules to already-declared attributes."""
        names = list(names)
        for name in names:
            if name not in self._declarations:
                raise InvalidDeclarationError(f"Cannot validate undeclared attribute {name!r}")
        for name in names:
            self._declarations[name] = self._declarations[name].with_rules(rules)

    def _check_name(self, name: Any) -> None:
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise InvalidDeclarationError(f"Attribute name must be an identifier, got {name!r}")
        if name.startswith("_") or name in self.reserved:
            raise InvalidDeclarationError(f"Attribute name {name!r} is reserved")

    def get(self, name: str) -> AttributeDeclaration | None:
        return self._declarations.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._declarations)

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __iter__(self) -> Iterator[AttributeDeclaration]:
        return iter(list(self._declarations.values()))

    def __len__(self) -> int:
        return len(self._declarations)

    def __repr__(self) -> str:
        return f"AttributeRegistry({self.names!r})"
