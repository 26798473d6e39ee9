"""Interaction: validated inputs wrapped around a single ``execute()`` call.

Subclasses declare their inputs, implement ``execute()``, and are invoked
through one of two entry points:

- :meth:`Interaction.run` builds and validates an instance, executes it
  only when valid, and always returns the instance.
- :meth:`Interaction.run_or_raise` runs the same pipeline but returns the
  bare result, raising :class:`InteractionInvalid` when validation fails.

Usage::

    class Publish(Interaction):
        confirmed = boolean(inclusion=[True])
        notify = boolean(default=False)

        def execute(self) -> str:
            return "published"

    Publish.run(confirmed=True).result      # "published"
    Publish.run(confirmed=False).is_valid() # False
    Publish.run_or_raise(confirmed=False)   # raises InteractionInvalid
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Self

import structlog

from interactor.config.settings import get_settings
from interactor.domain.declarations import AttributeDeclaration, AttributeRegistry
from interactor.domain.outcome import FieldError, ValidationOutcome
from interactor.errors import InteractionInvalid, InvalidConstructionInput, InvalidDeclarationError
from interactor import validator

logger = logging.getLogger(__name__)

RESULT_KEY = "result"


class Declaration:
    """Placeholder left in a class body by :func:`attribute` or :func:`boolean`.

    Replaced by an :class:`AttributeAccessor` when the class is created.
    """

    __slots__ = ("kind", "options")

    def __init__(self, kind: str, options: dict[str, Any]) -> None:
        self.kind = kind
        self.options = options

    def __repr__(self) -> str:
        return f"Declaration({self.kind!r}, {self.options!r})"


def attribute(kind: str = "any", /, **options: Any) -> Any:
    """Declare an attribute of *kind* in an interaction class body.

    ``a = b = attribute("boolean")`` declares both names.
    """
    return Declaration(kind, options)


def boolean(**options: Any) -> Any:
    """Declare a boolean attribute in an interaction class body."""
    return Declaration("boolean", options)


class AttributeAccessor:
    """Read/write descriptor generated for each declared attribute."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: Interaction | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._values.get(self.name)

    def __set__(self, instance: Interaction, value: Any) -> None:
        instance._values[self.name] = value

    def __repr__(self) -> str:
        return f"<AttributeAccessor {self.name!r}>"


class Interaction:
    """Base class for interactions.

    Each subclass owns an :class:`AttributeRegistry` merged from its bases'
    registries when the class is created. Pass ``strict_options=False`` as
    a class keyword to ignore unknown option keys instead of rejecting them.
    """

    _registry: ClassVar[AttributeRegistry]
    _strict_options: ClassVar[bool | None] = None

    def __init_subclass__(cls, *, strict_options: bool | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # First base wins on name clashes, matching attribute lookup order.
        parents = [b._registry for b in reversed(cls.__bases__) if issubclass(b, Interaction)]
        if len(parents) == 1:
            cls._registry = parents[0].derive()
        else:
            cls._registry = AttributeRegistry.merge(*parents)
        if strict_options is not None:
            cls._strict_options = strict_options

        for name, value in vars(cls).items():
            if name in cls._registry and not isinstance(value, Declaration | AttributeAccessor):
                msg = f"{cls.__name__}.{name} shadows the declared attribute {name!r}"
                raise InvalidDeclarationError(msg)

        pending = [(n, v) for n, v in vars(cls).items() if isinstance(v, Declaration)]
        for name, declaration in pending:
            cls._install(declaration.kind, [name], declaration.options)

    # --- Declarations ---

    @classmethod
    def _install(
        cls, kind: str, names: list[str] | tuple[str, ...], options: Mapping[str, Any]
    ) -> list[AttributeDeclaration]:
        declarations = cls._registry.declare(kind, names, options)
        for declaration in declarations:
            setattr(cls, declaration.name, AttributeAccessor(declaration.name))
        return declarations

    @classmethod
    def _check_declarable(cls) -> None:
        if cls is Interaction:
            raise InvalidDeclarationError("Declare attributes on a subclass of Interaction")

    @classmethod
    def declare(cls, kind: str, *names: str, **options: Any) -> list[AttributeDeclaration]:
        """Declare one or more attributes of *kind* after class creation.

        Raises:
            UnsupportedDeclarationError: *kind* or a rule in *options* is unknown.
            InvalidDeclarationError: A name is reserved or the default is invalid.
        """
        cls._check_declarable()
        return cls._install(kind, names, options)

    @classmethod
    def validates(cls, *names: str, **rules: Any) -> None:
        """Attach validation rules to attributes that are already declared."""
        cls._check_declarable()
        cls._registry.add_rules(names, rules)

    @classmethod
    def declarations(cls) -> list[AttributeDeclaration]:
        """Declared attributes, in declaration order."""
        return list(cls._registry)

    @classmethod
    def uses_strict_options(cls) -> bool:
        if cls._strict_options is not None:
            return cls._strict_options
        return get_settings().strict_options

    # --- Construction ---

    def __init__(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        given = self._accept_options(options, kwargs)
        self._values: dict[str, Any] = {d.name: d.initial_value() for d in self._registry}
        self._values.update(given)
        self._result: Any = None
        self._executed = False
        self._outcome: ValidationOutcome | None = None

    @classmethod
    def _accept_options(
        cls, options: Mapping[str, Any] | None, kwargs: dict[str, Any]
    ) -> dict[str, Any]:
        if options is not None and not isinstance(options, Mapping):
            msg = f"{cls.__name__} options must be a mapping, got {type(options).__name__}"
            raise InvalidConstructionInput(msg)

        accepted: dict[str, Any] = {}
        unknown: list[str] = []
        for key, value in [*(options or {}).items(), *kwargs.items()]:
            if not isinstance(key, str):
                raise InvalidConstructionInput(f"Option keys must be strings, got {key!r}")
            # str.__str__ unwraps str subclasses such as StrEnum members.
            name = str.__str__(key)
            if name == RESULT_KEY:
                msg = f"{RESULT_KEY!r} is reserved and cannot be passed to {cls.__name__}"
                raise InvalidConstructionInput(msg)
            if name in cls._registry:
                accepted[name] = value
            else:
                unknown.append(name)

        if unknown:
            listed = ", ".join(unknown)
            if cls.uses_strict_options():
                raise InvalidConstructionInput(f"{cls.__name__} got unknown option(s): {listed}")
            logger.warning("Ignoring unknown options for %s: %s", cls.__name__, listed)
        return accepted

    # --- State ---

    @property
    def result(self) -> Any:
        """Return value of ``execute()``; None until the interaction has executed."""
        return self._result

    @property
    def executed(self) -> bool:
        return self._executed

    @property
    def attributes(self) -> dict[str, Any]:
        """Current values of every declared attribute."""
        return dict(self._values)

    @property
    def new_record(self) -> bool:
        return True

    @property
    def persisted(self) -> bool:
        return False

    # --- Validation ---

    def validate(self) -> ValidationOutcome:
        """Validate the current attribute values and remember the outcome."""
        self._outcome = validator.validate(self)
        return self._outcome

    def is_valid(self) -> bool:
        return self.validate().valid

    @property
    def outcome(self) -> ValidationOutcome:
        """The most recent outcome, validating first if none exists yet."""
        if self._outcome is None:
            return self.validate()
        return self._outcome

    @property
    def errors(self) -> tuple[FieldError, ...]:
        return self.outcome.errors

    # --- Execution ---

    def execute(self) -> Any:
        """Business logic. Subclasses must override this."""
        raise NotImplementedError(f"{type(self).__name__} must implement execute()")

    @classmethod
    def run(cls, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Self:
        """Build, validate, and execute only if valid. Never raises for invalid input."""
        interaction = cls(options, **kwargs)
        outcome = interaction.validate()
        if not outcome.valid:
            logger.debug("%s rejected: %s", cls.__name__, "; ".join(outcome.full_messages()))
            return interaction

        with structlog.contextvars.bound_contextvars(interaction=cls.__name__):
            logger.debug("Executing %s", cls.__name__)
            interaction._result = interaction.execute()
        interaction._executed = True
        return interaction

    @classmethod
    def run_or_raise(cls, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Any:
        """Like :meth:`run` but return the bare result.

        Raises:
            InteractionInvalid: Validation failed; carries the outcome.
        """
        interaction = cls.run(options, **kwargs)
        if not interaction.executed:
            raise InteractionInvalid(interaction.outcome, interaction)
        return interaction.result

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"<{type(self).__name__} {values} executed={self._executed}>"


Interaction._registry = AttributeRegistry(
    reserved={name for name in dir(Interaction) if not name.startswith("_")} | {RESULT_KEY},
)
