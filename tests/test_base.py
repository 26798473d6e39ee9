"""Tests for Interaction: declarations, construction, run, run_or_raise."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

import pytest

from interactor import (
    Interaction,
    InteractionInvalid,
    InvalidConstructionInput,
    InvalidDeclarationError,
    UnsupportedDeclarationError,
    UsageError,
    attribute,
    boolean,
)
from interactor.base import AttributeAccessor
from interactor.config.settings import InteractorSettings, configure
from tests.interactions import (
    ConfirmInteraction,
    ExampleInteraction,
    ExplodingInteraction,
    FlagInteraction,
    GreetInteraction,
    LenientInteraction,
    PairInteraction,
)


class OptionKey(StrEnum):
    RESULT = "result"
    VALID = "valid"


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_sets_attributes_from_options(self) -> None:
        assert ConfirmInteraction(valid=True).valid is True

    def test_accepts_mapping(self) -> None:
        assert ConfirmInteraction({"valid": True}).valid is True

    def test_mapping_and_kwargs_merge(self) -> None:
        greet = GreetInteraction({"name": "Ada"}, shout=True)
        assert greet.attributes == {"name": "Ada", "shout": True}

    def test_kwargs_override_mapping(self) -> None:
        assert ConfirmInteraction({"valid": False}, valid=True).valid is True

    def test_rejects_result_keyword(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction(result=True)

    def test_rejects_result_string_key(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction({"result": True})

    def test_rejects_symbolic_result_key(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction({OptionKey.RESULT: True})

    def test_symbolic_keys_accepted(self) -> None:
        assert ConfirmInteraction({OptionKey.VALID: True}).valid is True

    def test_reserved_key_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            ConfirmInteraction(result=None)

    def test_reserved_key_rejected_alongside_valid_keys(self) -> None:
        with pytest.raises(InvalidConstructionInput, match="reserved"):
            ConfirmInteraction({"valid": True, "result": "x"})

    def test_reserved_key_rejected_even_when_lenient(self) -> None:
        with pytest.raises(InvalidConstructionInput, match="reserved"):
            LenientInteraction({"bogus": 1, "result": 1})

    def test_rejects_unknown_option(self) -> None:
        with pytest.raises(InvalidConstructionInput, match="bogus"):
            ConfirmInteraction(bogus=1)

    def test_rejects_non_string_key(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction({1: True})

    def test_rejects_non_mapping_options(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction([("valid", True)])  # type: ignore[arg-type]

    def test_omitted_attributes_start_at_default(self) -> None:
        greet = GreetInteraction()
        assert greet.name is None
        assert greet.shout is False

    def test_result_starts_empty(self) -> None:
        interaction = ConfirmInteraction(valid=True)
        assert interaction.result is None
        assert interaction.executed is False

    def test_result_is_read_only(self) -> None:
        interaction = ConfirmInteraction(valid=True)
        with pytest.raises(AttributeError):
            interaction.result = "forged"  # type: ignore[misc]

    def test_model_flags(self) -> None:
        base = ExampleInteraction()
        assert base.new_record is True
        assert base.persisted is False


class TestUnknownOptionsWhenLenient:
    def test_class_keyword_ignores_unknown(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="interactor"):
            interaction = LenientInteraction(flag=True, extra=1)
        assert interaction.attributes == {"flag": True}
        assert "extra" in caplog.text

    def test_settings_ignore_unknown(self) -> None:
        configure(InteractorSettings(strict_options=False))
        assert ConfirmInteraction(valid=True, extra=1).valid is True

    def test_class_keyword_beats_settings(self) -> None:
        class Strict(Interaction, strict_options=True):
            flag = boolean()

            def execute(self) -> None:
                return None

        configure(InteractorSettings(strict_options=False))
        with pytest.raises(InvalidConstructionInput):
            Strict(flag=True, extra=1)

    def test_env_var_ignores_unknown(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INTERACTOR_STRICT_OPTIONS", "false")
        assert ConfirmInteraction(valid=True, extra=1).valid is True

    def test_lenient_setting_inherited(self) -> None:
        class Child(LenientInteraction):
            pass

        assert Child.uses_strict_options() is False


# ---------------------------------------------------------------------------
# run / run_or_raise
# ---------------------------------------------------------------------------


class TestRun:
    def test_returns_an_instance(self) -> None:
        assert isinstance(ConfirmInteraction.run(), ConfirmInteraction)

    def test_valid_sets_result(self) -> None:
        outcome = ConfirmInteraction.run(valid=True)
        assert outcome.result == "Execute"
        assert outcome.executed is True
        assert outcome.is_valid() is True

    def test_invalid_leaves_result_empty(self) -> None:
        outcome = ConfirmInteraction.run(valid=False)
        assert outcome.result is None
        assert outcome.executed is False
        assert outcome.is_valid() is False
        assert outcome.errors[0].field == "valid"

    def test_invalid_does_not_execute(self) -> None:
        calls: list[bool] = []

        class Tracked(Interaction):
            ok = boolean()

            def execute(self) -> None:
                calls.append(True)

        Tracked.run(ok="nope")
        assert calls == []

    def test_accepts_mapping(self) -> None:
        assert ConfirmInteraction.run({"valid": True}).result == "Execute"

    def test_idempotent(self) -> None:
        first = GreetInteraction.run(name="Ada")
        second = GreetInteraction.run(name="Ada")
        assert first.result == second.result == "Hello, Ada"
        assert first is not second

    def test_business_errors_propagate(self) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            ExplodingInteraction.run()

    def test_usage_errors_propagate(self) -> None:
        with pytest.raises(InvalidConstructionInput):
            ConfirmInteraction.run(result=True)

    def test_outcome_available(self) -> None:
        outcome = FlagInteraction.run(b=None).outcome
        assert outcome.valid is False
        assert outcome.full_messages() == ["b is required"]


class TestRunOrRaise:
    def test_valid_returns_result(self) -> None:
        assert ConfirmInteraction.run_or_raise(valid=True) == "Execute"

    def test_invalid_raises(self) -> None:
        with pytest.raises(InteractionInvalid) as excinfo:
            ConfirmInteraction.run_or_raise(valid=False)
        assert excinfo.value.outcome.valid is False
        assert excinfo.value.errors[0].message == "is not included in the list"
        assert isinstance(excinfo.value.interaction, ConfirmInteraction)

    def test_none_result_is_returned(self) -> None:
        assert FlagInteraction.run_or_raise(b=True) is None

    def test_business_errors_propagate_unwrapped(self) -> None:
        with pytest.raises(RuntimeError):
            ExplodingInteraction.run_or_raise()


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class TestDeclarations:
    def test_generates_reader_and_writer(self) -> None:
        flag = FlagInteraction()
        assert hasattr(flag, "b")
        flag.b = True
        assert flag.b is True
        assert isinstance(FlagInteraction.__dict__["b"], AttributeAccessor)

    def test_chained_assignment_declares_both(self) -> None:
        pair = PairInteraction()
        assert [d.name for d in PairInteraction.declarations()] == ["first", "second"]
        pair.first = True
        pair.second = False
        assert (pair.first, pair.second) == (True, False)

    def test_declare_many_names(self) -> None:
        class Multi(Interaction):
            def execute(self) -> None:
                return None

        Multi.declare("boolean", "test1", "test2")
        multi = Multi()
        for name in ("test1", "test2"):
            assert hasattr(multi, name)
            setattr(multi, name, True)
            assert getattr(multi, name) is True

    def test_unknown_kind_fails_class_definition(self) -> None:
        with pytest.raises(UnsupportedDeclarationError):

            class FooInteraction(Interaction):
                test = attribute("foo")

                def execute(self) -> None:
                    return None

    def test_unknown_kind_via_declare(self) -> None:
        with pytest.raises(UnsupportedDeclarationError):
            FlagInteraction.declare("foo", "test")

    def test_unknown_kind_is_attribute_error(self) -> None:
        with pytest.raises(AttributeError):
            FlagInteraction.declare("integer", "count")

    @pytest.mark.parametrize("options", [{"inclusion": {"in": 5}}, {"inclusion": {"in": "abc"}}])
    def test_malformed_inclusion_fails_class_definition(self, options: dict[str, Any]) -> None:
        with pytest.raises(UsageError):

            class Picky(Interaction):
                mode = attribute(**options)

    def test_misspelled_presence_option_fails_class_definition(self) -> None:
        with pytest.raises(UnsupportedDeclarationError):

            class Picky(Interaction):
                name = attribute(presence={"mesage": "needed"})

    @pytest.mark.parametrize("name", ["result", "errors", "run", "execute", "is_valid"])
    def test_reserved_names(self, name: str) -> None:
        with pytest.raises(InvalidDeclarationError):
            FlagInteraction.declare("boolean", name)

    def test_cannot_declare_on_base(self) -> None:
        with pytest.raises(InvalidDeclarationError):
            Interaction.declare("boolean", "flag")

    def test_validates_adds_rules(self) -> None:
        class Later(Interaction):
            mode = attribute()

            def execute(self) -> str:
                return self.mode

        Later.validates("mode", inclusion=["fast", "slow"])
        assert Later.run(mode="fast").result == "fast"
        assert Later.run(mode="other").is_valid() is False

    def test_validates_unknown_attribute(self) -> None:
        with pytest.raises(InvalidDeclarationError):
            FlagInteraction.validates("ghost", presence=True)

    def test_invalid_default_fails_class_definition(self) -> None:
        with pytest.raises(InvalidDeclarationError):

            class BadDefault(Interaction):
                flag = boolean(default="yes")


class TestInheritance:
    def test_subclass_inherits_declarations(self) -> None:
        class Loud(GreetInteraction):
            volume = attribute(default=11)

        assert [d.name for d in Loud.declarations()] == ["name", "shout", "volume"]
        assert Loud.run(name="Ada", shout=True).result == "HELLO, ADA"

    def test_subclass_declarations_do_not_leak(self) -> None:
        class Child(FlagInteraction):
            extra = boolean(default=False)

        assert [d.name for d in FlagInteraction.declarations()] == ["b"]
        with pytest.raises(InvalidConstructionInput):
            FlagInteraction(extra=True)

    def test_subclass_can_redeclare(self) -> None:
        class Optional(FlagInteraction):
            b = boolean(allow_nil=True)

        assert Optional.run(b=None).is_valid() is True
        assert FlagInteraction.run(b=None).is_valid() is False

    def test_multiple_bases_merge(self) -> None:
        class Both(FlagInteraction, ConfirmInteraction):
            pass

        assert {d.name for d in Both.declarations()} == {"b", "valid"}

    def test_method_shadowing_inherited_attribute_rejected(self) -> None:
        with pytest.raises(InvalidDeclarationError, match="shadows"):

            class Child(FlagInteraction):
                def b(self) -> bool:
                    return True

    def test_plain_value_shadowing_inherited_attribute_rejected(self) -> None:
        with pytest.raises(InvalidDeclarationError, match="shadows"):

            class Child(FlagInteraction):
                b = True

    def test_parent_registry_is_copied(self) -> None:
        class Child(FlagInteraction):
            pass

        assert Child._registry is not FlagInteraction._registry
        assert Child._registry.names == ["b"]


# ---------------------------------------------------------------------------
# execute
# ---------------------------------------------------------------------------


class TestExecute:
    def test_base_execute_not_implemented(self) -> None:
        with pytest.raises(NotImplementedError):
            ExampleInteraction().execute()

    def test_run_without_execute_raises(self) -> None:
        with pytest.raises(NotImplementedError):
            ExampleInteraction.run()


class TestBooleanIntegration:
    def test_invalid_option_raises(self) -> None:
        with pytest.raises(InteractionInvalid):
            FlagInteraction.run_or_raise(b=0)

    def test_valid_option_does_not_raise(self) -> None:
        FlagInteraction.run_or_raise(b=True)

    def test_required_option(self) -> None:
        assert FlagInteraction.run(b=None).is_valid() is False

    def test_omitted_option_is_required(self) -> None:
        assert FlagInteraction.run().errors[0].message == "is required"


class TestValidationState:
    def test_errors_track_last_validation(self) -> None:
        interaction = FlagInteraction(b="x")
        assert interaction.is_valid() is False
        interaction.b = True
        assert interaction.errors != ()
        assert interaction.is_valid() is True
        assert interaction.errors == ()

    def test_repr(self) -> None:
        text = repr(FlagInteraction(b=True))
        assert "FlagInteraction" in text
        assert "b=True" in text

    @pytest.mark.parametrize("value", [True, False])
    def test_and_logic(self, value: Any) -> None:
        assert PairInteraction.run_or_raise(first=True, second=value) is value
