"""Tests for attribute kinds and the filter lookup table."""

import pytest

from interactor.domain.filters import (
    FILTERS,
    REQUIRED_MESSAGE,
    AnyFilter,
    BooleanFilter,
    get_filter,
)
from interactor.errors import UnsupportedDeclarationError, UsageError


class TestBooleanFilter:
    @pytest.mark.parametrize("value", [True, False])
    def test_accepts_booleans(self, value: bool) -> None:
        assert BooleanFilter().check(value, allow_nil=False) is None

    @pytest.mark.parametrize("value", [0, 1, "true", "false", "", [], 0.0])
    def test_rejects_non_booleans(self, value: object) -> None:
        assert BooleanFilter().check(value, allow_nil=False) == "is not a valid boolean"

    def test_none_is_required(self) -> None:
        assert BooleanFilter().check(None, allow_nil=False) == REQUIRED_MESSAGE

    def test_none_allowed_when_nil_allowed(self) -> None:
        assert BooleanFilter().check(None, allow_nil=True) is None


class TestAnyFilter:
    @pytest.mark.parametrize("value", [None, 0, "x", object(), [1, 2]])
    def test_accepts_everything(self, value: object) -> None:
        assert AnyFilter().check(value, allow_nil=AnyFilter.allow_nil_by_default) is None

    def test_nil_allowed_by_default(self) -> None:
        assert AnyFilter.allow_nil_by_default is True
        assert BooleanFilter.allow_nil_by_default is False


class TestGetFilter:
    def test_known_kinds(self) -> None:
        assert set(FILTERS) == {"any", "boolean"}
        assert isinstance(get_filter("boolean"), BooleanFilter)

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(UnsupportedDeclarationError, match="foo"):
            get_filter("foo")

    def test_unknown_kind_is_usage_and_attribute_error(self) -> None:
        with pytest.raises(UsageError):
            get_filter("integer")
        with pytest.raises(AttributeError):
            get_filter("integer")

    def test_unhashable_kind_raises(self) -> None:
        with pytest.raises(UnsupportedDeclarationError):
            get_filter(["boolean"])  # type: ignore[arg-type]
