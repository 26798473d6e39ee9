"""Resolve ``package.module:ClassName`` targets and parse ``key=value`` options."""

from __future__ import annotations

import importlib
import json
from typing import Any

import click

from interactor.base import Interaction


class InteractionTarget(click.ParamType):
    """Click parameter type that imports an Interaction subclass."""

    name = "module:Class"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> type[Interaction]:
        if isinstance(value, type) and issubclass(value, Interaction):
            return value
        module_name, sep, attr_path = str(value).partition(":")
        if not sep or not module_name or not attr_path:
            self.fail(f"{value!r} is not in 'module:Class' form", param, ctx)
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as exc:
            self.fail(f"Cannot import {module_name!r}: {exc}", param, ctx)
        for part in attr_path.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError:
                self.fail(f"{module_name!r} has no attribute {attr_path!r}", param, ctx)
        if not (isinstance(obj, type) and issubclass(obj, Interaction)):
            self.fail(f"{value!r} is not an Interaction subclass", param, ctx)
        return obj


def target_name(cls: type[Interaction]) -> str:
    return f"{cls.__module__}:{cls.__qualname__}"


def parse_option(raw: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is JSON-decoded when possible.

    Examples:
        >>> parse_option("flag=true")
        ('flag', True)
        >>> parse_option("name=plain text")
        ('name', 'plain text')
    """
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"{raw!r} is not in key=value form")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value
