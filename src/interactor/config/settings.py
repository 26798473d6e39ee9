"""Unified settings: explicit overrides, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags or explicit overrides
  2. Env vars: ``INTERACTOR_*`` prefix
  3. TOML file: ``interactor.toml`` discovered via walk-up
  4. Code defaults

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`interactor.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from interactor.config.discovery import find_config, read_toml


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``interactor.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class InteractorSettings(BaseSettings):
    """Process-wide settings for interactor.

    Attributes:
        strict_options: Reject option keys that name no declared attribute.
            When False they are logged and ignored. The reserved ``result``
            key is rejected either way.
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "INTERACTOR_",
        "extra": "ignore",
    }

    strict_options: bool = True
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> InteractorSettings:
        """Construct settings, discovering ``interactor.toml`` unless *config_path* is given."""
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None


_settings: InteractorSettings | None = None
_lock = threading.Lock()


def get_settings() -> InteractorSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    with _lock:
        if _settings is None:
            _settings = InteractorSettings.load()
        return _settings


def configure(settings: InteractorSettings) -> None:
    """Replace the process-wide settings."""
    global _settings
    with _lock:
        _settings = settings


def reset_settings() -> None:
    """Forget the process-wide settings so the next access reloads them."""
    global _settings
    with _lock:
        _settings = None
