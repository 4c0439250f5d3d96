"""Unified settings — CLI flags, env vars, and TOML config in one object.

The config file is the first of: the ``--config`` flag, the
``SHOPLEDGER_CONFIG`` env var, or the nearest ``shopledger.toml`` found by
walking up from the shop root (or CWD). A file named by the flag or the env
var must exist. The directory holding the file becomes the shop root unless
one is given explicitly.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SHOPLEDGER_*`` prefix (``SHOPLEDGER_STORAGE__BACKEND``)
  3. TOML file    — ``shopledger.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from shopledger.config.models import CustomersConfig, ListingConfig, ShopConfig, StorageConfig

CONFIG_FILENAME = "shopledger.toml"
CONFIG_ENV_VAR = "SHOPLEDGER_CONFIG"


def locate_config(config_path: str | None = None, start: Path | None = None) -> Path | None:
    """Return the config file for this invocation, or None when there is none.

    Raises:
        click.ClickException: *config_path* or ``SHOPLEDGER_CONFIG`` names a
            file that does not exist.
    """
    named = config_path or os.environ.get(CONFIG_ENV_VAR)
    if named:
        path = Path(named)
        if not path.is_file():
            source = "--config" if config_path else CONFIG_ENV_VAR
            msg = f"Config file from {source} not found: {path}"
            raise click.ClickException(msg)
        return path

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``shopledger.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed from from_cli() to settings_customise_sources().
_tls = threading.local()


class ShopSettings(BaseSettings):
    """Unified settings for the shopledger CLI.

    Attributes:
        shop_root: Directory holding the ``.shopledger`` data folder (parent
            of ``shopledger.toml``, or CWD if no config was found).
        config_path: The config file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SHOPLEDGER_",
        "env_nested_delimiter": "__",
    }

    shop_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    shop: ShopConfig = Field(default_factory=ShopConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    customers: CustomersConfig = Field(default_factory=CustomersConfig)

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
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        shop_root: Path | None = None,
        **cli_flags: Any,
    ) -> ShopSettings:
        """Construct settings from a CLI invocation.

        Locates the config file (see :func:`locate_config`), resolves
        *shop_root* from its parent directory, and merges CLI flags as
        highest-priority overrides.
        """
        toml_path = locate_config(config_path, shop_root)

        resolved_root = shop_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                shop_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
