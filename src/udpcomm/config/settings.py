"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``UDPCOMM_*`` prefix, ``__`` for nesting
                    (``UDPCOMM_CHANNEL__HOST=10.0.0.2``)
  3. TOML file    — ``udpcomm.toml`` found by :func:`find_config`
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from udpcomm.config.discovery import find_config
from udpcomm.config.models import ChannelConfig, SessionConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``udpcomm.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path has to reach settings_customise_sources, a classmethod.
_tls = threading.local()


class UdpcommSettings(BaseSettings):
    """Frozen settings for one udpcomm invocation.

    Stored on the :class:`AppContext` at the CLI root.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "UDPCOMM_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

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
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> UdpcommSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* wins over discovery from *start*.
        """
        toml_path: Path | None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                raise click.BadParameter(f"Config file {config_path} does not exist", param_hint="--config")
            toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def channel_with(self, **overrides: Any) -> ChannelConfig:
        """Return the channel section with non-None *overrides* applied and validated."""
        merged = {**self.channel.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        try:
            return ChannelConfig.model_validate(merged)
        except ValidationError as exc:
            raise click.UsageError(f"Invalid channel settings: {exc}") from exc
