"""
Configuration.

Settings are merged from three sources, later ones winning:

1. A YAML file (`scouty.yaml` by default, optional)::

       stashes:
       - 16Uv...
       error_interval: 30
       hook_new_session_path: /opt/scouty/hooks/new_session.sh
       matrix_user: "@me:matrix.org"

2. `SCOUTY_*` environment variables, e.g. `SCOUTY_STASHES=16Uv...,14Ab...`.
3. Command line flags.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Final, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from scouty.errors import ConfigError
from scouty.matrix import MATRIX_URL

logger = logging.getLogger(__name__)

ENV_PREFIX: Final = "SCOUTY_"
"""Prefix of configuration environment variables."""

DEFAULT_CONFIG_PATH: Final = Path("scouty.yaml")
"""Configuration file read when no path is given."""


class Config(BaseModel):
    """Validated, immutable settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stashes: tuple[str, ...]
    """Validator stashes to watch."""

    error_interval: int = 30
    """Minutes to wait before restarting after an error."""

    is_debug: bool = False
    is_short: bool = False
    """Omit hook file lines from reports."""

    feed: str = "-"
    """Path of the JSON lines chain event feed, `-` for stdin."""

    metrics_port: int | None = None
    """Port to serve Prometheus metrics on, if any."""

    hook_init_path: str = ""
    hook_new_session_path: str = ""
    hook_new_era_path: str = ""
    hook_validator_starts_active_next_era_path: str = ""
    hook_validator_starts_inactive_next_era_path: str = ""
    hook_validator_chilled_path: str = ""
    hook_validator_slashed_path: str = ""
    hook_validator_offline_path: str = ""
    hook_democracy_started_path: str = ""

    matrix_user: str = ""
    """Operator account invited to the private room."""

    matrix_bot_user: str = ""
    matrix_bot_password: str = ""
    matrix_disabled: bool = False
    matrix_bot_display_name_disabled: bool = False
    matrix_url: str = MATRIX_URL

    expose_network: bool = False
    expose_authored_blocks: bool = False
    expose_para_validator: bool = False
    expose_all: bool = False
    """Expose every optional hook argument."""

    @field_validator("stashes", mode="before")
    @classmethod
    def split_stashes(cls, v: Any) -> Any:
        """Accept a comma separated string."""
        if isinstance(v, str):
            return tuple(s.strip() for s in v.split(",") if s.strip())
        return v

    @field_validator("stashes")
    @classmethod
    def require_stashes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("at least one stash is required")
        return v

    @field_validator("error_interval")
    @classmethod
    def positive_interval(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("error_interval must be positive")
        return v

    @property
    def exposes_network(self) -> bool:
        return self.expose_network or self.expose_all

    @property
    def exposes_authored_blocks(self) -> bool:
        return self.expose_authored_blocks or self.expose_all

    @property
    def exposes_para_validator(self) -> bool:
        return self.expose_para_validator or self.expose_all


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def _read_env(env: Mapping[str, str]) -> dict[str, str]:
    return {
        name: env[ENV_PREFIX + name.upper()]
        for name in Config.model_fields
        if ENV_PREFIX + name.upper() in env
    }


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """
    Merge configuration sources into a `Config`.

    Args:
        path: YAML file. Must exist when given; `scouty.yaml` is read if present otherwise.
        env: Environment variables, `os.environ` by default.
        overrides: Command line values. `None` values are ignored.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    data: dict[str, Any] = {}

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data |= _read_yaml(path)
    elif DEFAULT_CONFIG_PATH.is_file():
        data |= _read_yaml(DEFAULT_CONFIG_PATH)

    data |= _read_env(os.environ if env is None else env)
    data |= {k: v for k, v in (overrides or {}).items() if v is not None}

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e

    logger.debug("config %s", config.model_dump(exclude={"matrix_bot_password"}))
    return config
