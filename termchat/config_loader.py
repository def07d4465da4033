"""Configuration loader.

Builds a ChatConfig from, lowest priority first:
  1. termchat/config/defaults.toml (shipped with the package)
  2. $TERMCHAT_HOME/config.toml (optional user file, same [chat] table)
  3. TERMCHAT_* environment variables
  4. Explicit overrides (CLI options)
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from termchat.schemas.request import ChatConfig

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).parent / "config"

USER_CONFIG_FILE = "config.toml"

# Environment variable -> ChatConfig field
ENV_OVERRIDES: dict[str, str] = {
    "TERMCHAT_MODEL": "model",
    "TERMCHAT_VERBOSITY": "verbosity",
    "TERMCHAT_API_BASE": "api_base",
}


class ConfigError(ValueError):
    """Raised when configuration is missing or invalid."""


def default_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the termchat home directory ($TERMCHAT_HOME or ~/.termchat)."""
    env = os.environ if env is None else env
    override = env.get("TERMCHAT_HOME", "")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".termchat"


def _read_chat_section(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    section = raw.get("chat")
    if not isinstance(section, dict):
        raise ConfigError(f"No [chat] section found in {path}")
    return dict(section)


def load_chat_config(
    config_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ChatConfig:
    """Resolve the configuration for one invocation.

    Args:
        config_path: Path to the defaults TOML. Defaults to the packaged
            termchat/config/defaults.toml.
        env: Environment mapping to read overrides from. Defaults to
            os.environ.
        **overrides: Field values that win over everything else. None
            values are ignored so CLI options can be passed straight in.

    Returns:
        A validated ChatConfig.

    Raises:
        FileNotFoundError: If the defaults file does not exist.
        ConfigError: If a file is malformed or a value is invalid.
    """
    env = os.environ if env is None else env
    path = config_path or _CONFIG_DIR / "defaults.toml"
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    values = _read_chat_section(path)
    home = default_home(env)
    values["home_dir"] = home

    user_path = home / USER_CONFIG_FILE
    if user_path.is_file():
        logger.debug("Loading user config from %s", user_path)
        user_values = _read_chat_section(user_path)
        user_values.pop("home_dir", None)
        values.update(user_values)

    for env_var, field_name in ENV_OVERRIDES.items():
        value = env.get(env_var, "").strip()
        if value:
            logger.debug("%s overridden by %s", field_name, env_var)
            values[field_name] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ChatConfig(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from None
