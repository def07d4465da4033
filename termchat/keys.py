"""API key loading for termchat.

Keys are looked up with this priority:
  1. Environment variables (highest — already set in shell)
  2. $TERMCHAT_HOME/keys.env (defaults to ~/.termchat/keys.env)
  3. .env in current directory (project-level)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from termchat.config_loader import ConfigError, default_home

logger = logging.getLogger(__name__)

KEYS_FILE_NAME = "keys.env"

API_KEY_HELP_URL = (
    "https://help.openai.com/en/articles/4936850-where-do-i-find-my-secret-api-key"
)


def load_keys_env(home: Path | None = None) -> None:
    """Load API keys from keys.env and ./.env into os.environ.

    Existing environment variables are never overwritten, and a file
    loaded earlier wins over one loaded later.
    """
    home = home or default_home()
    files = [home / KEYS_FILE_NAME, Path.cwd() / ".env"]
    for env_file in files:
        if env_file.is_file():
            _load_env_file(env_file)


def _load_env_file(path: Path) -> None:
    """Parse a simple KEY=VALUE .env file and set vars that aren't already set."""
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export "):]
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and not os.environ.get(key):
                os.environ[key] = value
                logger.debug("Loaded %s from %s", key, path)
    except OSError:
        logger.debug("Could not read %s", path)


def require_api_key(env_var: str = "OPENAI_API_KEY") -> str:
    """Return the API key from ``env_var`` or raise with setup guidance.

    Raises:
        ConfigError: If the variable is unset or blank.
    """
    key = os.environ.get(env_var, "").strip()
    if key:
        return key
    raise ConfigError(
        f"The {env_var} environment variable is not set.\n"
        f"Add it to your shell profile (for example "
        f"'export {env_var}=<your-api-key>' in ~/.zshrc) or to "
        f"{default_home() / KEYS_FILE_NAME}.\n"
        f"API key instructions: {API_KEY_HELP_URL}"
    )
