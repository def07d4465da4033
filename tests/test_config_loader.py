"""Tests for termchat.config_loader — TOML defaults, user file and env overrides."""

from pathlib import Path

import pytest

from termchat.config_loader import ConfigError, default_home, load_chat_config
from termchat.schemas.request import ChatConfig, Verbosity

# Path to the real config file shipped with the package
_DEFAULTS = Path(__file__).parent.parent / "termchat" / "config" / "defaults.toml"


class TestLoadChatConfig:
    def test_loads_packaged_defaults(self, tmp_path):
        config = load_chat_config(env={"TERMCHAT_HOME": str(tmp_path)})
        assert isinstance(config, ChatConfig)
        assert config.model == "gpt-5"
        assert config.verbosity == Verbosity.MEDIUM
        assert config.api_base == "https://api.openai.com/v1"
        assert config.api_key_env == "OPENAI_API_KEY"
        assert config.home_dir == tmp_path

    def test_explicit_defaults_path(self, tmp_path):
        config = load_chat_config(_DEFAULTS, env={"TERMCHAT_HOME": str(tmp_path)})
        assert config.max_line_width == 80

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_chat_config(Path("/nonexistent/defaults.toml"), env={})

    def test_missing_chat_section_raises(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[other]\nkey = 1\n")
        with pytest.raises(ConfigError, match="No \\[chat\\] section"):
            load_chat_config(bad, env={"TERMCHAT_HOME": str(tmp_path)})

    def test_invalid_toml_raises(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[chat\nmodel = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_chat_config(bad, env={"TERMCHAT_HOME": str(tmp_path)})

    def test_user_config_overrides_defaults(self, tmp_path):
        (tmp_path / "config.toml").write_text(
            '[chat]\nmodel = "gpt-5-mini"\nverbosity = "low"\n'
        )
        config = load_chat_config(env={"TERMCHAT_HOME": str(tmp_path)})
        assert config.model == "gpt-5-mini"
        assert config.verbosity == Verbosity.LOW

    def test_env_overrides_user_config(self, tmp_path):
        (tmp_path / "config.toml").write_text('[chat]\nmodel = "gpt-5-mini"\n')
        config = load_chat_config(
            env={
                "TERMCHAT_HOME": str(tmp_path),
                "TERMCHAT_MODEL": "gpt-5-nano",
                "TERMCHAT_VERBOSITY": "high",
                "TERMCHAT_API_BASE": "http://localhost:8080/v1",
            }
        )
        assert config.model == "gpt-5-nano"
        assert config.verbosity == Verbosity.HIGH
        assert config.responses_url == "http://localhost:8080/v1/responses"

    def test_blank_env_ignored(self, tmp_path):
        config = load_chat_config(
            env={"TERMCHAT_HOME": str(tmp_path), "TERMCHAT_MODEL": "  "}
        )
        assert config.model == "gpt-5"

    def test_explicit_overrides_win(self, tmp_path):
        config = load_chat_config(
            env={"TERMCHAT_HOME": str(tmp_path), "TERMCHAT_MODEL": "gpt-5-nano"},
            model="o3",
            verbosity=None,
        )
        assert config.model == "o3"
        assert config.verbosity == Verbosity.MEDIUM

    def test_invalid_verbosity_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="verbosity"):
            load_chat_config(
                env={"TERMCHAT_HOME": str(tmp_path), "TERMCHAT_VERBOSITY": "chatty"}
            )


class TestPaths:
    def test_default_home(self):
        assert default_home({}) == Path.home() / ".termchat"

    def test_home_override(self, tmp_path):
        assert default_home({"TERMCHAT_HOME": str(tmp_path)}) == tmp_path

    def test_artifact_paths(self, tmp_path):
        config = ChatConfig(home_dir=tmp_path)
        assert config.last_output_path == tmp_path / "last_output.txt"
        assert config.last_payload_path == tmp_path / "last_payload.json"
