"""Tests for the termchat CLI.

Covers argument and stdin prompts, exit codes for each outcome, the
saved artifacts, configuration errors and --last, via CliRunner with
the HTTP transport patched out.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from termchat import __version__
from termchat.cli import app
from termchat.transport import TransportError

# NO_COLOR=1 prevents Rich from injecting ANSI codes inside option names,
# which breaks substring matching in CI (headless, no TTY).
# COLUMNS=200 prevents wrapping that could split a flag across lines.
runner = CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})

_STREAM_LINES = "termchat.client.stream_lines"

_HELLO_WORLD = [
    "event: response.output_text.delta",
    'data: {"delta":"Hello"}',
    "event: response.output_text.delta",
    'data: {"delta":" world"}',
    "data: [DONE]",
]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TERMCHAT_HOME", str(tmp_path))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    for name in ("TERMCHAT_MODEL", "TERMCHAT_VERBOSITY", "TERMCHAT_API_BASE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _fake_stream(lines: list[str], seen: dict | None = None):
    def _stream(body, config, api_key, *, client=None):
        if seen is not None:
            seen["body"] = body
            seen["api_key"] = api_key
        return iter(lines)

    return _stream


class TestHelpAndVersion:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--model" in result.output
        assert "--verbosity" in result.output
        assert "--last" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestChat:
    def test_success(self, tmp_path):
        seen: dict = {}
        with patch(_STREAM_LINES, _fake_stream(_HELLO_WORLD, seen)):
            result = runner.invoke(app, ["say", "hello"])

        assert result.exit_code == 0
        assert "Hello world" in result.output
        assert "gpt-5" in result.output
        assert "Completed in" in result.output
        assert seen["api_key"] == "sk-test"
        assert seen["body"]["input"][-1]["content"][0]["text"] == "say hello"
        assert (tmp_path / "last_output.txt").read_text(encoding="utf-8") == "Hello world"

    def test_prompt_from_stdin(self):
        seen: dict = {}
        with patch(_STREAM_LINES, _fake_stream(_HELLO_WORLD, seen)):
            result = runner.invoke(app, [], input="line one\nline two\nEND\n")

        assert result.exit_code == 0
        assert seen["body"]["input"][-1]["content"][0]["text"] == "line one\nline two"

    def test_model_and_verbosity_options(self):
        seen: dict = {}
        with patch(_STREAM_LINES, _fake_stream(_HELLO_WORLD, seen)):
            result = runner.invoke(
                app, ["--model", "gpt-5-mini", "--verbosity", "low", "hi"]
            )

        assert result.exit_code == 0
        assert seen["body"]["model"] == "gpt-5-mini"
        assert seen["body"]["text"] == {"verbosity": "low"}
        assert "gpt-5-mini" in result.output

    def test_env_model_override(self, monkeypatch):
        monkeypatch.setenv("TERMCHAT_MODEL", "gpt-5-nano")
        seen: dict = {}
        with patch(_STREAM_LINES, _fake_stream(_HELLO_WORLD, seen)):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 0
        assert seen["body"]["model"] == "gpt-5-nano"

    def test_error_event_exits_nonzero(self, tmp_path):
        lines = [
            "event: response.error",
            'data: {"error":{"message":"rate limited"}}',
        ]
        with patch(_STREAM_LINES, _fake_stream(lines)):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "rate limited" in result.output
        saved = json.loads((tmp_path / "last_payload.json").read_text(encoding="utf-8"))
        assert saved == {"error": {"message": "rate limited"}}
        assert not (tmp_path / "last_output.txt").exists()

    def test_error_keeps_previous_output_artifact(self, tmp_path):
        (tmp_path / "last_output.txt").write_text("earlier reply", encoding="utf-8")
        with patch(_STREAM_LINES, _fake_stream(['data: {"error":{"message":"oops"'])):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 1
        assert "oops" in result.output
        assert (tmp_path / "last_output.txt").read_text(encoding="utf-8") == "earlier reply"

    def test_empty_response_exits_nonzero(self, tmp_path):
        lines = ["event: response.completed", 'data: {"type":"response.completed"}']
        with patch(_STREAM_LINES, _fake_stream(lines)):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 1
        assert "no text" in result.output
        assert "last_payload.json" in result.output
        assert (tmp_path / "last_payload.json").exists()

    def test_transport_error(self):
        def _fail(body, config, api_key, *, client=None):
            raise TransportError("Request failed: could not connect")

        with patch(_STREAM_LINES, _fail):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 1
        assert "could not connect" in result.output


class TestConfigErrors:
    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY")
        result = runner.invoke(app, ["hi"])
        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_api_key_from_keys_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        monkeypatch.delenv("OPENAI_API_KEY")
        (tmp_path / "keys.env").write_text("OPENAI_API_KEY=sk-saved\n")
        seen: dict = {}
        with patch(_STREAM_LINES, _fake_stream(_HELLO_WORLD, seen)):
            result = runner.invoke(app, ["hi"])

        assert result.exit_code == 0
        assert seen["api_key"] == "sk-saved"

    def test_invalid_verbosity(self):
        result = runner.invoke(app, ["--verbosity", "chatty", "hi"])
        assert result.exit_code == 1
        assert "verbosity" in result.output

    def test_empty_prompt(self):
        result = runner.invoke(app, [], input="END\n")
        assert result.exit_code == 1
        assert "No prompt provided" in result.output


class TestLast:
    def test_prints_last_output(self, tmp_path):
        (tmp_path / "last_output.txt").write_text("saved reply", encoding="utf-8")
        result = runner.invoke(app, ["--last"])
        assert result.exit_code == 0
        assert result.output == "saved reply\n"

    def test_no_saved_output(self):
        result = runner.invoke(app, ["--last"])
        assert result.exit_code == 1
        assert "No saved reply" in result.output
