"""termchat CLI — Typer + Rich terminal interface.

Sends one prompt, streams the reply, and exits 0 only when text came back.
"""

from __future__ import annotations

import logging
import sys

# Ensure stdout/stderr use UTF-8 on Windows so the header marker and
# streamed text survive a legacy codepage like cp1252.
if sys.platform == "win32":
    for _stream_name in ("stdout", "stderr"):
        _stream = getattr(sys, _stream_name, None)
        if _stream and hasattr(_stream, "reconfigure"):
            try:
                _stream.reconfigure(encoding="utf-8")
            except (OSError, ValueError):
                pass

import typer
from rich.console import Console

from termchat import __version__
from termchat.client import run_prompt
from termchat.config_loader import ConfigError, load_chat_config
from termchat.display import render_error, render_outcome
from termchat.keys import load_keys_env, require_api_key
from termchat.output.writer import read_last_output
from termchat.prompt_input import EmptyPromptError, acquire_prompt
from termchat.schemas.streaming import OutcomeStatus
from termchat.stream.outcome import persist_outcome
from termchat.transport import TransportError

console = Console()

app = typer.Typer(
    name="termchat",
    help="Send one prompt to a hosted model and stream the reply. No memory between runs.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"termchat {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
            stream=sys.stderr,
        )


@app.command()
def chat(
    prompt: list[str] = typer.Argument(
        None, help="Prompt words. Omit to read the prompt from stdin (end with END)."
    ),
    model: str = typer.Option(
        None, "--model", "-m",
        help="Model identifier (overrides TERMCHAT_MODEL)",
    ),
    verbosity: str = typer.Option(
        None, "--verbosity",
        help="Response verbosity: low, medium, high (overrides TERMCHAT_VERBOSITY)",
    ),
    last: bool = typer.Option(
        False, "--last",
        help="Print the last saved reply and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose",
        help="Log debug details to stderr",
    ),
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Ask a single question and stream the answer."""
    _configure_logging(verbose)

    try:
        config = load_chat_config(model=model, verbosity=verbosity)
    except (FileNotFoundError, ConfigError) as e:
        render_error(console, str(e))
        raise typer.Exit(1) from None

    if last:
        text = read_last_output(config.last_output_path)
        if text is None:
            render_error(console, f"No saved reply at {config.last_output_path}")
            raise typer.Exit(1)
        console.file.write(text if text.endswith("\n") else text + "\n")
        return

    load_keys_env(config.home_dir)
    try:
        api_key = require_api_key(config.api_key_env)
        prompt_text = acquire_prompt(prompt, console=console)
        outcome = run_prompt(prompt_text, config, api_key=api_key, console=console)
    except (ConfigError, EmptyPromptError, TransportError) as e:
        render_error(console, str(e))
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        # Partial output stays on screen; nothing is finalized or saved
        console.print()
        raise typer.Exit(130) from None

    saved = persist_outcome(outcome, config)
    render_outcome(
        console, outcome, saved if outcome.status != OutcomeStatus.SUCCESS else None
    )
    raise typer.Exit(outcome.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
