"""Prompt acquisition from arguments, an interactive read, or a pipe.

Two ways to prompt:
  termchat "What's the rsync syntax to mirror a directory?"
  termchat            (then type or paste lines, finish with END)
Piped input is read the same way, up to END or end of file.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from rich.console import Console

END_MARKER = "END"


class EmptyPromptError(ValueError):
    """Raised when no prompt text was supplied."""


def _is_interactive(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def read_until_end(stream: TextIO) -> str:
    """Read lines until a line reading exactly END, or end of input."""
    lines: list[str] = []
    while True:
        line = stream.readline()
        if not line:
            break
        line = line.rstrip("\r\n")
        if line == END_MARKER:
            break
        lines.append(line)
    return "\n".join(lines)


def print_instructions(console: Console) -> None:
    console.print()
    console.print("You can use termchat in two ways:")
    console.print(
        "1. Run [bold]termchat[/bold] and enter your prompt. "
        f"Type '{END_MARKER}' on a new line when finished."
    )
    console.print(
        '2. Pass the prompt as an argument: [bold]termchat "Your prompt here"[/bold]'
    )
    console.print()
    console.print(f"Enter your prompt. Type '{END_MARKER}' on a new line when finished:")


def acquire_prompt(
    args: Sequence[str] | None,
    *,
    stdin: TextIO | None = None,
    console: Console | None = None,
) -> str:
    """Return the prompt text for this invocation.

    Arguments win when given and are joined with spaces. Otherwise stdin
    is read up to an END line; on a terminal, usage instructions are
    printed first.

    Raises:
        EmptyPromptError: If the resulting prompt is blank.
    """
    if args:
        prompt = " ".join(args)
    else:
        stream = stdin if stdin is not None else sys.stdin
        if _is_interactive(stream):
            print_instructions(console or Console())
        prompt = read_until_end(stream)

    if not prompt.strip():
        raise EmptyPromptError("No prompt provided.")
    return prompt
