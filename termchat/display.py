"""Terminal display helpers for the CLI.

Status lines printed around a streamed reply: elapsed time on success,
error and empty-response notices, and the saved-artifact hints.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.text import Text

from termchat.schemas.streaming import OutcomeStatus, StreamOutcome

BRAND = {
    "mint": "#00ffbb",
    "dim": "#6a8a6a",
    "amber": "#ffaa00",
    "red": "#ff4444",
}


def render_outcome(
    console: Console, outcome: StreamOutcome, payload_path: Path | None = None
) -> None:
    """Print the closing status for ``outcome``.

    Args:
        console: Console for status output.
        outcome: The finalized stream outcome.
        payload_path: Where the raw payload was saved, if it was.
    """
    if outcome.status == OutcomeStatus.SUCCESS:
        console.print()
        console.print(
            Text(f"Completed in {outcome.elapsed_seconds:.1f}s", style=BRAND["dim"])
        )
        return

    if outcome.status == OutcomeStatus.EMPTY:
        console.print(
            Text("The model returned no text.", style=f"bold {BRAND['amber']}")
        )
    else:
        line = Text()
        line.append("Error: ", style=f"bold {BRAND['red']}")
        line.append(outcome.message)
        console.print(line)

    if payload_path is not None:
        console.print(Text(f"Raw payload saved to {payload_path}", style=BRAND["dim"]))


def render_error(console: Console, message: str) -> None:
    """Print a fatal error that happened before or instead of a stream."""
    line = Text()
    line.append("Error: ", style=f"bold {BRAND['red']}")
    line.append(message)
    console.print(line)
