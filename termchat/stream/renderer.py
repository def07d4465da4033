"""Incremental terminal renderer for streamed text deltas.

Writes each delta to the console as soon as it is decoded, after
normalizing escaped control sequences and keeping list items at the
start of a line. Deltas are written to the console file directly, not
through Rich markup, so brackets and other text in the reply print as-is.
"""

from __future__ import annotations

import re

from rich.console import Console
from rich.text import Text

from termchat.display import BRAND
from termchat.schemas.streaming import StreamEvent, StreamEventKind

HEADER_MARKER = "◆"

# Dropping \r can join a preceding backslash to the next letter (\\rn,
# \\rr), so a backslash, any run of \r, and n/t/r form one escape.
_ESCAPE_RE = re.compile(r"\\(?:\\r)*([nrt])")
_ESCAPES = {"n": "\n", "t": "\t", "r": ""}


def normalize_escapes(text: str) -> str:
    """Turn literal ``\\n``/``\\t`` into newline/tab and drop ``\\r``.

    Single pass, so already-normalized text comes back unchanged.
    """
    if "\\" not in text:
        return text
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], text)


class RenderState:
    """Mutable render state for one invocation."""

    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.header_printed: bool = False
        self.last_char: str = ""

    @property
    def text(self) -> str:
        """Everything written to the terminal since the header."""
        return "".join(self.chunks)

    def append(self, text: str) -> None:
        self.chunks.append(text)
        self.last_char = text[-1]


class StreamRenderer:
    """Feeds decoded events to the terminal, one delta at a time."""

    def __init__(self, console: Console, model: str) -> None:
        self._console = console
        self._model = model
        self.state = RenderState()

    @property
    def text(self) -> str:
        return self.state.text

    def handle(self, event: StreamEvent) -> None:
        """Render an event. Only TEXT_DELTA events produce output."""
        if event.kind == StreamEventKind.TEXT_DELTA:
            self.write_delta(str(event.payload.get("delta") or ""))

    def write_delta(self, delta: str) -> None:
        """Normalize, frame and emit a single text delta."""
        if not delta:
            return
        delta = normalize_escapes(delta)
        if not delta:
            return

        if not self.state.header_printed:
            self._print_header()

        if delta.startswith("-") and self.state.last_char not in ("", "\n"):
            self._emit("\n")

        self._emit(delta)

    def finish(self) -> None:
        """End the last content line so following output starts clean."""
        if self.state.last_char and self.state.last_char != "\n":
            self._console.file.write("\n")
            self._console.file.flush()

    def _print_header(self) -> None:
        header = Text()
        header.append(f"{HEADER_MARKER} ", style=f"bold {BRAND['mint']}")
        header.append(self._model, style="bold")
        self._console.print(header)
        self.state.header_printed = True

    def _emit(self, text: str) -> None:
        self._console.file.write(text)
        self._console.file.flush()
        self.state.append(text)
