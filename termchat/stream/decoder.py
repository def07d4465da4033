"""Server-sent event decoder for the Responses API stream.

Turns raw text lines from the HTTP body into typed StreamEvents. Lines
that don't fit SSE framing are collected into a recovery buffer instead
of raising, so a truncated or non-streaming error body can still be
reported once the stream ends.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator, Iterable, Iterator
from enum import StrEnum

from termchat.schemas.streaming import StreamEvent, StreamEventKind

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"

_EVENT_KINDS: dict[str, StreamEventKind] = {
    "response.output_text.delta": StreamEventKind.TEXT_DELTA,
    "response.error": StreamEventKind.ERROR,
    "error": StreamEventKind.ERROR,
    "response.done": StreamEventKind.DONE,
    "response.completed": StreamEventKind.DONE,
}


class StopReason(StrEnum):
    """Why the decoder stopped reading."""

    SENTINEL = "sentinel"
    ERROR = "error"
    DONE = "done"
    EOF = "eof"


def classify_event(name: str) -> StreamEventKind:
    """Map an SSE event name to its kind. Unknown names are OTHER."""
    return _EVENT_KINDS.get(name, StreamEventKind.OTHER)


def _field_value(line: str, prefix: str) -> str:
    value = line[len(prefix):]
    if value.startswith(" "):
        value = value[1:]
    return value


class EventStreamDecoder:
    """Stateful SSE decoder for one response stream.

    Attributes:
        recovery_lines: Unparsed fragments, in arrival order.
        stop_reason: Set once ``decode`` has finished.
    """

    def __init__(self) -> None:
        self.recovery_lines: list[str] = []
        self.stop_reason: StopReason | None = None
        self._event_name: str = ""

    @property
    def recovery_buffer(self) -> str:
        """Malformed payload text collected so far."""
        return "\n".join(self.recovery_lines)

    def decode(self, lines: Iterable[str]) -> Iterator[StreamEvent]:
        """Yield events from ``lines`` until a terminal condition.

        Stops on the ``[DONE]`` sentinel, after an ERROR or DONE event,
        or when ``lines`` is exhausted. When ``lines`` is a generator it
        is closed on the way out, which releases the HTTP connection.
        """
        self.stop_reason = None
        try:
            for line in lines:
                line = line.rstrip("\r")

                if not line.strip():
                    continue

                if line.startswith("event:"):
                    self._event_name = _field_value(line, "event:").strip()
                    continue

                if not line.startswith("data:"):
                    self.recovery_lines.append(line)
                    continue

                data = _field_value(line, "data:")
                if data.strip() == DONE_SENTINEL:
                    self.stop_reason = StopReason.SENTINEL
                    return

                event = self._build_event(data)
                if event is None:
                    continue

                yield event

                if event.kind == StreamEventKind.ERROR:
                    self.stop_reason = StopReason.ERROR
                    return
                if event.kind == StreamEventKind.DONE:
                    self.stop_reason = StopReason.DONE
                    return

            self.stop_reason = StopReason.EOF
        finally:
            logger.debug("Decoder stopped: %s", self.stop_reason)
            if isinstance(lines, Generator):
                lines.close()

    def _build_event(self, data: str) -> StreamEvent | None:
        name = self._event_name
        self._event_name = ""

        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            payload = None

        if not isinstance(payload, dict):
            self.recovery_lines.append(data)
            return None

        if not name:
            name = str(payload.get("type", ""))

        kind = classify_event(name)
        if kind == StreamEventKind.OTHER:
            logger.debug("Ignoring event %r", name)
        return StreamEvent(kind=kind, name=name, payload=payload, raw=data)
