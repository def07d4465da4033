"""One prompt, one streamed reply.

Wires the transport, decoder, renderer and finalizer together for a
single invocation. There is no retry: any failure ends the run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

import httpx
from rich.console import Console

from termchat.request import build_request
from termchat.schemas.request import ChatConfig
from termchat.schemas.streaming import StreamEvent, StreamEventKind, StreamOutcome
from termchat.stream.decoder import EventStreamDecoder, StopReason
from termchat.stream.outcome import finalize_outcome
from termchat.stream.renderer import StreamRenderer
from termchat.transport import stream_lines

logger = logging.getLogger(__name__)


def stream_response(
    lines: Iterable[str],
    renderer: StreamRenderer,
    *,
    started_at: float,
    clock: Callable[[], float] = time.monotonic,
) -> StreamOutcome:
    """Decode ``lines``, render text deltas, and finalize the outcome.

    Args:
        lines: Raw response lines, in arrival order.
        renderer: Receives every decoded event.
        started_at: ``clock()`` value taken when the request was sent.
        clock: Monotonic time source.

    Returns:
        The StreamOutcome for this stream.
    """
    decoder = EventStreamDecoder()
    error_event: StreamEvent | None = None
    done_event: StreamEvent | None = None

    for event in decoder.decode(lines):
        if event.kind == StreamEventKind.ERROR:
            error_event = event
        elif event.kind == StreamEventKind.DONE:
            done_event = event
        else:
            renderer.handle(event)

    renderer.finish()
    logger.debug(
        "Stream finished (%s), %d chars rendered",
        decoder.stop_reason, len(renderer.text),
    )

    # Recovery only applies to streams that ended without a terminator
    recovery_buffer = (
        decoder.recovery_buffer if decoder.stop_reason == StopReason.EOF else ""
    )
    if decoder.recovery_buffer and not recovery_buffer:
        logger.debug("Ignoring unparsed lines: %r", decoder.recovery_buffer)

    return finalize_outcome(
        renderer.text,
        elapsed_seconds=clock() - started_at,
        error_event=error_event,
        done_event=done_event,
        recovery_buffer=recovery_buffer,
    )


def run_prompt(
    prompt: str,
    config: ChatConfig,
    *,
    api_key: str,
    console: Console,
    http_client: httpx.Client | None = None,
) -> StreamOutcome:
    """Send ``prompt`` and stream the reply to ``console``.

    Raises:
        TransportError: If the server could not be reached.
    """
    body = build_request(prompt, config)
    renderer = StreamRenderer(console, config.model)

    started_at = time.monotonic()
    lines = stream_lines(body, config, api_key, client=http_client)
    return stream_response(lines, renderer, started_at=started_at)
