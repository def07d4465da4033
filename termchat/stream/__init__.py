"""Streaming response handling: SSE decoding, rendering, finalization."""

from termchat.stream.decoder import EventStreamDecoder, StopReason, classify_event
from termchat.stream.outcome import finalize_outcome, persist_outcome
from termchat.stream.renderer import RenderState, StreamRenderer, normalize_escapes

__all__ = [
    "EventStreamDecoder",
    "RenderState",
    "StopReason",
    "StreamRenderer",
    "classify_event",
    "finalize_outcome",
    "normalize_escapes",
    "persist_outcome",
]
