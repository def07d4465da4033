"""termchat schema definitions.

Pydantic v2 models for configuration, the request body, decoded stream
events and final outcomes.
"""

from termchat.schemas.request import (
    ChatConfig,
    ContentPart,
    InputMessage,
    ResponsesRequest,
    TextOptions,
    Verbosity,
)
from termchat.schemas.streaming import (
    OutcomeStatus,
    StreamEvent,
    StreamEventKind,
    StreamOutcome,
)

__all__ = [
    "ChatConfig",
    "ContentPart",
    "InputMessage",
    "OutcomeStatus",
    "ResponsesRequest",
    "StreamEvent",
    "StreamEventKind",
    "StreamOutcome",
    "TextOptions",
    "Verbosity",
]
