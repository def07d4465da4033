"""Streaming schemas for decoded server events and final outcomes.

Defines the StreamEvent model produced by the event stream decoder and
the StreamOutcome model that the finalizer hands back to the CLI.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamEventKind(StrEnum):
    """Closed set of event kinds the renderer knows how to handle."""

    TEXT_DELTA = "text_delta"
    ERROR = "error"
    DONE = "done"
    OTHER = "other"


class StreamEvent(BaseModel):
    """A single decoded SSE frame."""

    kind: StreamEventKind = Field(description="Classified event kind")
    name: str = Field(default="", description="Resolved event name")
    payload: dict[str, Any] = Field(
        default_factory=dict, description="Parsed JSON object from the data line"
    )
    raw: str = Field(default="", description="Data line payload as received")


class OutcomeStatus(StrEnum):
    """Terminal status of one invocation."""

    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


class StreamOutcome(BaseModel):
    """Final, immutable result of one streamed request."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    text: str = Field(default="", description="Full accumulated response text")
    elapsed_seconds: float = Field(
        default=0.0, ge=0.0, description="Wall-clock time from request to stream end"
    )
    message: str = Field(default="", description="User-facing error message")
    raw_payload: str = Field(
        default="", description="Raw error or completion payload kept for inspection"
    )

    @classmethod
    def success(cls, text: str, elapsed_seconds: float) -> StreamOutcome:
        return cls(
            status=OutcomeStatus.SUCCESS, text=text, elapsed_seconds=elapsed_seconds
        )

    @classmethod
    def empty(cls, raw_payload: str = "", elapsed_seconds: float = 0.0) -> StreamOutcome:
        return cls(
            status=OutcomeStatus.EMPTY,
            raw_payload=raw_payload,
            elapsed_seconds=elapsed_seconds,
        )

    @classmethod
    def error(
        cls, message: str, raw_payload: str = "", elapsed_seconds: float = 0.0
    ) -> StreamOutcome:
        return cls(
            status=OutcomeStatus.ERROR,
            message=message,
            raw_payload=raw_payload,
            elapsed_seconds=elapsed_seconds,
        )

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 only for a successful, non-empty reply."""
        return 0 if self.status == OutcomeStatus.SUCCESS else 1
