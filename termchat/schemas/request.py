"""Request and configuration schemas.

Defines the client configuration (model, verbosity, endpoint, artifact
locations) and the Responses API request body built from it.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

LAST_OUTPUT_FILE = "last_output.txt"
LAST_PAYLOAD_FILE = "last_payload.json"


class Verbosity(StrEnum):
    """Server-side text verbosity, passed through unchanged."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChatConfig(BaseModel):
    """Resolved configuration for a single invocation."""

    model: str = Field(default="gpt-5", min_length=1, description="Model identifier")
    verbosity: Verbosity = Field(default=Verbosity.MEDIUM, description="Text verbosity")
    api_base: str = Field(
        default="https://api.openai.com/v1", description="Base URL of the Responses API"
    )
    api_key_env: str = Field(
        default="OPENAI_API_KEY", description="Environment variable holding the API key"
    )
    connect_timeout: float = Field(
        default=10.0, gt=0.0, description="Connect timeout in seconds (no read timeout)"
    )
    max_line_width: int = Field(
        default=80, gt=0, description="Line width the model is asked to stay under"
    )
    home_dir: Path = Field(
        default_factory=lambda: Path.home() / ".termchat",
        description="Directory for keys, user config and run artifacts",
    )

    @property
    def responses_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/responses"

    @property
    def last_output_path(self) -> Path:
        """Where the last successful reply is written."""
        return self.home_dir / LAST_OUTPUT_FILE

    @property
    def last_payload_path(self) -> Path:
        """Where the last raw error or completion payload is written."""
        return self.home_dir / LAST_PAYLOAD_FILE


class ContentPart(BaseModel):
    """One text part of an input message."""

    type: Literal["input_text"] = "input_text"
    text: str


class InputMessage(BaseModel):
    """A role-tagged input message."""

    role: Literal["developer", "user"]
    content: list[ContentPart]


class TextOptions(BaseModel):
    verbosity: Verbosity = Verbosity.MEDIUM


class ResponsesRequest(BaseModel):
    """Body of a streaming POST /responses call."""

    model: str = Field(min_length=1)
    text: TextOptions = Field(default_factory=TextOptions)
    input: list[InputMessage]
    stream: bool = True
