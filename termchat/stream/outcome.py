"""Stream outcome finalization.

Decides what a finished stream amounts to (success, empty reply or
error), recovers truncated error payloads, and persists the run
artifacts for later inspection.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from termchat.output.writer import write_last_output, write_last_payload
from termchat.schemas.request import ChatConfig
from termchat.schemas.streaming import OutcomeStatus, StreamEvent, StreamOutcome

logger = logging.getLogger(__name__)


def balance_braces(buffer: str) -> str:
    """Append the ``}`` characters a truncated JSON object is missing.

    Best effort only: counts braces without regard to string literals,
    so a cut inside a quoted value still yields invalid JSON.
    """
    missing = buffer.count("{") - buffer.count("}")
    if missing > 0:
        return buffer + "}" * missing
    return buffer


def extract_error_message(payload: dict[str, Any]) -> str:
    """Pull a human-readable message out of an error payload.

    Checks ``error.message`` first, then a string ``error``, then a
    top-level ``message``. Returns "" when none is present.
    """
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if payload.get("message"):
        return str(payload["message"])
    return ""


def recover_payload(buffer: str) -> tuple[str, str]:
    """Turn leftover unparsed stream text into (message, raw_payload).

    The raw payload is the brace-balanced buffer. If it parses as a JSON
    object carrying a message, that message is used; otherwise the
    original buffer is reported verbatim.
    """
    recovered = balance_braces(buffer.strip())
    try:
        data = json.loads(recovered)
    except json.JSONDecodeError:
        logger.debug("Recovered payload is still not valid JSON")
        return buffer, recovered

    message = extract_error_message(data) if isinstance(data, dict) else ""
    return message or buffer, recovered


def finalize_outcome(
    text: str,
    *,
    elapsed_seconds: float,
    error_event: StreamEvent | None = None,
    done_event: StreamEvent | None = None,
    recovery_buffer: str = "",
) -> StreamOutcome:
    """Build the final StreamOutcome for a finished stream.

    Args:
        text: Accumulated rendered text.
        elapsed_seconds: Wall-clock time since the request was sent.
        error_event: The ERROR event, if one was decoded.
        done_event: The DONE event, if one was decoded.
        recovery_buffer: Unparsed stream content left by the decoder.
            Only consulted when neither an ERROR nor a DONE event arrived.

    Returns:
        An error outcome when the server reported one or an unterminated
        stream left unparsed content, an empty outcome when no text
        arrived, else success.
    """
    elapsed_seconds = max(elapsed_seconds, 0.0)

    if error_event is not None:
        message = extract_error_message(error_event.payload) or error_event.raw
        return StreamOutcome.error(
            message, raw_payload=error_event.raw, elapsed_seconds=elapsed_seconds
        )

    if done_event is None and recovery_buffer.strip():
        message, raw = recover_payload(recovery_buffer)
        return StreamOutcome.error(
            message, raw_payload=raw, elapsed_seconds=elapsed_seconds
        )

    if not text:
        raw = done_event.raw if done_event is not None else ""
        return StreamOutcome.empty(raw, elapsed_seconds=elapsed_seconds)

    return StreamOutcome.success(text, elapsed_seconds)


def persist_outcome(outcome: StreamOutcome, config: ChatConfig) -> Path | None:
    """Write the artifact that matches ``outcome``.

    Returns the path written, or None when nothing was (or could be)
    written. Write failures are logged and otherwise ignored.
    """
    if outcome.status == OutcomeStatus.SUCCESS:
        return write_last_output(config.last_output_path, outcome.text)
    if outcome.raw_payload:
        return write_last_payload(config.last_payload_path, outcome.raw_payload)
    return None
