"""HTTP stream transport.

Opens one streaming POST to the Responses API with httpx and yields the
response body line by line as it arrives. The body is yielded even for
error statuses so the decoder can recover the server's error payload.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import httpx

from termchat import __version__
from termchat.schemas.request import ChatConfig

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when no response could be obtained from the server."""


def _short_error_reason(error: httpx.HTTPError) -> str:
    """Map an httpx error to a short, user-friendly reason."""
    if isinstance(error, httpx.ConnectTimeout):
        return "connection timed out"
    if isinstance(error, httpx.ConnectError):
        return f"could not connect ({error})"
    if isinstance(error, httpx.TimeoutException):
        return "timed out"
    return str(error) or type(error).__name__


def _iter_lines(response: httpx.Response) -> Iterator[str]:
    """Split the decoded body on newlines as chunks arrive.

    A connection cut mid-body ends the stream instead of raising, and
    the unterminated tail is still yielded so it can be recovered.
    """
    pending = ""
    try:
        for chunk in response.iter_text():
            pending += chunk
            *complete, pending = pending.split("\n")
            for line in complete:
                yield line.rstrip("\r")
    except (httpx.RemoteProtocolError, httpx.ReadError) as e:
        logger.warning("Stream ended early: %s", e)
    if pending:
        yield pending.rstrip("\r")


def stream_lines(
    body: dict[str, Any],
    config: ChatConfig,
    api_key: str,
    *,
    client: httpx.Client | None = None,
) -> Iterator[str]:
    """POST ``body`` and yield response lines until the server closes.

    Only a connect timeout is applied: a stalled stream blocks until the
    server or the user gives up. Closing the generator closes the
    connection.

    Args:
        body: JSON request body.
        config: Supplies the endpoint and connect timeout.
        api_key: Bearer token.
        client: Optional pre-built client (tests pass a MockTransport one).

    Raises:
        TransportError: If the request fails before a response arrives.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
        "User-Agent": f"termchat/{__version__}",
    }
    timeout = httpx.Timeout(None, connect=config.connect_timeout)
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout)

    logger.debug("POST %s (model=%s)", config.responses_url, config.model)
    try:
        with client.stream(
            "POST", config.responses_url, headers=headers, json=body, timeout=timeout
        ) as response:
            if response.is_error:
                logger.warning(
                    "Server returned HTTP %d; reading error body", response.status_code
                )
            yield from _iter_lines(response)
    except httpx.HTTPError as e:
        raise TransportError(
            f"Request to {config.responses_url} failed: {_short_error_reason(e)}"
        ) from e
    finally:
        if owns_client:
            client.close()
