"""Run artifact writer.

Each invocation overwrites two fixed files in the termchat home:
    ~/.termchat/
    ├── last_output.txt     # last successful reply text
    └── last_payload.json   # last raw error (or empty-completion) payload

No history, no locking: concurrent runs may interleave writes.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _write(path: Path, content: str) -> Path | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write %s: %s", path, e)
        return None
    logger.debug("Wrote %d chars to %s", len(content), path)
    return path


def write_last_output(path: Path, text: str) -> Path | None:
    """Overwrite the last-output artifact with ``text``.

    Returns:
        The path written, or None if the write failed.
    """
    return _write(path, text)


def write_last_payload(path: Path, raw_payload: str) -> Path | None:
    """Overwrite the last-payload artifact with the raw payload text.

    Returns:
        The path written, or None if the write failed.
    """
    if not raw_payload.endswith("\n"):
        raw_payload += "\n"
    return _write(path, raw_payload)


def read_last_output(path: Path) -> str | None:
    """Return the saved last output, or None if there is none."""
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")
