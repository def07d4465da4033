"""Responses API request builder.

Every request carries two input messages: the developer instruction,
rendered from ``prompts/system.md``, and the user's prompt.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from termchat.schemas.request import (
    ChatConfig,
    ContentPart,
    InputMessage,
    ResponsesRequest,
    TextOptions,
)

_PROMPTS_DIR = Path(__file__).parent / "prompts"
SYSTEM_TEMPLATE = "system.md"

_env = Environment(
    loader=FileSystemLoader(_PROMPTS_DIR),
    keep_trailing_newline=True,
    autoescape=False,
)


def build_system_prompt(
    config: ChatConfig, template_name: str = SYSTEM_TEMPLATE
) -> str:
    """Render the developer instruction for ``config``.

    Raises:
        jinja2.TemplateNotFound: If ``template_name`` is not in prompts/.
    """
    template = _env.get_template(template_name)
    return template.render(max_line_width=config.max_line_width).strip()


def build_request(
    prompt: str, config: ChatConfig, system: str | None = None
) -> dict[str, Any]:
    """Build the JSON body for a streaming /responses call.

    Args:
        prompt: The user's prompt text, sent unchanged.
        config: Resolved configuration (model and verbosity).
        system: Developer instruction. Rendered from the system template
                when not given.

    Returns:
        A JSON-serializable dict with model, text.verbosity, input and
        stream=True.
    """
    if system is None:
        system = build_system_prompt(config)

    request = ResponsesRequest(
        model=config.model,
        text=TextOptions(verbosity=config.verbosity),
        input=[
            InputMessage(role="developer", content=[ContentPart(text=system)]),
            InputMessage(role="user", content=[ContentPart(text=prompt)]),
        ],
        stream=True,
    )
    return request.model_dump(mode="json")
