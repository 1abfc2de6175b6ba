"""Helpers shared by the model-backed agents."""

from __future__ import annotations

import json
from typing import Any, Dict

from ..errors import AgentExecutionError
from ..providers.service import CompletionClient, ModelResponseError
from .protocol import AgentDescriptor, validate_output


def render_context(sections: Dict[str, Any]) -> str:
    """Render named values as prompt sections, JSON-encoding structured ones."""
    blocks = []
    for title, value in sections.items():
        body = value if isinstance(value, str) else json.dumps(value, indent=2, ensure_ascii=False)
        blocks.append(f"## {title}\n{body}")
    return "\n\n".join(blocks)


async def request_report(
    completion: CompletionClient,
    descriptor: AgentDescriptor,
    system_prompt: str,
    prompt: str,
    shape: Any,
) -> Any:
    """Ask the model for JSON and validate it against ``shape``.

    Raises:
        AgentExecutionError: if the reply is not JSON
        AgentValidationError: if the JSON does not conform to ``shape``
    """
    try:
        payload = await completion.complete_json(prompt, system_prompt=system_prompt)
    except ModelResponseError as e:
        raise AgentExecutionError(str(e), descriptor.name, error_type=type(e).__name__) from e
    return validate_output(descriptor, shape, payload)
