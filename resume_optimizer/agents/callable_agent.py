"""Agent built from a plain function, with optional input/output shapes."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from .protocol import AgentDescriptor, build_descriptor, to_handoff, validate_input, validate_output

StageFunction = Callable[[Any], Union[Any, Awaitable[Any]]]


class CallableAgent:
    """Wrap a sync or async function as a pipeline stage.

    Example:
        agent = CallableAgent(
            normalize_skills,
            name="SkillNormalizer",
            description="Deduplicates and title-cases skills",
            input_shape=ExtractedDocuments,
            output_shape=ExtractedDocuments,
        )
    """

    def __init__(
        self,
        func: StageFunction,
        *,
        name: str,
        description: str = "",
        version: str = "1.0.0",
        timeout_ms: Optional[int] = None,
        input_shape: Any = None,
        output_shape: Any = None,
    ):
        self.descriptor: AgentDescriptor = build_descriptor(
            name=name, description=description, version=version, timeout_ms=timeout_ms
        )
        self._func = func
        self._input_shape = input_shape
        self._output_shape = output_shape

    async def execute(self, input: Any) -> Any:
        value = input
        if self._input_shape is not None:
            value = validate_input(self.descriptor, self._input_shape, value)

        result = self._func(value)
        if inspect.isawaitable(result):
            result = await result

        if self._output_shape is not None:
            result = validate_output(self.descriptor, self._output_shape, to_handoff(result))
        return to_handoff(result)

    def __repr__(self) -> str:
        return f"CallableAgent(name={self.descriptor.name!r})"
