"""Provider protocol definition."""

from __future__ import annotations

from typing import Protocol

from .types import CompletionResponse, GenerationConfig


class CompletionProvider(Protocol):
    """Protocol for provider implementations."""

    model: str

    async def complete(self, prompt: str, config: GenerationConfig) -> CompletionResponse: ...
