"""Completion service used by agents: retries, timing and JSON decoding."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import TYPE_CHECKING, Any, Optional, Protocol

from ..retry import RetryConfig, retry_with_backoff
from .base import CompletionProvider
from .types import GenerationConfig

if TYPE_CHECKING:
    from ..config import LLMSettings
    from ..observability import PipelineObserver

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class ModelResponseError(Exception):
    """The model answered, but not with what was asked for."""


class CompletionClient(Protocol):
    """What agents need from the completion service."""

    async def complete(self, prompt: str, system_prompt: str = "") -> str: ...

    async def complete_json(self, prompt: str, system_prompt: str = "") -> Any: ...


def parse_json_response(text: str) -> Any:
    """Decode a model reply, tolerating a surrounding Markdown code fence.

    Raises:
        ModelResponseError: if the reply is empty or not JSON
    """
    body = text.strip()
    match = _FENCE_RE.match(body)
    if match:
        body = match.group(1)
    if not body:
        raise ModelResponseError("Model returned an empty response")
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Model response is not valid JSON: {e.msg} at position {e.pos}") from e


class CompletionService:
    """Wrap a provider with retry-on-transient-failure and request logging."""

    def __init__(
        self,
        provider: CompletionProvider,
        max_tokens: int = 4096,
        temperature: Optional[float] = 0.3,
        retry: Optional[RetryConfig] = None,
        observer: Optional[PipelineObserver] = None,
    ):
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.retry = retry or RetryConfig()
        self.observer = observer

    @classmethod
    def from_settings(cls, settings: LLMSettings, observer: Optional[PipelineObserver] = None) -> CompletionService:
        from . import create_provider

        provider = create_provider(
            settings.provider,
            api_key=settings.api_key,
            model=settings.model,
            api_base=settings.api_base,
        )
        retry = RetryConfig(
            max_attempts=settings.retry.max_attempts,
            base_delay=settings.retry.base_delay,
            max_delay=settings.retry.max_delay,
        )
        return cls(
            provider,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            retry=retry,
            observer=observer,
        )

    async def _request(self, prompt: str, system_prompt: str, json_output: bool) -> str:
        config = GenerationConfig(
            system_prompt=system_prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            json_output=json_output,
        )
        start = time.time()
        response = await retry_with_backoff(self.provider.complete, self.retry, prompt, config)
        duration_ms = (time.time() - start) * 1000

        model = getattr(self.provider, "model", "unknown")
        if self.observer:
            self.observer.log_llm_request(model, duration_ms, tokens=response.total_tokens)
        else:
            logger.debug(f"LLM: {model} | {duration_ms:.2f}ms")
        return response.text

    async def complete(self, prompt: str, system_prompt: str = "") -> str:
        return await self._request(prompt, system_prompt, json_output=False)

    async def complete_json(self, prompt: str, system_prompt: str = "") -> Any:
        text = await self._request(prompt, system_prompt, json_output=True)
        return parse_json_response(text)
