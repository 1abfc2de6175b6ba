"""OpenAI-compatible provider implementation."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from .types import CompletionResponse, GenerationConfig


class OpenAICompatibleProvider:
    """Provider for OpenAI-compatible chat APIs."""

    def __init__(self, api_key: str, model: str, api_base: str = "") -> None:
        self.model = model
        self.api_base = api_base or ""
        self.client = AsyncOpenAI(api_key=api_key, base_url=api_base or None)
        self._forced_temperature: Optional[float] = None

    async def complete(self, prompt: str, config: GenerationConfig) -> CompletionResponse:
        kwargs = self._build_chat_kwargs(self._to_openai_messages(prompt, config.system_prompt), config)
        completion = await self._create_with_temperature_retry(kwargs)
        return self._from_openai_completion(completion)

    def _to_openai_messages(self, prompt: str, system_prompt: str) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _build_chat_kwargs(self, messages: List[Dict[str, Any]], config: GenerationConfig) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"model": self.model, "messages": messages}
        if config.max_tokens and config.max_tokens > 0:
            kwargs["max_tokens"] = config.max_tokens
        temperature = self._forced_temperature if self._forced_temperature is not None else config.temperature
        if temperature is not None:
            kwargs["temperature"] = temperature
        if config.json_output:
            kwargs["response_format"] = {"type": "json_object"}
        return kwargs

    async def _create_with_temperature_retry(self, kwargs: Dict[str, Any]):
        try:
            return await self.client.chat.completions.create(**kwargs)
        except Exception as error:
            allowed = self._extract_allowed_temperature(error)
            if allowed is None or kwargs.get("temperature") == allowed:
                raise

            retry_kwargs = dict(kwargs)
            retry_kwargs["temperature"] = allowed
            self._forced_temperature = allowed
            return await self.client.chat.completions.create(**retry_kwargs)

    def _extract_allowed_temperature(self, error: Exception) -> Optional[float]:
        message = str(error).lower()
        if "invalid temperature" not in message:
            return None

        # e.g. "invalid temperature: only 0.6 is allowed for this model"
        match = re.search(r"only\s+([0-9]+(?:\.[0-9]+)?)\s+is allowed", message)
        if not match:
            return None
        return float(match.group(1))

    def _from_openai_completion(self, completion) -> CompletionResponse:
        if not completion.choices:
            raise RuntimeError("Empty LLM response: no choices")

        message = completion.choices[0].message
        usage = None
        if getattr(completion, "usage", None) is not None:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens or 0,
                "completion_tokens": completion.usage.completion_tokens or 0,
                "total_tokens": completion.usage.total_tokens or 0,
            }
        return CompletionResponse(text=(message.content or "").strip(), usage=usage, raw=completion)
