"""Provider-agnostic request and response types for text completion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GenerationConfig:
    """Common generation settings passed to providers."""

    system_prompt: str = ""
    max_tokens: int = 4096
    temperature: Optional[float] = 0.3
    json_output: bool = False


@dataclass
class CompletionResponse:
    """Normalized response from a provider."""

    text: str = ""
    usage: Optional[Dict[str, int]] = None
    raw: Any = None

    @property
    def total_tokens(self) -> Optional[int]:
        if not self.usage:
            return None
        return self.usage.get("total_tokens")
