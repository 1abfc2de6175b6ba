"""Resume critic agent."""

from __future__ import annotations

from typing import Any, Optional

from ..providers.service import CompletionClient
from ..schemas import CritiqueReport, CritiquedDocuments, ExtractedDocuments
from .prompts import CRITIC_PROMPT
from .protocol import build_descriptor, to_handoff, validate_input, validate_output
from .reporting import render_context, request_report


class ResumeCriticAgent:
    """Assess structure, readability and ATS compatibility of the resume."""

    def __init__(
        self,
        completion: CompletionClient,
        timeout_ms: Optional[int] = 45000,
        name: str = "ResumeCriticAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Analyzes resume structure, ATS compatibility and impact",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.completion = completion

    async def execute(self, input: Any) -> Any:
        documents = validate_input(self.descriptor, ExtractedDocuments, input)
        prompt = render_context({"Resume": documents.resume.model_dump(mode="json")})
        critique = await request_report(self.completion, self.descriptor, CRITIC_PROMPT, prompt, CritiqueReport)
        result = validate_output(
            self.descriptor,
            CritiquedDocuments,
            {**documents.model_dump(mode="json"), "critique": critique.model_dump(mode="json")},
        )
        return to_handoff(result)
