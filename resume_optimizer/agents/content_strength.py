"""Content strength agent."""

from __future__ import annotations

from typing import Any, Optional

from ..providers.service import CompletionClient
from ..schemas import AnalyzedDocuments, ContentAnalysisReport, CritiquedDocuments
from .prompts import CONTENT_STRENGTH_PROMPT
from .protocol import build_descriptor, to_handoff, validate_input, validate_output
from .reporting import render_context, request_report


class ContentStrengthAgent:
    """Score quantified impact and propose stronger bullet points."""

    def __init__(
        self,
        completion: CompletionClient,
        timeout_ms: Optional[int] = 45000,
        name: str = "ContentStrengthAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Evaluates achievements, action verbs and quantified impact",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.completion = completion

    async def execute(self, input: Any) -> Any:
        documents = validate_input(self.descriptor, CritiquedDocuments, input)
        prompt = render_context(
            {
                "Resume": documents.resume.model_dump(mode="json"),
                "Critique Issues": [issue.model_dump(mode="json") for issue in documents.critique.issues],
            }
        )
        analysis = await request_report(
            self.completion, self.descriptor, CONTENT_STRENGTH_PROMPT, prompt, ContentAnalysisReport
        )
        result = validate_output(
            self.descriptor,
            AnalyzedDocuments,
            {**documents.model_dump(mode="json"), "content_analysis": analysis.model_dump(mode="json")},
        )
        return to_handoff(result)
