"""Job alignment agent."""

from __future__ import annotations

from typing import Any, Optional

from ..providers.service import CompletionClient
from ..schemas import AlignedDocuments, AlignmentReport, AnalyzedDocuments
from .prompts import JOB_ALIGNMENT_PROMPT
from .protocol import build_descriptor, to_handoff, validate_input, validate_output
from .reporting import render_context, request_report


class JobAlignmentAgent:
    """Measure how well the resume fits the target job."""

    def __init__(
        self,
        completion: CompletionClient,
        timeout_ms: Optional[int] = 45000,
        name: str = "JobAlignmentAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Scores skill, seniority and keyword alignment with the job description",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.completion = completion

    async def execute(self, input: Any) -> Any:
        documents = validate_input(self.descriptor, AnalyzedDocuments, input)
        prompt = render_context(
            {
                "Resume": documents.resume.model_dump(mode="json"),
                "Job Description": documents.job_description.model_dump(mode="json"),
                "Content Gaps": documents.content_analysis.gaps,
            }
        )
        alignment = await request_report(
            self.completion, self.descriptor, JOB_ALIGNMENT_PROMPT, prompt, AlignmentReport
        )
        result = validate_output(
            self.descriptor,
            AlignedDocuments,
            {**documents.model_dump(mode="json"), "alignment": alignment.model_dump(mode="json")},
        )
        return to_handoff(result)
