"""Interview coach agent."""

from __future__ import annotations

from typing import Any, Optional

from ..providers.service import CompletionClient
from ..schemas import AlignedDocuments, CoachedDocuments, InterviewPrep
from .prompts import INTERVIEW_COACH_PROMPT
from .protocol import build_descriptor, to_handoff, validate_input, validate_output
from .reporting import render_context, request_report


class InterviewCoachAgent:
    """Prepare interview questions targeting the candidate's alignment gaps."""

    def __init__(
        self,
        completion: CompletionClient,
        question_count: int = 5,
        timeout_ms: Optional[int] = 45000,
        name: str = "InterviewCoachAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Generates interview questions and talking points for the target role",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.completion = completion
        self.question_count = question_count

    async def execute(self, input: Any) -> Any:
        documents = validate_input(self.descriptor, AlignedDocuments, input)
        prompt = render_context(
            {
                "Target Role": documents.job_description.model_dump(mode="json"),
                "Missing Keywords": documents.alignment.missing_keywords,
                "Role Fit": documents.alignment.role_fit_analysis or "n/a",
                "Instructions": f"Prepare exactly {self.question_count} questions.",
            }
        )
        prep = await request_report(
            self.completion, self.descriptor, INTERVIEW_COACH_PROMPT, prompt, InterviewPrep
        )
        # the model does not always honour the requested count
        questions = prep.questions[: self.question_count]
        prep = prep.model_copy(update={"questions": questions})
        result = validate_output(
            self.descriptor,
            CoachedDocuments,
            {**documents.model_dump(mode="json"), "interview_prep": prep.model_dump(mode="json")},
        )
        return to_handoff(result)
