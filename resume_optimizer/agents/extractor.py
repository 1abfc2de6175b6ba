"""Extractor agent: raw resume and job text (or documents) to structured data."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..documents import DocumentFormatError, DocumentTextExtractor
from ..errors import AgentExecutionError
from ..providers.service import CompletionClient
from ..schemas import ExtractedDocuments, ExtractionInput, FileSource, TextSource
from .prompts import EXTRACTOR_PROMPT
from .protocol import build_descriptor, to_handoff, validate_input
from .reporting import render_context, request_report

logger = logging.getLogger(__name__)


class ExtractorAgent:
    """Structure a resume and a job description.

    Input is a tagged variant decided by the caller: ``{"kind": "text", ...}``
    or ``{"kind": "file", ...}``. File input is converted to text first.
    """

    def __init__(
        self,
        completion: CompletionClient,
        documents: Optional[DocumentTextExtractor] = None,
        max_text_length: int = 10000,
        timeout_ms: Optional[int] = 30000,
        name: str = "ExtractorAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Extracts structured data from unstructured resume and job description text",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.completion = completion
        self.documents = documents or DocumentTextExtractor()
        self.max_text_length = max_text_length

    async def execute(self, input: Any) -> Any:
        source = validate_input(self.descriptor, ExtractionInput, input)

        if isinstance(source, FileSource):
            source = await self._to_text(source)

        self._check_length("Resume text", source.resume_text)
        self._check_length("Job description text", source.job_description_text)

        prompt = render_context(
            {
                "Resume": source.resume_text,
                "Job Description": source.job_description_text,
            }
        )
        extracted = await request_report(
            self.completion, self.descriptor, EXTRACTOR_PROMPT, prompt, ExtractedDocuments
        )
        logger.info(
            f"[{self.descriptor.name}] Extracted {len(extracted.resume.experience)} experience entries "
            f"and {len(extracted.resume.skills)} skills"
        )
        return to_handoff(extracted)

    async def _to_text(self, source: FileSource) -> TextSource:
        try:
            resume_text = await self.documents.extract(source.resume_data, source.resume_filename)
            job_text = await self.documents.extract(
                source.job_description_data, source.job_description_filename
            )
        except DocumentFormatError as e:
            raise AgentExecutionError(str(e), self.descriptor.name, error_type=type(e).__name__) from e
        return validate_input(
            self.descriptor,
            TextSource,
            {"kind": "text", "resume_text": resume_text, "job_description_text": job_text},
        )

    def _check_length(self, label: str, text: str) -> None:
        if len(text) > self.max_text_length:
            raise AgentExecutionError(
                f"{label} exceeds maximum length of {self.max_text_length} characters",
                self.descriptor.name,
            )
