"""Values handed from one stage of the resume pipeline to the next.

Each shape extends the previous one, so the output of stage N validates as
the input of stage N+1 and earlier reports travel along unchanged.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .job import JobDescription
from .reports import AlignmentReport, ContentAnalysisReport, CritiqueReport, InterviewPrep
from .resume import NonEmptyStr, Resume


class TextSource(BaseModel):
    """Resume and job description already available as text."""

    kind: Literal["text"] = "text"
    resume_text: NonEmptyStr
    job_description_text: NonEmptyStr


class FileSource(BaseModel):
    """Resume and job description as uploaded documents."""

    kind: Literal["file"] = "file"
    resume_data: bytes = Field(min_length=1)
    resume_filename: NonEmptyStr
    job_description_data: bytes = Field(min_length=1)
    job_description_filename: NonEmptyStr


ExtractionInput = Annotated[Union[TextSource, FileSource], Field(discriminator="kind")]


class ExtractedDocuments(BaseModel):
    resume: Resume
    job_description: JobDescription


class CritiquedDocuments(ExtractedDocuments):
    critique: CritiqueReport


class AnalyzedDocuments(CritiquedDocuments):
    content_analysis: ContentAnalysisReport


class AlignedDocuments(AnalyzedDocuments):
    alignment: AlignmentReport


class CoachedDocuments(AlignedDocuments):
    interview_prep: InterviewPrep
