"""Shapes validated at the agent boundaries."""

from .job import JobDescription, Seniority
from .reports import (
    AlignmentReport,
    BulletRewrite,
    ContentAnalysisReport,
    CritiqueIssue,
    CritiqueReport,
    InterviewPrep,
    InterviewQuestion,
)
from .resume import Experience, Resume
from .stages import (
    AlignedDocuments,
    AnalyzedDocuments,
    CoachedDocuments,
    CritiquedDocuments,
    ExtractedDocuments,
    ExtractionInput,
    FileSource,
    TextSource,
)

__all__ = [
    "AlignedDocuments",
    "AlignmentReport",
    "AnalyzedDocuments",
    "BulletRewrite",
    "CoachedDocuments",
    "ContentAnalysisReport",
    "CritiqueIssue",
    "CritiqueReport",
    "CritiquedDocuments",
    "Experience",
    "ExtractedDocuments",
    "ExtractionInput",
    "FileSource",
    "InterviewPrep",
    "InterviewQuestion",
    "JobDescription",
    "Resume",
    "Seniority",
    "TextSource",
]
