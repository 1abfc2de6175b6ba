"""Reports produced by the review agents."""

from __future__ import annotations

from typing import Annotated, List, Literal

from pydantic import BaseModel, Field

from .resume import NonEmptyStr

Score = Annotated[float, Field(ge=0, le=100)]
Severity = Literal["low", "medium", "high"]


class CritiqueIssue(BaseModel):
    section: NonEmptyStr
    severity: Severity = "medium"
    message: NonEmptyStr


class CritiqueReport(BaseModel):
    """Structure, readability and ATS compatibility of the resume."""

    structure_score: Score
    ats_compatibility: Score
    readability: str = ""
    strengths: List[NonEmptyStr] = Field(default_factory=list)
    issues: List[CritiqueIssue] = Field(default_factory=list)
    formatting_recommendations: List[NonEmptyStr] = Field(default_factory=list)


class BulletRewrite(BaseModel):
    original: NonEmptyStr
    suggestion: NonEmptyStr
    reason: str = ""


class ContentAnalysisReport(BaseModel):
    """Strength of the resume content itself."""

    quantified_impact_score: Score
    strengths: List[NonEmptyStr] = Field(default_factory=list)
    gaps: List[NonEmptyStr] = Field(default_factory=list)
    skill_improvements: List[NonEmptyStr] = Field(default_factory=list)
    bullet_rewrites: List[BulletRewrite] = Field(default_factory=list)


class AlignmentReport(BaseModel):
    """Fit between the resume and the target job."""

    overall_fit: Score
    skill_coverage: Score
    seniority_alignment: Score
    keyword_alignment: Score
    matching_keywords: List[NonEmptyStr] = Field(default_factory=list)
    missing_keywords: List[NonEmptyStr] = Field(default_factory=list)
    role_fit_analysis: str = ""
    recommendations: List[NonEmptyStr] = Field(default_factory=list)


class InterviewQuestion(BaseModel):
    question: NonEmptyStr
    focus: NonEmptyStr
    suggested_answer: str = ""


class InterviewPrep(BaseModel):
    """Likely interview questions, weighted towards alignment gaps."""

    questions: List[InterviewQuestion] = Field(min_length=1)
    talking_points: List[NonEmptyStr] = Field(default_factory=list)
