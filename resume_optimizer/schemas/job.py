"""Structured job description shape."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from .resume import NonEmptyStr

Seniority = Literal["junior", "mid", "senior", "lead"]


class JobDescription(BaseModel):
    title: NonEmptyStr
    required_skills: List[NonEmptyStr] = Field(default_factory=list)
    preferred_skills: List[NonEmptyStr] = Field(default_factory=list)
    seniority: Seniority
    responsibilities: List[NonEmptyStr] = Field(default_factory=list)
    keywords: List[NonEmptyStr] = Field(default_factory=list)
