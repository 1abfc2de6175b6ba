"""Structured resume shape."""

from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
YearMonth = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}$")]


class Experience(BaseModel):
    company: NonEmptyStr
    role: NonEmptyStr
    start_date: YearMonth
    end_date: Union[YearMonth, Literal["present"]]
    bullets: List[NonEmptyStr] = Field(default_factory=list)


class Resume(BaseModel):
    summary: NonEmptyStr
    experience: List[Experience] = Field(min_length=1)
    skills: List[NonEmptyStr] = Field(default_factory=list)
    education: List[NonEmptyStr] = Field(default_factory=list)
    certifications: List[NonEmptyStr] = Field(default_factory=list)
