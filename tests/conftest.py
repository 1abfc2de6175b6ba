"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List

import pytest

from resume_optimizer.observability import LOGGER_NAME

EXTRACTED = {
    "resume": {
        "summary": "Backend engineer with six years of Python experience",
        "experience": [
            {
                "company": "Acme Corp",
                "role": "Software Engineer",
                "start_date": "2019-03",
                "end_date": "present",
                "bullets": ["Built REST APIs", "Migrated services to Kubernetes"],
            }
        ],
        "skills": ["Python", "PostgreSQL", "Docker"],
        "education": ["BSc Computer Science"],
    },
    "job_description": {
        "title": "Senior Backend Engineer",
        "required_skills": ["Python", "AWS"],
        "preferred_skills": ["Terraform"],
        "seniority": "senior",
        "responsibilities": ["Own the payments API"],
        "keywords": ["python", "aws", "microservices"],
    },
}

CRITIQUE = {
    "structure_score": 82,
    "ats_compatibility": 74,
    "readability": "Clear, but the summary is generic",
    "strengths": ["Consistent dates"],
    "issues": [{"section": "summary", "severity": "low", "message": "Summary lacks a target role"}],
    "formatting_recommendations": ["Use a single-column layout"],
}

CONTENT_ANALYSIS = {
    "quantified_impact_score": 55,
    "strengths": ["Relevant stack"],
    "gaps": ["No measurable outcomes"],
    "skill_improvements": ["Mention AWS exposure"],
    "bullet_rewrites": [
        {
            "original": "Built REST APIs",
            "suggestion": "Built 12 REST APIs serving 2M requests per day",
            "reason": "Quantifies scale",
        }
    ],
}

ALIGNMENT = {
    "overall_fit": 68,
    "skill_coverage": 70,
    "seniority_alignment": 60,
    "keyword_alignment": 66,
    "matching_keywords": ["python", "microservices"],
    "missing_keywords": ["aws"],
    "role_fit_analysis": "Strong backend profile, limited cloud ownership",
    "recommendations": ["Highlight any AWS work"],
}

INTERVIEW_PREP = {
    "questions": [
        {"question": f"Question {i}", "focus": "aws", "suggested_answer": "Use a STAR story"}
        for i in range(1, 8)
    ],
    "talking_points": ["Kubernetes migration"],
}


class FakeCompletion:
    """Completion client returning queued payloads in order.

    A queued exception is raised instead of returned.
    """

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, str]] = []

    async def complete(self, prompt: str, system_prompt: str = "") -> str:
        return str(await self.complete_json(prompt, system_prompt=system_prompt))

    async def complete_json(self, prompt: str, system_prompt: str = "") -> Any:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        if not self.responses:
            raise AssertionError("FakeCompletion ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear local runtime env that can leak into tests on developer machines."""
    for key in (
        "RESUME_OPTIMIZER_ENV",
        "RESUME_OPTIMIZER_DEBUG",
        "RESUME_OPTIMIZER_PIPELINE_TIMEOUT_MS",
        "RESUME_OPTIMIZER_LOG_LEVEL",
        "RESUME_OPTIMIZER_LOG_FORMAT",
        "RESUME_OPTIMIZER_LOG_FILE",
        "RESUME_OPTIMIZER_LLM_PROVIDER",
        "RESUME_OPTIMIZER_LLM_MODEL",
        "RESUME_OPTIMIZER_API_KEY",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "DEEPSEEK_API_KEY",
        "KIMI_API_KEY",
        "GLM_API_KEY",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo handlers installed by configure_logging() during a test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def payloads() -> Dict[str, Any]:
    """Model replies for each review stage, deep-copied per test."""
    return copy.deepcopy(
        {
            "extracted": EXTRACTED,
            "critique": CRITIQUE,
            "content_analysis": CONTENT_ANALYSIS,
            "alignment": ALIGNMENT,
            "interview_prep": INTERVIEW_PREP,
        }
    )


@pytest.fixture
def make_completion():
    return FakeCompletion


@pytest.fixture
def text_source() -> Dict[str, str]:
    return {
        "kind": "text",
        "resume_text": "Jane Smith\nSoftware Engineer at Acme Corp since 2019-03\nPython, PostgreSQL, Docker",
        "job_description_text": "Senior Backend Engineer\nRequired: Python, AWS",
    }
