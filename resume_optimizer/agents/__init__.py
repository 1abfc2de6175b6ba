"""Agents for the resume optimization pipeline.

Every agent is an independent class satisfying the ``Agent`` protocol:
a validated ``descriptor`` and an async ``execute(input)``.
"""

from .approval import ApprovalAgent, ApprovalDecision
from .callable_agent import CallableAgent
from .content_strength import ContentStrengthAgent
from .critic import ResumeCriticAgent
from .extractor import ExtractorAgent
from .interview_coach import InterviewCoachAgent
from .job_alignment import JobAlignmentAgent
from .protocol import (
    Agent,
    AgentDescriptor,
    build_descriptor,
    get_descriptor,
    validate_input,
    validate_output,
)

__all__ = [
    "Agent",
    "AgentDescriptor",
    "ApprovalAgent",
    "ApprovalDecision",
    "CallableAgent",
    "ContentStrengthAgent",
    "ExtractorAgent",
    "InterviewCoachAgent",
    "JobAlignmentAgent",
    "ResumeCriticAgent",
    "build_descriptor",
    "get_descriptor",
    "validate_input",
    "validate_output",
]
