"""Factory for the standard resume optimization pipeline."""

from __future__ import annotations

import logging
from typing import List, Optional

from .agents import (
    Agent,
    ApprovalAgent,
    ContentStrengthAgent,
    ExtractorAgent,
    InterviewCoachAgent,
    JobAlignmentAgent,
    ResumeCriticAgent,
)
from .agents.approval import Approver
from .config import AppConfig
from .documents import DocumentTextExtractor
from .pipeline import PipelineOrchestrator
from .providers.service import CompletionClient
from .schemas import CritiquedDocuments

logger = logging.getLogger(__name__)


def build_resume_agents(
    config: AppConfig,
    completion: CompletionClient,
    documents: Optional[DocumentTextExtractor] = None,
    approver: Optional[Approver] = None,
) -> List[Agent]:
    """Create the agents in execution order.

    Order: extractor, critic, [approval], content strength, job alignment,
    interview coach. The approval stage is added only when
    ``pipeline.require_approval`` is set.

    Raises:
        ValueError: if approval is required but no approver was given
    """
    settings = config.agents
    agents: List[Agent] = [
        ExtractorAgent(
            completion,
            documents=documents,
            max_text_length=settings.extractor.max_text_length,
            timeout_ms=settings.extractor.timeout_ms,
        ),
        ResumeCriticAgent(completion, timeout_ms=settings.critic.timeout_ms),
    ]

    if config.pipeline.require_approval:
        if approver is None:
            raise ValueError("pipeline.require_approval is set but no approver was provided")
        agents.append(ApprovalAgent(approver, shape=CritiquedDocuments, timeout_ms=settings.approval.timeout_ms))

    agents.extend(
        [
            ContentStrengthAgent(completion, timeout_ms=settings.content_strength.timeout_ms),
            JobAlignmentAgent(completion, timeout_ms=settings.job_alignment.timeout_ms),
            InterviewCoachAgent(
                completion,
                question_count=settings.interview_coach.question_count,
                timeout_ms=settings.interview_coach.timeout_ms,
            ),
        ]
    )
    return agents


def build_resume_pipeline(
    config: AppConfig,
    completion: CompletionClient,
    documents: Optional[DocumentTextExtractor] = None,
    approver: Optional[Approver] = None,
) -> PipelineOrchestrator:
    agents = build_resume_agents(config, completion, documents=documents, approver=approver)
    pipeline = PipelineOrchestrator(agents, timeout_ms=config.pipeline.timeout_ms)
    logger.debug(f"Built resume pipeline: {[agent.descriptor.name for agent in agents]}")
    return pipeline
