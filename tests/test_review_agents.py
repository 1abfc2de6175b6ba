"""Tests for the review agents and the full resume pipeline."""

import pytest

from resume_optimizer.agents import (
    ApprovalAgent,
    ApprovalDecision,
    ContentStrengthAgent,
    InterviewCoachAgent,
    JobAlignmentAgent,
    ResumeCriticAgent,
)
from resume_optimizer.config import parse_config
from resume_optimizer.errors import AgentExecutionError, AgentValidationError, ErrorKind
from resume_optimizer.factory import build_resume_pipeline
from resume_optimizer.observability import PipelineObserver
from resume_optimizer.schemas import CoachedDocuments, CritiquedDocuments


def _stage_replies(payloads):
    return [
        payloads["extracted"],
        payloads["critique"],
        payloads["content_analysis"],
        payloads["alignment"],
        payloads["interview_prep"],
    ]


class TestReviewAgents:
    @pytest.mark.asyncio
    async def test_critic_adds_critique(self, make_completion, payloads):
        completion = make_completion([payloads["critique"]])
        result = await ResumeCriticAgent(completion).execute(payloads["extracted"])

        assert result["critique"]["structure_score"] == 82
        assert result["resume"] == payloads["extracted"]["resume"] | {"certifications": []}

    @pytest.mark.asyncio
    async def test_critic_rejects_out_of_range_score(self, make_completion, payloads):
        payloads["critique"]["structure_score"] = 140
        with pytest.raises(AgentValidationError) as exc_info:
            await ResumeCriticAgent(make_completion([payloads["critique"]])).execute(payloads["extracted"])
        assert exc_info.value.paths == ("structure_score",)

    @pytest.mark.asyncio
    async def test_content_strength_requires_critique(self, make_completion, payloads):
        completion = make_completion([payloads["content_analysis"]])
        with pytest.raises(AgentValidationError) as exc_info:
            await ContentStrengthAgent(completion).execute(payloads["extracted"])

        assert exc_info.value.paths == ("critique",)
        assert completion.calls == []

    @pytest.mark.asyncio
    async def test_alignment_carries_earlier_reports(self, make_completion, payloads):
        analyzed = {
            **payloads["extracted"],
            "critique": payloads["critique"],
            "content_analysis": payloads["content_analysis"],
        }
        result = await JobAlignmentAgent(make_completion([payloads["alignment"]])).execute(analyzed)

        assert result["alignment"]["missing_keywords"] == ["aws"]
        assert result["content_analysis"]["quantified_impact_score"] == 55
        assert result["critique"]["ats_compatibility"] == 74

    @pytest.mark.asyncio
    async def test_interview_coach_limits_question_count(self, make_completion, payloads):
        aligned = {
            **payloads["extracted"],
            "critique": payloads["critique"],
            "content_analysis": payloads["content_analysis"],
            "alignment": payloads["alignment"],
        }
        completion = make_completion([payloads["interview_prep"]])

        result = await InterviewCoachAgent(completion, question_count=3).execute(aligned)

        assert [q["question"] for q in result["interview_prep"]["questions"]] == [
            "Question 1",
            "Question 2",
            "Question 3",
        ]
        assert "Prepare exactly 3 questions." in completion.calls[0]["prompt"]


class TestApprovalAgent:
    @pytest.mark.asyncio
    async def test_approved_value_passes_through(self):
        seen = []
        agent = ApprovalAgent(lambda value: seen.append(value) or True)

        assert await agent.execute({"draft": 1}) == {"draft": 1}
        assert seen == [{"draft": 1}]

    @pytest.mark.asyncio
    async def test_async_rejection_with_comment(self):
        async def reviewer(value):
            return ApprovalDecision(approved=False, comment="too generic")

        with pytest.raises(AgentExecutionError) as exc_info:
            await ApprovalAgent(reviewer).execute({})

        assert str(exc_info.value) == "[ApprovalAgent] Rejected by reviewer: too generic"

    @pytest.mark.asyncio
    async def test_shape_is_checked_before_asking(self, payloads):
        asked = []
        agent = ApprovalAgent(lambda value: asked.append(value) or True, shape=CritiquedDocuments)

        with pytest.raises(AgentValidationError):
            await agent.execute(payloads["extracted"])
        assert asked == []


class TestResumePipeline:
    @pytest.mark.asyncio
    async def test_full_run(self, make_completion, payloads, text_source):
        config = parse_config({"agents": {"interview_coach": {"question_count": 4}}})
        completion = make_completion(_stage_replies(payloads))
        observer = PipelineObserver()

        result = await build_resume_pipeline(config, completion).run(text_source, observer=observer)

        assert result.success is True, result.error
        assert [stage.agent_name for stage in result.stages] == [
            "ExtractorAgent",
            "ResumeCriticAgent",
            "ContentStrengthAgent",
            "JobAlignmentAgent",
            "InterviewCoachAgent",
        ]
        final = CoachedDocuments.model_validate(result.data)
        assert len(final.interview_prep.questions) == 4
        assert final.alignment.overall_fit == 68
        assert len(completion.calls) == 5
        assert observer.get_run_stats()["stages_run"] == 5

    @pytest.mark.asyncio
    async def test_invalid_model_reply_halts_pipeline(self, make_completion, payloads, text_source):
        del payloads["alignment"]["overall_fit"]
        completion = make_completion(_stage_replies(payloads))

        result = await build_resume_pipeline(parse_config({}), completion).run(text_source)

        assert result.success is False
        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.agent_name == "JobAlignmentAgent"
        assert [issue.path for issue in result.error.validation_errors] == ["overall_fit"]
        assert len(result.stages) == 4
        assert len(completion.calls) == 4

    @pytest.mark.asyncio
    async def test_rejected_approval_stops_before_analysis(self, make_completion, payloads, text_source):
        config = parse_config({"pipeline": {"require_approval": True}})
        completion = make_completion(_stage_replies(payloads))
        pipeline = build_resume_pipeline(
            config, completion, approver=lambda value: ApprovalDecision(False, "fix the summary first")
        )

        result = await pipeline.run(text_source)

        assert result.success is False
        assert result.error.agent_name == "ApprovalAgent"
        assert result.error.kind == ErrorKind.EXECUTION
        assert result.error.message == "Rejected by reviewer: fix the summary first"
        assert len(completion.calls) == 2
