"""Sequential agent pipeline with per-stage timeouts and a structured trace.

A run threads one value through an ordered list of agents: the output of
stage N is the input of stage N+1. Each stage is raced against its timeout
(and an optional cancellation token). The first failure halts the run; the
trace up to and including the failing stage is returned, never raised.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .agents.protocol import Agent
from .errors import (
    AgentExecutionError,
    AgentValidationError,
    ConfigurationError,
    ErrorInfo,
    PipelineCancelledError,
    PipelineError,
    StageTimeoutError,
)
from .observability import PipelineObserver
from .validation import SchemaViolation, ValidationIssue, issues_from_pydantic, validate

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60000
PIPELINE_NAME = "Pipeline"


class PipelineConfig(BaseModel):
    """Ordered agents plus the pipeline-wide default timeout."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    agents: Tuple[Any, ...] = ()
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)


@dataclass(frozen=True)
class StageResult:
    """Outcome of one invoked agent."""

    agent_name: str
    success: bool
    duration_ms: int
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_name": self.agent_name,
            "success": self.success,
            "duration_ms": self.duration_ms,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Final report of a run; ``data`` is set only when every stage succeeded."""

    success: bool
    stages: Tuple[StageResult, ...] = field(default_factory=tuple)
    total_duration_ms: int = 0
    data: Any = None
    error: Optional[ErrorInfo] = None

    @property
    def failed_stage(self) -> Optional[StageResult]:
        if self.success or not self.stages:
            return None
        return self.stages[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error.to_dict() if self.error else None,
            "stages": [stage.to_dict() for stage in self.stages],
            "total_duration_ms": self.total_duration_ms,
        }


class CancellationToken:
    """Caller-held handle that abandons the in-flight stage of a run."""

    def __init__(self) -> None:
        self._cancelled = False
        # created on first wait so the event belongs to the running loop
        self._event: Optional[asyncio.Event] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


def _elapsed_ms(started: float) -> int:
    return max(0, int(round((time.perf_counter() - started) * 1000)))


def _consume_outcome(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()


def _abandon(task: asyncio.Future) -> None:
    """Cancel a stage task we no longer wait for, and swallow its outcome."""
    if task.done():
        _consume_outcome(task)
    else:
        task.cancel()
        task.add_done_callback(_consume_outcome)


async def _invoke(agent: Agent, value: Any) -> Any:
    result = agent.execute(value)
    if inspect.isawaitable(result):
        result = await result
    return result


def wrap_stage_error(exc: BaseException, agent_name: str) -> PipelineError:
    """Map any exception raised by a stage onto the error taxonomy."""
    if isinstance(exc, PipelineError):
        return exc
    if isinstance(exc, SchemaViolation):
        return AgentValidationError("Validation failed", agent_name, exc.issues)
    if isinstance(exc, PydanticValidationError):
        return AgentValidationError("Validation failed", agent_name, issues_from_pydantic(exc))
    message = str(exc) or type(exc).__name__
    return AgentExecutionError(message, agent_name, error_type=type(exc).__name__)


class PipelineOrchestrator:
    """Run a fixed, ordered list of agents over one evolving value.

    Example:
        pipeline = PipelineOrchestrator([extractor, critic, aligner], timeout_ms=60000)
        result = await pipeline.run({"kind": "text", ...})
        if not result.success:
            print(result.error.describe())
    """

    def __init__(self, agents: Iterable[Agent] = (), timeout_ms: Optional[int] = None):
        self.config = self._build_config(tuple(agents), timeout_ms)
        self._agents: Tuple[Agent, ...] = self.config.agents

    @classmethod
    def from_config(cls, config: PipelineConfig) -> PipelineOrchestrator:
        return cls(config.agents, config.timeout_ms)

    @staticmethod
    def _build_config(agents: Tuple[Any, ...], timeout_ms: Optional[int]) -> PipelineConfig:
        fields: Dict[str, Any] = {"agents": agents}
        if timeout_ms is not None:
            fields["timeout_ms"] = timeout_ms
        try:
            config = validate(PipelineConfig, fields)
        except SchemaViolation as exc:
            raise ConfigurationError("Invalid pipeline configuration", PIPELINE_NAME, exc.issues) from exc

        issues: List[ValidationIssue] = []
        for index, agent in enumerate(config.agents):
            descriptor = getattr(agent, "descriptor", None)
            if not isinstance(getattr(descriptor, "name", None), str) or not descriptor.name:
                issues.append(ValidationIssue(f"agents[{index}].descriptor.name", "agent must expose a named descriptor"))
            if not callable(getattr(agent, "execute", None)):
                issues.append(ValidationIssue(f"agents[{index}].execute", "agent must provide execute()"))
        if issues:
            raise ConfigurationError("Invalid pipeline configuration", PIPELINE_NAME, issues)
        return config

    @property
    def agents(self) -> Tuple[Agent, ...]:
        return self._agents

    def info(self) -> Dict[str, int]:
        return {"agent_count": len(self._agents), "timeout_ms": self.config.timeout_ms}

    def timeout_for(self, agent: Agent) -> int:
        """Agent-level timeout when the descriptor sets one, else the pipeline default."""
        agent_timeout = getattr(agent.descriptor, "timeout_ms", None)
        return agent_timeout if agent_timeout else self.config.timeout_ms

    async def run(
        self,
        initial_input: Any,
        *,
        cancel_token: Optional[CancellationToken] = None,
        observer: Optional[PipelineObserver] = None,
    ) -> PipelineResult:
        """Execute every stage in order and report the trace.

        Args:
            initial_input: Input of the first stage
            cancel_token: Optional handle to abandon the run from outside
            observer: Optional per-run event collector

        Returns:
            PipelineResult; failures are reported in it, not raised
        """
        run_started = time.perf_counter()
        stages: List[StageResult] = []
        current = initial_input

        for index, agent in enumerate(self._agents):
            agent_name = agent.descriptor.name
            timeout_ms = self.timeout_for(agent)
            stage_started = time.perf_counter()
            if observer:
                observer.log_stage_start(index, agent_name, timeout_ms)
            logger.debug(f"Executing {agent_name} (stage {index + 1}/{len(self._agents)})")

            try:
                output = await self._run_stage(agent, current, timeout_ms, cancel_token)
            except Exception as exc:
                duration_ms = _elapsed_ms(stage_started)
                error = wrap_stage_error(exc, agent_name).to_info()
                stages.append(StageResult(agent_name=agent_name, success=False, duration_ms=duration_ms, error=error))
                logger.warning(f"Agent {agent_name} failed: {error.message}")
                if observer:
                    observer.log_stage_end(index, agent_name, duration_ms, success=False)
                    observer.log_error(error)
                return self._finish(
                    PipelineResult(
                        success=False,
                        stages=tuple(stages),
                        total_duration_ms=_elapsed_ms(run_started),
                        error=error,
                    ),
                    observer,
                )

            duration_ms = _elapsed_ms(stage_started)
            stages.append(StageResult(agent_name=agent_name, success=True, duration_ms=duration_ms))
            if observer:
                observer.log_stage_end(index, agent_name, duration_ms, success=True)
            current = output

        return self._finish(
            PipelineResult(
                success=True,
                stages=tuple(stages),
                total_duration_ms=_elapsed_ms(run_started),
                data=current,
            ),
            observer,
        )

    @staticmethod
    def _finish(result: PipelineResult, observer: Optional[PipelineObserver]) -> PipelineResult:
        if observer:
            observer.log_run_end(result)
        return result

    async def _run_stage(
        self,
        agent: Agent,
        value: Any,
        timeout_ms: int,
        cancel_token: Optional[CancellationToken],
    ) -> Any:
        agent_name = agent.descriptor.name
        if cancel_token is not None and cancel_token.cancelled:
            raise PipelineCancelledError(agent_name)

        loop = asyncio.get_running_loop()
        timeout_s = timeout_ms / 1000
        deadline = loop.time() + timeout_s
        task = asyncio.ensure_future(_invoke(agent, value))
        waiters = {task}
        cancel_waiter: Optional[asyncio.Future] = None
        if cancel_token is not None:
            cancel_waiter = asyncio.ensure_future(cancel_token.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout_s, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            _abandon(task)
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        # timeout wins an exact tie with a settled agent
        timed_out = loop.time() >= deadline
        if task in done and not timed_out:
            if task.cancelled():
                raise AgentExecutionError("Agent execution was cancelled internally", agent_name)
            return task.result()

        _abandon(task)
        if cancel_waiter is not None and cancel_waiter in done and not timed_out:
            raise PipelineCancelledError(agent_name)
        raise StageTimeoutError(agent_name, timeout_ms)
