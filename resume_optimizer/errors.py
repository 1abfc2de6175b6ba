"""Error taxonomy for agents and the pipeline orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from .validation import ValidationIssue


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    EXECUTION = "execution"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ErrorInfo:
    """Structured, caller-facing description of a stage failure.

    Attributes:
        kind: Taxonomy tag
        agent_name: Agent the failure is attributed to
        message: Human-readable message without the agent prefix
        validation_errors: Path-level violations (validation kind only)
        timeout_ms: Timeout that was exceeded (timeout kind only)
        error_type: Class name of the exception originally raised
    """

    kind: ErrorKind
    agent_name: str
    message: str
    validation_errors: Tuple[ValidationIssue, ...] = ()
    timeout_ms: Optional[int] = None
    error_type: Optional[str] = None

    def describe(self) -> str:
        return f"[{self.agent_name}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "agent_name": self.agent_name,
            "message": self.message,
            "display": self.describe(),
            "validation_errors": [issue.to_dict() for issue in self.validation_errors],
            "timeout_ms": self.timeout_ms,
            "error_type": self.error_type,
        }


class PipelineError(Exception):
    """Base class for every error the pipeline reports.

    Renders as ``[agent_name] message``.
    """

    kind = ErrorKind.EXECUTION

    def __init__(self, message: str, agent_name: str, error_type: Optional[str] = None):
        self.agent_name = agent_name
        self.detail = message
        self.error_type = error_type or type(self).__name__
        super().__init__(f"[{agent_name}] {message}")

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            agent_name=self.agent_name,
            message=self.detail,
            error_type=self.error_type,
        )


class ConfigurationError(PipelineError):
    """A descriptor or config failed validation at construction time."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, agent_name: str, issues: Sequence[ValidationIssue] = ()):
        self.issues: Tuple[ValidationIssue, ...] = tuple(issues)
        super().__init__(message, agent_name)

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            agent_name=self.agent_name,
            message=self.detail,
            validation_errors=self.issues,
            error_type=self.error_type,
        )


class AgentValidationError(PipelineError):
    """Input or output of a stage did not conform to its declared shape."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, agent_name: str, issues: Sequence[ValidationIssue]):
        self.issues: Tuple[ValidationIssue, ...] = tuple(issues)
        super().__init__(message, agent_name)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(issue.path for issue in self.issues)

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            agent_name=self.agent_name,
            message=self.detail,
            validation_errors=self.issues,
            error_type=self.error_type,
        )


class AgentExecutionError(PipelineError):
    """Agent logic failed for a reason unrelated to schema conformance."""

    kind = ErrorKind.EXECUTION


class StageTimeoutError(PipelineError):
    """A stage did not settle within its allotted time."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, agent_name: str, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Execution timed out after {timeout_ms}ms", agent_name)

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            agent_name=self.agent_name,
            message=self.detail,
            timeout_ms=self.timeout_ms,
            error_type=self.error_type,
        )


class PipelineCancelledError(PipelineError):
    """The run was cancelled by its caller while a stage was in flight."""

    kind = ErrorKind.CANCELLED

    def __init__(self, agent_name: str):
        super().__init__("Execution cancelled by caller", agent_name)
