"""
Resume Optimizer - a sequential multi-agent pipeline for resume review.

Agents validate their input and output against declared shapes; the
orchestrator runs them in order, each under a timeout, and reports a
structured trace instead of raising.
"""

from .errors import (
    AgentExecutionError,
    AgentValidationError,
    ConfigurationError,
    ErrorInfo,
    ErrorKind,
    PipelineCancelledError,
    PipelineError,
    StageTimeoutError,
)
from .pipeline import (
    DEFAULT_TIMEOUT_MS,
    CancellationToken,
    PipelineConfig,
    PipelineOrchestrator,
    PipelineResult,
    StageResult,
)
from .validation import SchemaViolation, ValidationIssue, validate

__version__ = "1.0.0"

__all__ = [
    "AgentExecutionError",
    "AgentValidationError",
    "CancellationToken",
    "ConfigurationError",
    "DEFAULT_TIMEOUT_MS",
    "ErrorInfo",
    "ErrorKind",
    "PipelineCancelledError",
    "PipelineConfig",
    "PipelineError",
    "PipelineOrchestrator",
    "PipelineResult",
    "SchemaViolation",
    "StageResult",
    "StageTimeoutError",
    "ValidationIssue",
    "validate",
]
