"""Observability for pipeline runs - logging setup, events and run stats."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .config import LoggingConfig
    from .errors import ErrorInfo
    from .pipeline import PipelineResult

LOGGER_NAME = "resume_optimizer"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        agent = getattr(record, "agent", None)
        if agent:
            entry["agent"] = agent
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Install handlers on the package logger according to ``config``.

    Replaces handlers installed by a previous call so reconfiguration is safe.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.format == "json":
        formatter: logging.Formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    if config.enable_console:
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.max_files,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(config.level.upper())
    logger.propagate = False
    return logger


@dataclass
class PipelineEvent:
    """A single event recorded during a run."""

    timestamp: datetime
    event_type: str  # "stage_start", "stage_end", "error", "llm_request", "run_end"
    data: Dict[str, Any]
    agent_name: Optional[str] = None
    duration_ms: Optional[float] = None
    tokens_used: Optional[int] = None


class PipelineObserver:
    """
    Collects events for one pipeline run and mirrors them to the log.

    Give each run its own observer; events are appended without locking.
    """

    def __init__(self, run_id: Optional[str] = None, verbose: bool = False):
        self.events: List[PipelineEvent] = []
        self.run_id = run_id
        self.verbose = verbose
        self.logger = logging.getLogger(f"{LOGGER_NAME}.run")

    def _prefix(self, agent_name: Optional[str]) -> str:
        parts = [p for p in (self.run_id, agent_name) if p]
        return "".join(f"[{p}] " for p in parts)

    def _record(self, event_type: str, data: Dict[str, Any], **extra: Any) -> PipelineEvent:
        event = PipelineEvent(timestamp=datetime.now(), event_type=event_type, data=data, **extra)
        self.events.append(event)
        return event

    def log_stage_start(self, index: int, agent_name: str, timeout_ms: int) -> None:
        self._record("stage_start", {"index": index, "timeout_ms": timeout_ms}, agent_name=agent_name)
        level = logging.INFO if self.verbose else logging.DEBUG
        self.logger.log(level, f"{self._prefix(agent_name)}Stage {index + 1} started (timeout {timeout_ms}ms)")

    def log_stage_end(self, index: int, agent_name: str, duration_ms: int, success: bool) -> None:
        self._record(
            "stage_end",
            {"index": index, "success": success},
            agent_name=agent_name,
            duration_ms=duration_ms,
        )
        status = "completed" if success else "failed"
        self.logger.info(f"{self._prefix(agent_name)}Stage {index + 1} {status} ({duration_ms}ms)")

    def log_error(self, error: ErrorInfo) -> None:
        self._record("error", error.to_dict(), agent_name=error.agent_name)
        self.logger.error(f"{self._prefix(error.agent_name)}{error.kind.value} error: {error.message}")
        for issue in error.validation_errors:
            self.logger.error(f"{self._prefix(error.agent_name)}  {issue.path}: {issue.message}")

    def log_llm_request(
        self,
        model: str,
        duration_ms: float,
        tokens: Optional[int] = None,
        agent_name: Optional[str] = None,
    ) -> None:
        self._record(
            "llm_request",
            {"model": model},
            agent_name=agent_name,
            duration_ms=duration_ms,
            tokens_used=tokens,
        )
        token_text = f" | {tokens} tokens" if tokens is not None else ""
        self.logger.info(f"{self._prefix(agent_name)}LLM: {model}{token_text} | {duration_ms:.2f}ms")

    def log_run_end(self, result: PipelineResult) -> None:
        self._record(
            "run_end",
            {"success": result.success, "stages": len(result.stages)},
            duration_ms=result.total_duration_ms,
        )
        outcome = "succeeded" if result.success else "failed"
        self.logger.info(
            f"{self._prefix(None)}Pipeline {outcome} after {len(result.stages)} stage(s) "
            f"({result.total_duration_ms}ms)"
        )

    def get_run_stats(self) -> Dict[str, Any]:
        """Aggregate the recorded events."""
        stage_ends = [e for e in self.events if e.event_type == "stage_end"]
        llm_requests = [e for e in self.events if e.event_type == "llm_request"]
        errors = [e for e in self.events if e.event_type == "error"]

        return {
            "event_count": len(self.events),
            "stages_run": len(stage_ends),
            "stages_failed": sum(1 for e in stage_ends if not e.data.get("success")),
            "stage_duration_ms": sum(e.duration_ms or 0 for e in stage_ends),
            "llm_requests": len(llm_requests),
            "total_tokens": sum(e.tokens_used or 0 for e in llm_requests),
            "errors": len(errors),
        }

    def print_run_summary(self) -> None:
        stats = self.get_run_stats()

        print("\n" + "=" * 60)
        print("RUN SUMMARY")
        print("=" * 60)
        print(f"Total Events:     {stats['event_count']}")
        print(f"Stages Run:       {stats['stages_run']} ({stats['stages_failed']} failed)")
        print(f"LLM Requests:     {stats['llm_requests']}")
        print(f"Total Tokens:     {stats['total_tokens']:,}")
        print(f"Errors:           {stats['errors']}")
        print(f"Stage Duration:   {stats['stage_duration_ms']:.0f}ms")
        print("=" * 60 + "\n")

    def clear(self) -> None:
        self.events.clear()
