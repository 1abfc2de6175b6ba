"""Tests for logging setup and the pipeline observer."""

import json
import logging

from resume_optimizer.config import LoggingConfig
from resume_optimizer.errors import StageTimeoutError
from resume_optimizer.observability import LOGGER_NAME, JsonLineFormatter, PipelineObserver, configure_logging


class TestConfigureLogging:
    def test_file_handler_writes_json_lines(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = configure_logging(
            LoggingConfig(level="debug", format="json", enable_console=False, file_path=str(log_file))
        )

        logging.getLogger(f"{LOGGER_NAME}.pipeline").info("stage finished")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "stage finished"
        assert entry["level"] == "info"
        assert entry["logger"] == f"{LOGGER_NAME}.pipeline"

    def test_reconfiguring_replaces_handlers(self):
        configure_logging(LoggingConfig(enable_console=True))
        logger = configure_logging(LoggingConfig(enable_console=True, level="warning"))

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING


def test_json_formatter_includes_agent():
    record = logging.LogRecord("resume_optimizer", logging.ERROR, __file__, 1, "failed", None, None)
    record.agent = "ResumeCriticAgent"

    entry = json.loads(JsonLineFormatter().format(record))

    assert entry["agent"] == "ResumeCriticAgent"
    assert entry["level"] == "error"


class TestPipelineObserver:
    def test_stats_aggregate_events(self):
        observer = PipelineObserver(run_id="abc")
        observer.log_stage_start(0, "ExtractorAgent", 30000)
        observer.log_llm_request("gemini-2.5-flash", 120.0, tokens=300)
        observer.log_llm_request("gemini-2.5-flash", 80.0)
        observer.log_stage_end(0, "ExtractorAgent", 210, success=True)
        observer.log_stage_start(1, "ResumeCriticAgent", 45000)
        observer.log_stage_end(1, "ResumeCriticAgent", 45000, success=False)
        observer.log_error(StageTimeoutError("ResumeCriticAgent", 45000).to_info())

        stats = observer.get_run_stats()

        assert stats["stages_run"] == 2
        assert stats["stages_failed"] == 1
        assert stats["stage_duration_ms"] == 45210
        assert stats["llm_requests"] == 2
        assert stats["total_tokens"] == 300
        assert stats["errors"] == 1
        assert observer.events[-1].data["kind"] == "timeout"

    def test_clear(self):
        observer = PipelineObserver()
        observer.log_stage_start(0, "ExtractorAgent", 100)
        observer.clear()
        assert observer.get_run_stats()["event_count"] == 0

    def test_print_run_summary(self, capsys):
        observer = PipelineObserver()
        observer.log_llm_request("gpt-4o-mini", 10.0, tokens=1500)
        observer.print_run_summary()

        out = capsys.readouterr().out
        assert "RUN SUMMARY" in out
        assert "1,500" in out
