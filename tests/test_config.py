"""Tests for configuration loading."""

import pytest
import yaml

from resume_optimizer.config import (
    AppConfig,
    apply_env_overrides,
    load_config,
    load_raw_config,
    parse_config,
)
from resume_optimizer.errors import ConfigurationError


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestLoadRawConfig:
    """Tests for load_raw_config()."""

    def test_missing_files_yield_empty_mapping(self, tmp_path):
        assert load_raw_config(base_dir=tmp_path) == {}

    def test_local_file_is_deep_merged(self, tmp_path):
        _write(tmp_path / "config" / "config.yaml", {"llm": {"provider": "gemini", "model": "gemini-2.5-flash"}})
        _write(tmp_path / "config" / "config.local.yaml", {"llm": {"api_key": "secret"}})

        raw = load_raw_config(base_dir=tmp_path)

        assert raw["llm"] == {"provider": "gemini", "model": "gemini-2.5-flash", "api_key": "secret"}

    def test_explicit_path_is_loaded_as_is(self, tmp_path):
        _write(tmp_path / "config" / "config.local.yaml", {"pipeline": {"timeout_ms": 1}})
        _write(tmp_path / "custom.yaml", {"pipeline": {"timeout_ms": 2500}})

        raw = load_raw_config("custom.yaml", base_dir=tmp_path)

        assert raw == {"pipeline": {"timeout_ms": 2500}}

    def test_explicit_missing_path_fails(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_raw_config("nope.yaml", base_dir=tmp_path)
        assert exc_info.value.agent_name == "config"

    def test_non_mapping_file_fails(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_raw_config(str(path))


class TestEnvOverrides:
    """Tests for apply_env_overrides()."""

    def test_overrides_are_applied(self):
        raw = {"llm": {"provider": "gemini", "model": "gemini-2.5-flash"}}
        environ = {
            "RESUME_OPTIMIZER_LLM_PROVIDER": "deepseek",
            "RESUME_OPTIMIZER_PIPELINE_TIMEOUT_MS": "9000",
            "RESUME_OPTIMIZER_LOG_LEVEL": "DEBUG",
            "RESUME_OPTIMIZER_DEBUG": "true",
        }

        merged = apply_env_overrides(raw, environ)

        assert merged["llm"] == {"provider": "deepseek", "model": "gemini-2.5-flash"}
        assert merged["pipeline"]["timeout_ms"] == 9000
        assert merged["logging"]["level"] == "debug"
        assert merged["app"]["debug"] is True
        assert raw["llm"]["provider"] == "gemini"

    def test_unparsable_integer_is_ignored(self):
        merged = apply_env_overrides({}, {"RESUME_OPTIMIZER_PIPELINE_TIMEOUT_MS": "soon"})
        assert "pipeline" not in merged

    def test_unrelated_variables_are_ignored(self):
        assert apply_env_overrides({}, {"PATH": "/usr/bin", "LOG_LEVEL": "debug"}) == {}


class TestLoadConfig:
    """Tests for load_config() / parse_config()."""

    def test_defaults(self, tmp_path):
        config = load_config(environ={}, base_dir=tmp_path)

        assert isinstance(config, AppConfig)
        assert config.pipeline.timeout_ms == 60000
        assert config.pipeline.require_approval is False
        assert config.agents.extractor.max_text_length == 10000
        assert config.agents.interview_coach.question_count == 5
        assert config.agents.approval.timeout_ms == 600000
        assert config.llm.provider == "gemini"

    def test_yaml_and_env_combine(self, tmp_path):
        _write(tmp_path / "config" / "config.yaml", {"agents": {"critic": {"timeout_ms": 20000}}})

        config = load_config(environ={"RESUME_OPTIMIZER_LLM_MODEL": "gpt-4o-mini"}, base_dir=tmp_path)

        assert config.agents.critic.timeout_ms == 20000
        assert config.agents.job_alignment.timeout_ms == 45000
        assert config.llm.model == "gpt-4o-mini"

    def test_invalid_values_report_every_path(self):
        raw = {"pipeline": {"timeout_ms": 0}, "logging": {"level": "verbose"}}
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config(raw)

        paths = {issue.path for issue in exc_info.value.issues}
        assert paths == {"pipeline.timeout_ms", "logging.level"}

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"pipeline": {"timeout": 100}})
        assert exc_info.value.issues[0].path == "pipeline.timeout"

    def test_config_is_frozen_but_copyable(self):
        config = parse_config({})
        variant = config.model_copy(
            update={"pipeline": config.pipeline.model_copy(update={"require_approval": True})}
        )
        assert variant.pipeline.require_approval is True
        assert config.pipeline.require_approval is False
