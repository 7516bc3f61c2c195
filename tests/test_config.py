from hivelang.runtime.config import (
    DEFAULT_MAX_PARALLEL_TASKS,
    DEFAULT_TOOL_TIMEOUT_SECONDS,
    RuntimeConfig,
    load_runtime_config,
    normalize_logging_level,
)
from hivelang.runtime.interpreter import Interpreter


def test_defaults_without_environment():
    cfg = load_runtime_config({})
    assert cfg.tool_timeout_seconds == DEFAULT_TOOL_TIMEOUT_SECONDS
    assert cfg.max_parallel_tasks == DEFAULT_MAX_PARALLEL_TASKS
    assert cfg.tool_logging == "info"
    assert cfg.redact_tool_args is True
    assert cfg.parallel_concurrency is False


def test_values_read_from_environment(monkeypatch):
    monkeypatch.setenv("HIVE_TOOL_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("HIVE_MAX_PARALLEL_TASKS", "7")
    monkeypatch.setenv("HIVE_TOOL_LOGGING", "DEBUG")
    monkeypatch.setenv("HIVE_LOG_REDACT_ARGS", "false")
    monkeypatch.setenv("HIVE_PARALLEL_CONCURRENCY", "on")
    cfg = load_runtime_config()
    assert cfg.tool_timeout_seconds == 2.5
    assert cfg.max_parallel_tasks == 7
    assert cfg.tool_logging == "debug"
    assert cfg.redact_tool_args is False
    assert cfg.parallel_concurrency is True


def test_malformed_values_fall_back_to_defaults():
    cfg = load_runtime_config(
        {
            "HIVE_TOOL_TIMEOUT_SECONDS": "soon",
            "HIVE_MAX_PARALLEL_TASKS": "-3",
            "HIVE_TOOL_LOGGING": "verbose",
        }
    )
    assert cfg.tool_timeout_seconds == DEFAULT_TOOL_TIMEOUT_SECONDS
    assert cfg.max_parallel_tasks == DEFAULT_MAX_PARALLEL_TASKS
    assert cfg.tool_logging == "info"


def test_zero_timeout_disables_deadline():
    assert RuntimeConfig(tool_timeout_seconds=0).tool_deadline is None
    assert RuntimeConfig(tool_timeout_seconds=3).tool_deadline == 3


def test_normalize_logging_level():
    assert normalize_logging_level(" Quiet ") == "quiet"
    assert normalize_logging_level(None) == "info"


def test_interpreter_reads_environment_by_default(monkeypatch):
    monkeypatch.setenv("HIVE_MAX_PARALLEL_TASKS", "2")
    assert Interpreter().config.max_parallel_tasks == 2


def test_explicit_config_overrides_environment(monkeypatch):
    monkeypatch.setenv("HIVE_MAX_PARALLEL_TASKS", "2")
    assert Interpreter(config=RuntimeConfig(max_parallel_tasks=9)).config.max_parallel_tasks == 9
