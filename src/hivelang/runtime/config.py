"""
Configuration for the interpreter runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping, Optional

DEFAULT_TOOL_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_PARALLEL_TASKS = 4
DEFAULT_TOOL_LOGGING_LEVEL = "info"
TOOL_LOGGING_LEVELS = {"debug", "info", "quiet"}


@dataclass
class RuntimeConfig:
    # 0 (or less) disables the per-call deadline.
    tool_timeout_seconds: float = DEFAULT_TOOL_TIMEOUT_SECONDS
    max_parallel_tasks: int = DEFAULT_MAX_PARALLEL_TASKS
    tool_logging: str = DEFAULT_TOOL_LOGGING_LEVEL
    redact_tool_args: bool = True
    # `parallel` blocks run in order unless this is switched on.
    parallel_concurrency: bool = False

    @property
    def tool_deadline(self) -> Optional[float]:
        if self.tool_timeout_seconds and self.tool_timeout_seconds > 0:
            return self.tool_timeout_seconds
        return None


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(environ: Mapping[str, str], name: str, default: bool = True) -> bool:
    val = environ.get(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def normalize_logging_level(raw: str | None) -> str:
    level = (raw or "").strip().lower()
    if level in TOOL_LOGGING_LEVELS:
        return level
    return DEFAULT_TOOL_LOGGING_LEVEL


def load_runtime_config(env: Optional[Mapping[str, str]] = None) -> RuntimeConfig:
    """
    Build a RuntimeConfig from HIVE_* environment variables, falling back to
    defaults for anything missing or malformed.
    """

    environ = env if env is not None else os.environ
    max_parallel = _env_int(environ, "HIVE_MAX_PARALLEL_TASKS", DEFAULT_MAX_PARALLEL_TASKS)
    return RuntimeConfig(
        tool_timeout_seconds=_env_float(environ, "HIVE_TOOL_TIMEOUT_SECONDS", DEFAULT_TOOL_TIMEOUT_SECONDS),
        max_parallel_tasks=max_parallel if max_parallel > 0 else DEFAULT_MAX_PARALLEL_TASKS,
        tool_logging=normalize_logging_level(environ.get("HIVE_TOOL_LOGGING")),
        redact_tool_args=_env_bool(environ, "HIVE_LOG_REDACT_ARGS", True),
        parallel_concurrency=_env_bool(environ, "HIVE_PARALLEL_CONCURRENCY", False),
    )
