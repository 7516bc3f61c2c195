"""
Hooks and log lines around host tool dispatch.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from ..observability.logging_utils import redact_args
from ..runtime.config import normalize_logging_level

logger = logging.getLogger("hivelang.tools")

ToolInterceptor = Callable[[str, dict[str, Any]], None]

_before_interceptors: List[ToolInterceptor] = []
_after_interceptors: List[ToolInterceptor] = []


def register_before_tool_call(func: ToolInterceptor) -> None:
    _before_interceptors.append(func)


def register_after_tool_call(func: ToolInterceptor) -> None:
    _after_interceptors.append(func)


def clear_tool_interceptors() -> None:
    _before_interceptors.clear()
    _after_interceptors.clear()


def _run_interceptors(interceptors: list[ToolInterceptor], name: str, payload: dict[str, Any]) -> None:
    for func in list(interceptors):
        try:
            func(name, payload)
        except Exception:
            logger.debug("Tool interceptor raised", exc_info=True)


def before_tool_call(name: str, request: dict[str, Any], *, level: str | None = None, redact: bool = True) -> None:
    """
    `request` carries `args` and `is_fallback`. Interceptors see the raw
    request; only the log line is redacted.
    """
    level = normalize_logging_level(level)
    source = "fallback" if request.get("is_fallback") else "registered"
    if level == "debug":
        logger.debug(
            "Tool %s (%s) args=%s",
            name,
            source,
            redact_args(request.get("args") or {}, enabled=redact),
        )
    elif level == "info":
        logger.info("Tool %s (%s)", name, source)
    _run_interceptors(_before_interceptors, name, request)


def after_tool_call(name: str, response: dict[str, Any], *, level: str | None = None) -> None:
    level = normalize_logging_level(level)
    ok = response.get("ok", True)
    error_msg = response.get("error")
    if level == "debug":
        result = response.get("result")
        logger.debug(
            "Tool %s completed ok=%s error=%s result=%s",
            name,
            ok,
            error_msg,
            (result[:200] if isinstance(result, str) else type(result).__name__),
        )
    elif level == "info":
        if not ok:
            logger.warning("Tool %s failed error=%s", name, error_msg)
    elif level == "quiet":
        if not ok:
            logger.error("Tool %s failed error=%s", name, error_msg)
    _run_interceptors(_after_interceptors, name, response)
