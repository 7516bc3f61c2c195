"""
Tool call dispatch: registered tools first, then the fallback handler.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Dict, Optional

from ..errors import ToolExecutionError, ToolNotFoundError, ToolTimeoutError
from ..runtime.config import RuntimeConfig, load_runtime_config
from ..runtime.context import ExecutionContext, ToolCallRecord
from .observability import after_tool_call, before_tool_call
from .registry import HostTool, ToolTable


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"


def merge_result_payload(result: Any) -> Any:
    """
    Lift the keys of a nested `data` dict onto the result so scripts can read
    `weather.temp` as well as `weather.data.temp`. Top-level keys win.
    """
    if isinstance(result, dict) and isinstance(result.get("data"), dict):
        return {**result["data"], **result}
    return result


class ToolDispatcher:
    def __init__(self, table: ToolTable, config: Optional[RuntimeConfig] = None) -> None:
        self.table = table
        self.config = config or load_runtime_config()

    def resolve(self, name: str) -> tuple[Optional[HostTool], bool]:
        fn = self.table.try_registered(name)
        if fn is not None:
            return fn, False
        return self.table.fallback, True

    async def invoke(self, name: str, args: Dict[str, Any], context: ExecutionContext) -> Any:
        """
        Execute one tool call and return its raw result.

        Raises ToolNotFoundError when neither a registered tool nor a fallback
        exists (no trace entry is recorded), ToolTimeoutError when an awaitable
        result misses the deadline and ToolExecutionError for anything the
        tool itself raises.
        """
        fn, is_fallback = self.resolve(name)
        if fn is None:
            raise ToolNotFoundError(f"Tool not found: {name}", tool=name)

        call_args = {"tool": name, **args} if is_fallback else dict(args)
        context.tool_calls.append(ToolCallRecord(tool=name, args=dict(args), is_fallback=is_fallback))
        level = self.config.tool_logging
        before_tool_call(
            name,
            {"args": call_args, "is_fallback": is_fallback},
            level=level,
            redact=self.config.redact_tool_args,
        )

        try:
            result = await self._execute(fn, call_args, context, name, is_fallback)
        except (ToolExecutionError, ToolTimeoutError) as err:
            after_tool_call(name, {"ok": False, "error": err.message, "is_fallback": is_fallback}, level=level)
            raise
        after_tool_call(name, {"ok": True, "result": result, "is_fallback": is_fallback}, level=level)
        return result

    async def _execute(
        self, fn: HostTool, args: Dict[str, Any], context: ExecutionContext, name: str, is_fallback: bool
    ) -> Any:
        label = f"{name} (fallback)" if is_fallback else name
        deadline = self.config.tool_deadline
        try:
            result = fn(args, context)
            if not inspect.isawaitable(result):
                return result
            if deadline is None:
                return await result
            return await asyncio.wait_for(result, timeout=deadline)
        except asyncio.TimeoutError as exc:
            if deadline is None:
                raise ToolExecutionError(f"Error executing {label}: {exc}", tool=name) from exc
            raise ToolTimeoutError(
                f"Error executing {name}: timed out after {_format_seconds(deadline)} seconds",
                tool=name,
                timeout_seconds=deadline,
            ) from exc
        except Exception as exc:
            raise ToolExecutionError(f"Error executing {label}: {exc}", tool=name) from exc
