"""
Per-run execution state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..schemas import ExecutionResult, ToolCallTrace


@dataclass
class ToolCallRecord:
    tool: str
    args: Dict[str, Any] = field(default_factory=dict)
    is_fallback: bool = False


@dataclass
class ExecutionContext:
    """
    Mutable state for a single `run` or `emit_event` call.

    Variables live in one flat map: loop variables and assignments inside
    nested blocks all write here.
    """

    variables: Dict[str, Any] = field(default_factory=dict)
    output: List[Any] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    return_value: Any = None

    def fork(self) -> "ExecutionContext":
        """Branch context for a parallel statement: shared variables, own logs."""
        return ExecutionContext(variables=self.variables)

    def absorb(self, branch: "ExecutionContext") -> None:
        self.output.extend(branch.output)
        self.errors.extend(branch.errors)
        self.tool_calls.extend(branch.tool_calls)

    def to_result(self) -> ExecutionResult:
        return ExecutionResult(
            variables=dict(self.variables),
            output=list(self.output),
            errors=list(self.errors),
            tool_calls=[
                ToolCallTrace(tool=call.tool, args=call.args, is_fallback=call.is_fallback)
                for call in self.tool_calls
            ],
            return_value=self.return_value,
        )
