"""
Custom error types for the Hivelang engine.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class HivelangError(Exception):
    """Base error with optional location metadata."""

    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.message}{location}"


class LexError(HivelangError):
    """Lexical analysis error."""


class ParseError(HivelangError):
    """Parsing error."""


class EvaluationError(HivelangError):
    """Raised when expression evaluation fails at runtime."""


@dataclass
class ToolError(HivelangError):
    """Base class for failures recorded while dispatching a tool call."""

    tool: Optional[str] = None


class ToolExecutionError(ToolError):
    """A registered or fallback tool raised."""


class ToolNotFoundError(ToolError):
    """No registered tool and no fallback handler for the called name."""


@dataclass
class ToolTimeoutError(ToolError):
    """A tool call exceeded the configured deadline."""

    timeout_seconds: Optional[float] = None
