"""
Hivelang v3 core package.
"""

from .version import __version__, LANGUAGE_VERSION  # noqa: F401
from .errors import HivelangError, LexError, ParseError  # noqa: F401
from .lexer import tokenize  # noqa: F401
from .parser import parse_source  # noqa: F401
from .runtime.interpreter import Interpreter  # noqa: F401
from .schemas import ExecutionResult, ToolCallTrace  # noqa: F401

__all__ = [
    "lexer",
    "parser",
    "ast_nodes",
    "errors",
    "runtime",
    "tools",
    "Interpreter",
    "ExecutionResult",
    "ToolCallTrace",
    "HivelangError",
    "LexError",
    "ParseError",
    "tokenize",
    "parse_source",
    "__version__",
    "LANGUAGE_VERSION",
]
