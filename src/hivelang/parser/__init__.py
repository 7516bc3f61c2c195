"""
Hivelang parser package.

Exposes `parse_source`, `parse_expression_source` and the `Parser` class.
"""

from __future__ import annotations

from ..errors import LexError, ParseError
from .core import Parser, parse_expression_source, parse_source

__all__ = ["Parser", "parse_source", "parse_expression_source", "ParseError", "LexError"]
