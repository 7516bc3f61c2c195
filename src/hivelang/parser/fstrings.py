"""F-string template parsing.

Interpolation spans are parsed once, at load time, with the full expression
grammar. A span that is not a single well-formed expression is kept as
literal text, braces included.
"""

from __future__ import annotations

import re
from typing import List, Union

from .. import ast_nodes
from ..errors import HivelangError
from ..lexer import Lexer

__all__ = ["parse_fstring", "_parse_interpolation"]

_SPAN_RE = re.compile(r"\{([^{}]+)\}")


def parse_fstring(self, token) -> ast_nodes.FString:
    template = token.literal if token.literal is not None else token.value
    parts: List[Union[str, ast_nodes.FStringSpan]] = []
    cursor = 0
    for match in _SPAN_RE.finditer(template):
        if match.start() > cursor:
            parts.append(template[cursor : match.start()])
        source = match.group(1).strip()
        expression = self._parse_interpolation(source)
        if expression is None:
            parts.append(match.group(0))
        else:
            parts.append(ast_nodes.FStringSpan(source=source, expression=expression))
        cursor = match.end()
    if cursor < len(template):
        parts.append(template[cursor:])
    return ast_nodes.FString(template=template, parts=_merge_text(parts), span=self._span(token))


def _parse_interpolation(self, source: str):
    try:
        sub_parser = type(self)(Lexer(source).tokenize())
        expression = sub_parser.parse_expression()
    except HivelangError:
        return None
    if not sub_parser.is_at_end():
        return None
    return expression


def _merge_text(parts: List[Union[str, ast_nodes.FStringSpan]]) -> List[Union[str, ast_nodes.FStringSpan]]:
    merged: List[Union[str, ast_nodes.FStringSpan]] = []
    for part in parts:
        if isinstance(part, str) and merged and isinstance(merged[-1], str):
            merged[-1] += part
        else:
            merged.append(part)
    return merged
