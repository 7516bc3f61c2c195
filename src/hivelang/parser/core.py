"""
Recursive-descent parser for Hivelang.

Grammar rules live in sibling modules (``decls``, ``stmt``, ``expr``,
``fstrings``) and are attached to ``Parser`` as methods; they rely on the token
helpers defined here.
"""

from __future__ import annotations

from typing import List, Optional

from .. import ast_nodes
from ..errors import ParseError
from ..lexer import Lexer, Token
from . import decls, expr, fstrings, stmt


class Parser:
    def __init__(self, tokens: List[Token]) -> None:
        # Block structure comes from INDENT/DEDENT; line breaks carry no meaning.
        self.tokens = [token for token in tokens if token.type != "NEWLINE"]
        if not self.tokens or self.tokens[-1].type != "EOF":
            last = self.tokens[-1] if self.tokens else None
            self.tokens.append(Token("EOF", "", last.line if last else 1, last.column if last else 1))
        self.position = 0

    @classmethod
    def from_source(cls, source: str) -> "Parser":
        return cls(Lexer(source).tokenize())

    def parse_program(self) -> ast_nodes.Program:
        program = ast_nodes.Program()
        while not self.is_at_end():
            if self.check("KEYWORD", "bot"):
                program.body.append(self.parse_bot())
            else:
                program.body.append(self.parse_statement())
        return program

    parse_bot = decls.parse_bot
    parse_agent = decls.parse_agent
    parse_memory_block = decls.parse_memory_block
    parse_on = decls.parse_on
    _consume_definition_name = decls._consume_definition_name

    parse_statement = stmt.parse_statement
    parse_block = stmt.parse_block
    parse_if = stmt.parse_if
    parse_call = stmt.parse_call
    parse_say = stmt.parse_say
    parse_assignment = stmt.parse_assignment
    parse_delegate = stmt.parse_delegate
    parse_return = stmt.parse_return
    parse_loop = stmt.parse_loop
    parse_parallel = stmt.parse_parallel
    parse_arguments = stmt.parse_arguments

    parse_expression = expr.parse_expression
    parse_nullish = expr.parse_nullish
    parse_or = expr.parse_or
    parse_and = expr.parse_and
    parse_equality = expr.parse_equality
    parse_comparison = expr.parse_comparison
    parse_additive = expr.parse_additive
    parse_multiplicative = expr.parse_multiplicative
    parse_postfix = expr.parse_postfix
    parse_primary = expr.parse_primary
    parse_array_literal = expr.parse_array_literal
    parse_object_literal = expr.parse_object_literal

    parse_fstring = fstrings.parse_fstring
    _parse_interpolation = fstrings._parse_interpolation

    # --- token helpers -------------------------------------------------

    def check(self, token_type: str, value: Optional[str] = None) -> bool:
        token = self.peek()
        if token.type != token_type:
            return False
        return value is None or token.value == value

    def check_next(self, token_type: str, value: Optional[str] = None) -> bool:
        token = self.peek_offset(1)
        if token.type != token_type:
            return False
        return value is None or token.value == value

    def match(self, token_type: str, value: Optional[str] = None) -> bool:
        if self.is_at_end() and token_type != "EOF":
            return False
        if self.check(token_type, value):
            self.advance()
            return True
        return False

    def match_keyword(self, keyword: str) -> bool:
        return self.match("KEYWORD", keyword)

    def match_any(self, token_types: set[str]) -> bool:
        if self.peek().type in token_types and not self.is_at_end():
            self.advance()
            return True
        return False

    def consume(self, token_type: str, value: Optional[str] = None, message: Optional[str] = None) -> Token:
        token = self.peek()
        if self.check(token_type, value):
            return self.advance()
        if message is None:
            expected = f"'{value}'" if value is not None else token_type
            message = f"Expected {expected}"
        raise self.error(f"{message} but found {self._describe(token)}", token)

    def consume_keyword(self, keyword: str, message: Optional[str] = None) -> Token:
        return self.consume("KEYWORD", keyword, message or f"Expected keyword '{keyword}'")

    def peek(self) -> Token:
        return self.tokens[self.position]

    def peek_offset(self, offset: int) -> Token:
        idx = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def previous(self) -> Token:
        return self.tokens[max(self.position - 1, 0)]

    def advance(self) -> Token:
        token = self.tokens[self.position]
        self.position = min(self.position + 1, len(self.tokens) - 1)
        return token

    def is_at_end(self) -> bool:
        return self.peek().type == "EOF"

    def error(self, message: str, token: Token) -> ParseError:
        return ParseError(message, token.line, token.column)

    def _describe(self, token: Token) -> str:
        if token.type == "EOF":
            return "end of input"
        if token.type in {"INDENT", "DEDENT"}:
            return token.type
        return f"{token.type} '{token.value}'"

    def _span(self, token: Token) -> ast_nodes.Span:
        return ast_nodes.Span(line=token.line, column=token.column)


def parse_source(source: str) -> ast_nodes.Program:
    """Parse helper for tests and tooling."""
    return Parser.from_source(source).parse_program()


def parse_expression_source(source: str) -> ast_nodes.Expression:
    """Parse a single expression; trailing tokens are an error."""
    parser = Parser.from_source(source)
    expression = parser.parse_expression()
    if not parser.is_at_end():
        raise parser.error(f"Unexpected {parser._describe(parser.peek())} after expression", parser.peek())
    return expression
