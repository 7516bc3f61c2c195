"""
Indentation-sensitive lexer for Hivelang scripts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .errors import LexError

KEYWORDS = {
    "bot",
    "agent",
    "end",
    "description",
    "type",
    "on",
    "input",
    "when",
    "if",
    "else",
    "elif",
    "then",
    "call",
    "with",
    "as",
    "say",
    "delegate",
    "to",
    "return",
    "set",
    "remember",
    "loop",
    "in",
    "parallel",
    "memory",
    "var",
    "true",
    "false",
    "null",
    "undefined",
    "and",
    "or",
    "not",
    "contains",
}

TWO_CHAR_OPERATORS = {"==", "!=", ">=", "<=", "??"}
ONE_CHAR_OPERATORS = set("+-*/%<>")
PUNCTUATION = set(",:.[]{}()")
OPENING_BRACKETS = set("([{")
CLOSING_BRACKETS = set(")]}")
DIGITS = set("0123456789")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


@dataclass
class Token:
    type: str
    value: str
    line: int
    column: int
    literal: Optional[Any] = None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


def _is_ident_start(char: str) -> bool:
    return bool(char) and char.isascii() and (char.isalpha() or char in "_$")


def _is_ident_char(char: str) -> bool:
    return bool(char) and char.isascii() and (char.isalnum() or char in "_$")


class Lexer:
    """
    Character scanner that emits INDENT/DEDENT tokens from leading spaces.

    Newlines inside (), [] or {} are ignored so argument lists and literals
    may span several lines without touching block structure.
    """

    def __init__(self, source: str, filename: str = "<string>") -> None:
        self.source = source.replace("\r\n", "\n")
        self.filename = filename
        self.position = 0
        self.line = 1
        self.column = 1
        self.indent_stack = [0]
        self.nesting = 0

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []

        while self.position < len(self.source):
            char = self._current()

            if char == "\n":
                self._advance()
                self._handle_line_start(tokens)
                continue

            if char in " \t\r\f\v":
                self._advance()
                continue

            if char == "#":
                self._skip_comment()
                continue

            if char == '"':
                if self.source.startswith('"""', self.position):
                    tokens.append(self._read_block_string())
                else:
                    tokens.append(self._read_string())
                continue

            if char == "f" and self._peek() == '"':
                line, column = self.line, self.column
                self._advance()
                token = self._read_string()
                tokens.append(Token("FSTRING", token.value, line, column, token.literal))
                continue

            pair = self.source[self.position : self.position + 2]
            if pair in TWO_CHAR_OPERATORS:
                tokens.append(Token("OPERATOR", pair, self.line, self.column))
                self._advance()
                self._advance()
                continue

            if char in ONE_CHAR_OPERATORS:
                tokens.append(Token("OPERATOR", char, self.line, self.column))
                self._advance()
                continue

            if char == "=":
                tokens.append(Token("PUNCTUATION", char, self.line, self.column))
                self._advance()
                continue

            if char in PUNCTUATION:
                if char in OPENING_BRACKETS:
                    self.nesting += 1
                elif char in CLOSING_BRACKETS:
                    self.nesting = max(0, self.nesting - 1)
                tokens.append(Token("PUNCTUATION", char, self.line, self.column))
                self._advance()
                continue

            if _is_ident_start(char):
                tokens.append(self._read_word())
                continue

            if char in DIGITS:
                tokens.append(self._read_number())
                continue

            raise LexError(f"Unexpected character '{char}'", self.line, self.column)

        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            tokens.append(Token("DEDENT", "", self.line, self.column))
        tokens.append(Token("EOF", "", self.line, self.column))
        return tokens

    def _handle_line_start(self, tokens: List[Token]) -> None:
        indent = 0
        while self._current() == " ":
            indent += 1
            self._advance()

        # Blank and comment-only lines, and trailing spaces at EOF, carry no structure.
        if self._current() in ("\n", "#", ""):
            return
        if self.nesting > 0:
            return

        tokens.append(Token("NEWLINE", "\n", self.line, 1))
        current_indent = self.indent_stack[-1]
        if indent > current_indent:
            self.indent_stack.append(indent)
            tokens.append(Token("INDENT", " " * indent, self.line, 1))
            return
        while len(self.indent_stack) > 1 and indent < self.indent_stack[-1]:
            self.indent_stack.pop()
            tokens.append(Token("DEDENT", "", self.line, 1))
        if indent != self.indent_stack[-1]:
            raise LexError(
                f"Indentation error: expected {self.indent_stack[-1]} spaces, found {indent}",
                self.line,
                1,
            )

    def _current(self) -> str:
        if self.position < len(self.source):
            return self.source[self.position]
        return ""

    def _peek(self) -> str:
        if self.position + 1 < len(self.source):
            return self.source[self.position + 1]
        return ""

    def _advance(self) -> str:
        char = self.source[self.position]
        self.position += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_comment(self) -> None:
        while self._current() and self._current() != "\n":
            self._advance()

    def _read_string(self) -> Token:
        line, column = self.line, self.column
        self._advance()  # opening quote
        chars: List[str] = []
        while True:
            char = self._current()
            if not char or char == "\n":
                raise LexError("Unterminated string literal", line, column)
            if char == '"':
                self._advance()
                break
            if char == "\\":
                self._advance()
                escaped = self._current()
                if not escaped:
                    raise LexError("Unterminated string literal", line, column)
                self._advance()
                chars.append(_ESCAPES.get(escaped, escaped))
                continue
            chars.append(self._advance())
        value = "".join(chars)
        return Token("STRING", value, line, column, value)

    def _read_block_string(self) -> Token:
        line, column = self.line, self.column
        for _ in range(3):
            self._advance()
        end = self.source.find('"""', self.position)
        if end == -1:
            raise LexError("Unterminated block string", line, column)
        chars: List[str] = []
        while self.position < end:
            chars.append(self._advance())
        for _ in range(3):
            self._advance()
        value = "".join(chars)
        return Token("STRING", value, line, column, value)

    def _read_word(self) -> Token:
        line, column = self.line, self.column
        chars: List[str] = []
        while _is_ident_char(self._current()):
            chars.append(self._advance())
        word = "".join(chars)
        token_type = "KEYWORD" if word in KEYWORDS else "IDENTIFIER"
        return Token(token_type, word, line, column)

    def _read_number(self) -> Token:
        line, column = self.line, self.column
        chars: List[str] = []
        while self._current() and self._current() in DIGITS:
            chars.append(self._advance())
        text = "".join(chars)
        try:
            value = int(text)
        except ValueError as exc:
            raise LexError("Number literal is too long", line, column) from exc
        return Token("NUMBER", text, line, column, value)


def tokenize(source: str) -> List[Token]:
    """Tokenize helper for tests and tooling."""
    return Lexer(source).tokenize()
