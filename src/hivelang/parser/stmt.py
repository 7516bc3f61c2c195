"""Statement parsing helpers.

These functions are attached to ``Parser`` as methods and rely on its token
helpers (`consume`, `match_keyword`, etc.).
"""

from __future__ import annotations

from typing import Dict

from .. import ast_nodes

__all__ = [
    "parse_statement",
    "parse_block",
    "parse_if",
    "parse_call",
    "parse_say",
    "parse_assignment",
    "parse_delegate",
    "parse_return",
    "parse_loop",
    "parse_parallel",
    "parse_arguments",
]


def parse_statement(self) -> ast_nodes.Statement:
    token = self.peek()
    if token.type == "KEYWORD":
        if token.value == "if":
            self.advance()
            return self.parse_if(token)
        if token.value == "call":
            return self.parse_call()
        if token.value == "say":
            return self.parse_say()
        if token.value == "set":
            return self.parse_assignment()
        if token.value == "delegate":
            return self.parse_delegate()
        if token.value == "return":
            return self.parse_return()
        if token.value == "loop":
            return self.parse_loop()
        if token.value == "parallel":
            return self.parse_parallel()
    if token.type == "IDENTIFIER" and self.check_next("PUNCTUATION", "="):
        return self.parse_assignment()
    raise self.error(f"Unexpected token {self._describe(token)}", token)


def parse_block(self) -> ast_nodes.Block:
    start = self.consume("INDENT", message="Expected indented block")
    block = ast_nodes.Block(span=self._span(start))
    while not self.check("DEDENT") and not self.is_at_end():
        block.statements.append(self.parse_statement())
    self.consume("DEDENT", message="Expected end of block")
    return block


def parse_if(self, start_tok) -> ast_nodes.IfStatement:
    # `if` / `elif` already consumed by the caller.
    condition = self.parse_expression()
    self.match_keyword("then")
    consequent = self.parse_block()
    alternate = None
    if self.match_keyword("else"):
        alternate = self.parse_block()
    elif self.check("KEYWORD", "elif"):
        alternate = self.parse_if(self.advance())
    self.match_keyword("end")
    return ast_nodes.IfStatement(
        condition=condition,
        consequent=consequent,
        alternate=alternate,
        span=self._span(start_tok),
    )


def parse_call(self) -> ast_nodes.CallStatement:
    start = self.consume_keyword("call")
    if not self.match_any({"IDENTIFIER", "KEYWORD"}):
        raise self.error(f"Expected tool name but found {self._describe(self.peek())}", self.peek())
    parts = [self.previous().value]
    while self.match("PUNCTUATION", "."):
        if not self.match_any({"IDENTIFIER", "KEYWORD"}):
            raise self.error(f"Expected tool name segment after '.' but found {self._describe(self.peek())}", self.peek())
        parts.append(self.previous().value)

    arguments: Dict[str, ast_nodes.Expression] = {}
    if self.match_keyword("with"):
        arguments = self.parse_arguments()

    output_variable = None
    if self.match_keyword("as"):
        output_variable = self.consume("IDENTIFIER", message="Expected variable name after 'as'").value

    return ast_nodes.CallStatement(
        tool=".".join(parts),
        arguments=arguments,
        output_variable=output_variable,
        span=self._span(start),
    )


def parse_say(self) -> ast_nodes.SayStatement:
    start = self.consume_keyword("say")
    return ast_nodes.SayStatement(message=self.parse_expression(), span=self._span(start))


def parse_assignment(self) -> ast_nodes.Assignment:
    start = self.peek()
    if self.match_keyword("set"):
        variable = self.consume("IDENTIFIER", message="Expected variable name after 'set'").value
        if not self.match_keyword("to"):
            self.consume("PUNCTUATION", "=", "Expected 'to' or '=' in set statement")
    else:
        variable = self.consume("IDENTIFIER", message="Expected variable name").value
        self.consume("PUNCTUATION", "=")
    value = self.parse_expression()
    return ast_nodes.Assignment(variable=variable, value=value, span=self._span(start))


def parse_delegate(self) -> ast_nodes.DelegateStatement:
    start = self.consume_keyword("delegate")
    self.consume_keyword("to", "Expected 'to' after 'delegate'")
    target = self.consume("IDENTIFIER", message="Expected agent name after 'delegate to'").value
    params: Dict[str, ast_nodes.Expression] = {}
    if self.match_keyword("with"):
        params = self.parse_arguments()
    return ast_nodes.DelegateStatement(target_agent=target, params=params, span=self._span(start))


def parse_return(self) -> ast_nodes.ReturnStatement:
    start = self.consume_keyword("return")
    return ast_nodes.ReturnStatement(value=self.parse_expression(), span=self._span(start))


def parse_loop(self) -> ast_nodes.LoopStatement:
    start = self.consume_keyword("loop")
    variable = self.consume("IDENTIFIER", message="Expected loop variable name").value
    self.consume_keyword("in", "Expected 'in' in loop")
    iterable = self.parse_expression()
    body = self.parse_block()
    self.match_keyword("end")
    return ast_nodes.LoopStatement(variable=variable, iterable=iterable, body=body, span=self._span(start))


def parse_parallel(self) -> ast_nodes.ParallelBlock:
    start = self.consume_keyword("parallel")
    body = self.parse_block()
    self.match_keyword("end")
    return ast_nodes.ParallelBlock(statements=body.statements, span=self._span(start))


def parse_arguments(self) -> Dict[str, ast_nodes.Expression]:
    """
    Named arguments after `with`: either `{ key: expr, ... }` (trailing comma
    allowed) or the brace-less single-line `key: expr, key: expr` form.
    """
    args: Dict[str, ast_nodes.Expression] = {}
    has_braces = self.match("PUNCTUATION", "{")

    while True:
        if has_braces and self.check("PUNCTUATION", "}"):
            break
        if not self.match_any({"IDENTIFIER", "KEYWORD"}):
            raise self.error(f"Expected argument name but found {self._describe(self.peek())}", self.peek())
        key = self.previous().value
        self.consume("PUNCTUATION", ":", "Expected ':' after argument name")
        args[key] = self.parse_expression()
        if not self.match("PUNCTUATION", ","):
            break

    if has_braces:
        self.consume("PUNCTUATION", "}", "Expected '}' at end of argument block")
    return args
