"""Expression parsing helpers.

Precedence climbs from ``??`` (lowest) through ``or``, ``and``, equality,
comparison / ``contains``, additive and multiplicative operators down to
postfix member access, which binds tighter than any binary operator.
"""

from __future__ import annotations

from .. import ast_nodes

__all__ = [
    "parse_expression",
    "parse_nullish",
    "parse_or",
    "parse_and",
    "parse_equality",
    "parse_comparison",
    "parse_additive",
    "parse_multiplicative",
    "parse_postfix",
    "parse_primary",
    "parse_array_literal",
    "parse_object_literal",
]

EQUALITY_OPERATORS = {"==", "!="}
COMPARISON_OPERATORS = {">", "<", ">=", "<="}
ADDITIVE_OPERATORS = {"+", "-"}
MULTIPLICATIVE_OPERATORS = {"*", "/", "%"}


def _binary(self, operator: str, left, right, token) -> ast_nodes.BinaryExpression:
    return ast_nodes.BinaryExpression(operator=operator, left=left, right=right, span=self._span(token))


def parse_expression(self) -> ast_nodes.Expression:
    return self.parse_nullish()


def parse_nullish(self) -> ast_nodes.Expression:
    expr = self.parse_or()
    while self.check("OPERATOR", "??"):
        op_tok = self.advance()
        expr = _binary(self, "??", expr, self.parse_or(), op_tok)
    return expr


def parse_or(self) -> ast_nodes.Expression:
    expr = self.parse_and()
    while self.check("KEYWORD", "or"):
        op_tok = self.advance()
        expr = _binary(self, "or", expr, self.parse_and(), op_tok)
    return expr


def parse_and(self) -> ast_nodes.Expression:
    expr = self.parse_equality()
    while self.check("KEYWORD", "and"):
        op_tok = self.advance()
        expr = _binary(self, "and", expr, self.parse_equality(), op_tok)
    return expr


def parse_equality(self) -> ast_nodes.Expression:
    expr = self.parse_comparison()
    while self.peek().type == "OPERATOR" and self.peek().value in EQUALITY_OPERATORS:
        op_tok = self.advance()
        expr = _binary(self, op_tok.value, expr, self.parse_comparison(), op_tok)
    return expr


def parse_comparison(self) -> ast_nodes.Expression:
    expr = self.parse_additive()
    while _is_comparison(self.peek()):
        op_tok = self.advance()
        expr = _binary(self, op_tok.value, expr, self.parse_additive(), op_tok)
    return expr


def _is_comparison(token) -> bool:
    if token.type == "OPERATOR":
        return token.value in COMPARISON_OPERATORS
    return token.type == "KEYWORD" and token.value == "contains"


def parse_additive(self) -> ast_nodes.Expression:
    expr = self.parse_multiplicative()
    while self.peek().type == "OPERATOR" and self.peek().value in ADDITIVE_OPERATORS:
        op_tok = self.advance()
        expr = _binary(self, op_tok.value, expr, self.parse_multiplicative(), op_tok)
    return expr


def parse_multiplicative(self) -> ast_nodes.Expression:
    expr = self.parse_postfix()
    while self.peek().type == "OPERATOR" and self.peek().value in MULTIPLICATIVE_OPERATORS:
        op_tok = self.advance()
        expr = _binary(self, op_tok.value, expr, self.parse_postfix(), op_tok)
    return expr


def parse_postfix(self) -> ast_nodes.Expression:
    expr = self.parse_primary()
    while True:
        if self.check("PUNCTUATION", "["):
            start = self.advance()
            prop = self.parse_expression()
            self.consume("PUNCTUATION", "]", "Expected ']' after index")
            expr = ast_nodes.MemberExpression(object=expr, property=prop, computed=True, span=self._span(start))
            continue
        if self.check("PUNCTUATION", "."):
            start = self.advance()
            if self.check("NUMBER"):
                # items.0 is an index, same as items[0]
                num_tok = self.advance()
                index = ast_nodes.Literal(value=num_tok.literal, raw=num_tok.value, span=self._span(num_tok))
                expr = ast_nodes.MemberExpression(object=expr, property=index, computed=True, span=self._span(start))
                continue
            if not self.match_any({"IDENTIFIER", "KEYWORD"}):
                raise self.error(
                    f"Expected property name after '.' but found {self._describe(self.peek())}",
                    self.peek(),
                )
            name_tok = self.previous()
            if isinstance(expr, ast_nodes.Identifier):
                expr = ast_nodes.VariableAccess(parts=[expr.name, name_tok.value], span=expr.span)
            elif isinstance(expr, ast_nodes.VariableAccess):
                expr = ast_nodes.VariableAccess(parts=[*expr.parts, name_tok.value], span=expr.span)
            else:
                prop = ast_nodes.Identifier(name=name_tok.value, span=self._span(name_tok))
                expr = ast_nodes.MemberExpression(object=expr, property=prop, computed=False, span=self._span(start))
            continue
        break
    return expr


def parse_primary(self) -> ast_nodes.Expression:
    token = self.peek()

    if token.type == "PUNCTUATION":
        if token.value == "(":
            self.advance()
            expr = self.parse_expression()
            self.consume("PUNCTUATION", ")", "Expected ')'")
            return expr
        if token.value == "[":
            return self.parse_array_literal()
        if token.value == "{":
            return self.parse_object_literal()

    if token.type == "STRING":
        self.advance()
        return ast_nodes.Literal(value=token.literal, raw=token.value, span=self._span(token))
    if token.type == "NUMBER":
        self.advance()
        return ast_nodes.Literal(value=token.literal, raw=token.value, span=self._span(token))
    if token.type == "FSTRING":
        self.advance()
        return self.parse_fstring(token)
    if token.type == "IDENTIFIER":
        self.advance()
        return ast_nodes.Identifier(name=token.value, span=self._span(token))

    if token.type == "KEYWORD":
        if token.value == "true":
            self.advance()
            return ast_nodes.Literal(value=True, raw="true", span=self._span(token))
        if token.value == "false":
            self.advance()
            return ast_nodes.Literal(value=False, raw="false", span=self._span(token))
        if token.value in {"null", "undefined"}:
            self.advance()
            return ast_nodes.Literal(value=None, raw=token.value, span=self._span(token))
        if token.value == "input":
            # Contextual keyword: readable as a variable.
            self.advance()
            return ast_nodes.Identifier(name="input", span=self._span(token))

    raise self.error(f"Expected expression but found {self._describe(token)}", token)


def parse_array_literal(self) -> ast_nodes.ArrayLiteral:
    start = self.consume("PUNCTUATION", "[")
    elements: list[ast_nodes.Expression] = []
    while not self.check("PUNCTUATION", "]"):
        elements.append(self.parse_expression())
        if not self.match("PUNCTUATION", ","):
            break
    self.consume("PUNCTUATION", "]", "Expected ']' at end of array")
    return ast_nodes.ArrayLiteral(elements=elements, span=self._span(start))


def parse_object_literal(self) -> ast_nodes.ObjectLiteral:
    start = self.consume("PUNCTUATION", "{")
    properties: dict[str, ast_nodes.Expression] = {}
    while not self.check("PUNCTUATION", "}"):
        if self.check("STRING"):
            key = self.advance().literal
        elif self.match_any({"IDENTIFIER", "KEYWORD"}):
            key = self.previous().value
        else:
            raise self.error(f"Expected object key but found {self._describe(self.peek())}", self.peek())
        self.consume("PUNCTUATION", ":", "Expected ':' after object key")
        properties[key] = self.parse_expression()
        if not self.match("PUNCTUATION", ","):
            break
    self.consume("PUNCTUATION", "}", "Expected '}' at end of object")
    return ast_nodes.ObjectLiteral(properties=properties, span=self._span(start))
