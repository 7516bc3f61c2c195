from __future__ import annotations

from typing import Any, Dict

from .. import ast_nodes
from ..errors import EvaluationError, HivelangError
from . import values


class ExpressionEvaluator:
    """Runtime evaluator for Hivelang expressions over one flat variable map."""

    def __init__(self, variables: Dict[str, Any]) -> None:
        self.variables = variables

    def evaluate(self, expr: ast_nodes.Expression) -> Any:
        if isinstance(expr, ast_nodes.Literal):
            return expr.value
        if isinstance(expr, ast_nodes.Identifier):
            return self.variables.get(expr.name)
        if isinstance(expr, ast_nodes.VariableAccess):
            return self.resolve_path(expr.parts)
        if isinstance(expr, ast_nodes.MemberExpression):
            return self._evaluate_member(expr)
        if isinstance(expr, ast_nodes.BinaryExpression):
            return self._evaluate_binary(expr)
        if isinstance(expr, ast_nodes.FString):
            return self.render_fstring(expr)
        if isinstance(expr, ast_nodes.ArrayLiteral):
            return [self.evaluate(element) for element in expr.elements]
        if isinstance(expr, ast_nodes.ObjectLiteral):
            return {key: self.evaluate(value) for key, value in expr.properties.items()}
        raise EvaluationError(f"Unsupported expression node '{type(expr).__name__}'")

    def resolve_path(self, parts: list[str]) -> Any:
        if not parts:
            return None
        current = self.variables.get(parts[0])
        for part in parts[1:]:
            if current is None:
                return None
            current = values.get_member(current, part)
        return current

    def _evaluate_member(self, expr: ast_nodes.MemberExpression) -> Any:
        target = self.evaluate(expr.object)
        if expr.computed:
            prop = self.evaluate(expr.property)
        elif isinstance(expr.property, ast_nodes.Identifier):
            prop = expr.property.name
        else:
            prop = self.evaluate(expr.property)
        if target is None:
            return None
        return values.get_member(target, prop)

    def _evaluate_binary(self, expr: ast_nodes.BinaryExpression) -> Any:
        op = expr.operator
        left = self.evaluate(expr.left)
        # Short-circuiting operators return one of their operands.
        if op == "and":
            return self.evaluate(expr.right) if values.is_truthy(left) else left
        if op == "or":
            return left if values.is_truthy(left) else self.evaluate(expr.right)
        if op == "??":
            return left if left is not None else self.evaluate(expr.right)

        right = self.evaluate(expr.right)
        if op == "+":
            return values.add(left, right)
        if op == "-":
            return values.subtract(left, right)
        if op == "*":
            return values.multiply(left, right)
        if op == "/":
            return values.divide(left, right)
        if op == "%":
            return values.remainder(left, right)
        if op == "==":
            return values.loose_equals(left, right)
        if op == "!=":
            return not values.loose_equals(left, right)
        if op in {">", "<", ">=", "<="}:
            return values.compare(op, left, right)
        if op == "contains":
            return values.contains(left, right)
        raise EvaluationError(f"Unsupported operator '{op}'")

    def render_fstring(self, expr: ast_nodes.FString) -> str:
        chunks: list[str] = []
        for part in expr.parts:
            if isinstance(part, str):
                chunks.append(part)
                continue
            try:
                chunks.append(values.to_text(self.evaluate(part.expression)))
            except HivelangError:
                chunks.append("{" + part.source + "}")
        return "".join(chunks)
