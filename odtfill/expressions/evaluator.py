"""
Evaluator of marker expressions.

Walks the expression AST against a scope mapping. Lookups never raise
for missing data: unknown names, members and indexes evaluate to None,
so optional fields render as empty text.
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
from typing import Any, Dict, cast

from .errors import EvaluationError
from .model import (
    CompareExpression,
    Expression,
    ExpressionType,
    GroupExpression,
    IndexExpression,
    LiteralExpression,
    LogicalExpression,
    MemberExpression,
    NameExpression,
    NegateExpression,
    NotExpression,
)
from .parser import ExpressionParser


class ExpressionEvaluator:
    """
    Default evaluator used by the template filler.

    Parsed expressions are cached per instance: a template usually repeats
    the same few expressions for every loop item.
    """

    def __init__(self):
        self._parser = ExpressionParser()
        self._cache: Dict[str, Expression] = {}

    def evaluate(self, expression: str, scope: Mapping) -> Any:
        """
        Evaluates an expression string against a scope.

        Raises:
            ExpressionSyntaxError: malformed expression
            EvaluationError: well-formed expression applied to unsupported values
        """
        ast = self._cache.get(expression)
        if ast is None:
            ast = self._parser.parse(expression)
            self._cache[expression] = ast
        return self.evaluate_ast(ast, scope)

    def evaluate_ast(self, node: Expression, scope: Mapping) -> Any:
        node_type = node.get_type()

        if node_type == ExpressionType.LITERAL:
            return cast(LiteralExpression, node).value
        elif node_type == ExpressionType.NAME:
            return scope.get(cast(NameExpression, node).name)
        elif node_type == ExpressionType.MEMBER:
            return self._evaluate_member(cast(MemberExpression, node), scope)
        elif node_type == ExpressionType.INDEX:
            return self._evaluate_index(cast(IndexExpression, node), scope)
        elif node_type == ExpressionType.GROUP:
            return self.evaluate_ast(cast(GroupExpression, node).expression, scope)
        elif node_type == ExpressionType.NOT:
            return not self.evaluate_ast(cast(NotExpression, node).operand, scope)
        elif node_type == ExpressionType.NEGATE:
            return self._evaluate_negate(cast(NegateExpression, node), scope)
        elif node_type == ExpressionType.AND:
            return self._evaluate_and(cast(LogicalExpression, node), scope)
        elif node_type == ExpressionType.OR:
            return self._evaluate_or(cast(LogicalExpression, node), scope)
        elif node_type == ExpressionType.COMPARE:
            return self._evaluate_compare(cast(CompareExpression, node), scope)
        else:
            raise EvaluationError(f"Unknown expression type: {node_type}")

    def _evaluate_member(self, node: MemberExpression, scope: Mapping) -> Any:
        """
        Member access: target.name

        Mapping keys win over attributes. `.length` falls back to len().
        Private attributes and methods are never exposed.
        """
        target = self.evaluate_ast(node.target, scope)
        name = node.name

        if target is None:
            return None

        if isinstance(target, Mapping):
            if name in target:
                return target[name]
            if name == "length":
                return len(target)
            return None

        if name == "length" and isinstance(target, Sized) and not hasattr(target, "length"):
            return len(target)

        if name.startswith("_"):
            return None

        value = getattr(target, name, None)
        if callable(value):
            return None
        return value

    def _evaluate_index(self, node: IndexExpression, scope: Mapping) -> Any:
        target = self.evaluate_ast(node.target, scope)
        index = self.evaluate_ast(node.index, scope)

        if target is None or index is None:
            return None

        if isinstance(target, Mapping):
            try:
                return target.get(index)
            except TypeError:
                # unhashable key
                return None

        if isinstance(target, (str, list, tuple)):
            if isinstance(index, bool):
                return None
            if isinstance(index, float) and index.is_integer():
                index = int(index)
            if not isinstance(index, int) or not 0 <= index < len(target):
                return None
            return target[index]

        return None

    def _evaluate_negate(self, node: NegateExpression, scope: Mapping) -> Any:
        value = self.evaluate_ast(node.operand, scope)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EvaluationError(f"Cannot negate {type(value).__name__} in '{node}'")
        return -value

    def _evaluate_and(self, node: LogicalExpression, scope: Mapping) -> Any:
        """
        Logical AND: left && right

        Returns left when it is falsy, right otherwise.
        """
        left = self.evaluate_ast(node.left, scope)
        if not left:
            return left
        return self.evaluate_ast(node.right, scope)

    def _evaluate_or(self, node: LogicalExpression, scope: Mapping) -> Any:
        left = self.evaluate_ast(node.left, scope)
        if left:
            return left
        return self.evaluate_ast(node.right, scope)

    def _evaluate_compare(self, node: CompareExpression, scope: Mapping) -> bool:
        left = self.evaluate_ast(node.left, scope)
        right = self.evaluate_ast(node.right, scope)
        op = node.operator

        if op in ("==", "==="):
            return left == right
        if op in ("!=", "!=="):
            return left != right

        try:
            if op == "<":
                return left < right
            if op == "<=":
                return left <= right
            if op == ">":
                return left > right
            if op == ">=":
                return left >= right
        except TypeError:
            # incomparable values (None, str vs int...)
            return False

        raise EvaluationError(f"Unknown comparison operator: {op}")


def evaluate_expression_string(expression: str, data: Mapping) -> Any:
    """
    Convenience function to evaluate an expression string once.

    Args:
        expression: Expression source
        data: Mapping of names visible to the expression

    Returns:
        Evaluated value

    Raises:
        ExpressionSyntaxError: On parsing errors
        EvaluationError: On evaluation errors
    """
    return ExpressionEvaluator().evaluate(expression, data)
