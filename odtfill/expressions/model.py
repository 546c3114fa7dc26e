"""
AST of marker expressions.

One dataclass per expression kind; every node reports its kind through
get_type() so the evaluator can dispatch without isinstance chains.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ExpressionType(Enum):
    LITERAL = "literal"
    NAME = "name"
    MEMBER = "member"
    INDEX = "index"
    NOT = "not"
    NEGATE = "negate"
    AND = "and"
    OR = "or"
    COMPARE = "compare"
    GROUP = "group"  # explicit parentheses


@dataclass
class Expression(ABC):
    """Base class of all expression nodes."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class LiteralExpression(Expression):
    """Number, string, true/false, null/undefined."""
    value: Any

    def get_type(self) -> ExpressionType:
        return ExpressionType.LITERAL

    def _to_string(self) -> str:
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return repr(self.value)
        return str(self.value)


@dataclass
class NameExpression(Expression):
    """Scope lookup: name"""
    name: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.NAME

    def _to_string(self) -> str:
        return self.name


@dataclass
class MemberExpression(Expression):
    """Member access: target.name"""
    target: Expression
    name: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.MEMBER

    def _to_string(self) -> str:
        return f"{self.target}.{self.name}"


@dataclass
class IndexExpression(Expression):
    """Subscript: target[index]"""
    target: Expression
    index: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.INDEX

    def _to_string(self) -> str:
        return f"{self.target}[{self.index}]"


@dataclass
class NotExpression(Expression):
    """Logical negation: !operand"""
    operand: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NOT

    def _to_string(self) -> str:
        return f"!{self.operand}"


@dataclass
class NegateExpression(Expression):
    """Arithmetic negation: -operand"""
    operand: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NEGATE

    def _to_string(self) -> str:
        return f"-{self.operand}"


@dataclass
class GroupExpression(Expression):
    """Parenthesized expression: (expression)"""
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


@dataclass
class LogicalExpression(Expression):
    """
    Short-circuit operation: left && right, left || right

    Returns the operand that decided the result, not a bool.
    """
    left: Expression
    right: Expression
    operator: ExpressionType  # AND or OR

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "&&" if self.operator == ExpressionType.AND else "||"
        return f"{self.left} {op_str} {self.right}"


@dataclass
class CompareExpression(Expression):
    """Comparison: left op right, op in === !== == != < <= > >="""
    left: Expression
    right: Expression
    operator: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.COMPARE

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


AnyExpression = Union[
    LiteralExpression,
    NameExpression,
    MemberExpression,
    IndexExpression,
    NotExpression,
    NegateExpression,
    GroupExpression,
    LogicalExpression,
    CompareExpression,
]

__all__ = [
    "Expression",
    "ExpressionType",
    "LiteralExpression",
    "NameExpression",
    "MemberExpression",
    "IndexExpression",
    "NotExpression",
    "NegateExpression",
    "GroupExpression",
    "LogicalExpression",
    "CompareExpression",
]
