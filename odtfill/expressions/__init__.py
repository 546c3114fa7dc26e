"""
Expression language of template markers.

A small, allow-listed subset of JavaScript-like expressions: names,
member and index access, comparisons, !, &&, ||, unary minus and literals.
Nothing is ever executed; the AST is interpreted over plain data.
"""

from .errors import EvaluationError, ExpressionSyntaxError
from .evaluator import ExpressionEvaluator, evaluate_expression_string
from .lexer import ExpressionLexer, Token
from .parser import ExpressionParser

__all__ = [
    "EvaluationError",
    "ExpressionSyntaxError",
    "ExpressionEvaluator",
    "evaluate_expression_string",
    "ExpressionLexer",
    "ExpressionParser",
    "Token",
]
