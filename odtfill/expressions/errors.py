from __future__ import annotations


class ExpressionSyntaxError(ValueError):
    """Lexing or parsing error in a marker expression."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


class EvaluationError(Exception):
    """Expression is well-formed but cannot be evaluated on the given values."""
    pass


__all__ = ["ExpressionSyntaxError", "EvaluationError"]
