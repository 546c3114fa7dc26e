"""
Recursive-descent parser for marker expressions.

Builds an AST from the token sequence, honoring operator precedence
and parenthesized grouping.

Grammar:
expression  → or_expr
or_expr     → and_expr ("||" and_expr)*
and_expr    → not_expr ("&&" not_expr)*
not_expr    → "!" not_expr | comparison
comparison  → unary (COMPARE_OP unary)?
unary       → "-" unary | postfix
postfix     → primary (("." | "?.") IDENTIFIER | "[" expression "]")*
primary     → NUMBER | STRING | KEYWORD | IDENTIFIER | "(" expression ")"
"""

from __future__ import annotations

from typing import List

from .errors import ExpressionSyntaxError
from .lexer import ExpressionLexer, Token
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

COMPARE_OPERATORS = ('===', '!==', '==', '!=', '<=', '>=', '<', '>')

_KEYWORD_VALUES = {
    'true': True,
    'false': False,
    'null': None,
    'undefined': None,
}


class ExpressionParser:
    """
    Recursive-descent expression parser.

    Turns the token list into an abstract syntax tree.
    """

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, expression: str) -> Expression:
        """
        Parses an expression string into an AST.

        Args:
            expression: Expression source

        Returns:
            Root AST node

        Raises:
            ExpressionSyntaxError: on lexing or syntax errors
        """
        self._tokens = self.lexer.tokenize(expression)
        self._position = 0

        if len(self._tokens) == 1:
            raise ExpressionSyntaxError("Empty expression", 0)

        result = self._parse_or()

        if not self._is_at_end():
            current = self._current_token()
            raise ExpressionSyntaxError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_or(self) -> Expression:
        """Lowest precedence: ||"""
        left = self._parse_and()
        while self._match_operator("||"):
            right = self._parse_and()
            left = LogicalExpression(left=left, right=right, operator=ExpressionType.OR)
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_not()
        while self._match_operator("&&"):
            right = self._parse_not()
            left = LogicalExpression(left=left, right=right, operator=ExpressionType.AND)
        return left

    def _parse_not(self) -> Expression:
        if self._match_operator("!"):
            # right-associative
            return NotExpression(operand=self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Expression:
        left = self._parse_unary()
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value in COMPARE_OPERATORS:
            self._advance()
            right = self._parse_unary()
            return CompareExpression(left=left, right=right, operator=current.value)
        return left

    def _parse_unary(self) -> Expression:
        if self._match_operator("-"):
            return NegateExpression(operand=self._parse_unary())
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        expr = self._parse_primary()
        while True:
            if self._match_symbol(".") or self._match_symbol("?."):
                name_token = self._consume_identifier("Expected member name after '.'")
                expr = MemberExpression(target=expr, name=name_token.value)
            elif self._match_symbol("["):
                index = self._parse_or()
                if not self._match_symbol("]"):
                    raise ExpressionSyntaxError("Expected ']' after index", self._current_position())
                expr = IndexExpression(target=expr, index=index)
            else:
                return expr

    def _parse_primary(self) -> Expression:
        current = self._current_token()

        if self._match_symbol("("):
            expr = self._parse_or()
            if not self._match_symbol(")"):
                raise ExpressionSyntaxError("Expected ')' after grouped expression", self._current_position())
            return GroupExpression(expression=expr)

        if current.type == 'NUMBER':
            self._advance()
            value = float(current.value) if '.' in current.value else int(current.value)
            return LiteralExpression(value=value)

        if current.type == 'STRING':
            self._advance()
            return LiteralExpression(value=current.value)

        if current.type == 'KEYWORD':
            self._advance()
            return LiteralExpression(value=_KEYWORD_VALUES[current.value])

        if current.type == 'IDENTIFIER':
            self._advance()
            return NameExpression(name=current.value)

        if current.type == 'EOF':
            raise ExpressionSyntaxError("Unexpected end of expression", current.position)
        raise ExpressionSyntaxError(f"Unexpected token '{current.value}'", current.position)

    # Token helpers

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            return Token(type='EOF', value='', position=len(self._tokens))
        return self._tokens[self._position]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._position += 1
        return self._tokens[self._position - 1] if self._position > 0 else self._current_token()

    def _match_operator(self, operator: str) -> bool:
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value == operator:
            self._advance()
            return True
        return False

    def _match_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        if current.type == 'SYMBOL' and current.value == symbol:
            self._advance()
            return True
        return False

    def _consume_identifier(self, error_message: str) -> Token:
        current = self._current_token()
        # keywords are valid member names: item.null is unusual but legal
        if current.type in ('IDENTIFIER', 'KEYWORD'):
            return self._advance()
        raise ExpressionSyntaxError(error_message, current.position)
