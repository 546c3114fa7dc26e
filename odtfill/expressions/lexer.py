"""
Lexer for marker expressions.

Splits an expression into meaningful elements:
- Literals (numbers, quoted strings)
- Keywords (true, false, null, undefined)
- Identifiers (Unicode names: liste_départements, élément)
- Operators (&&, ||, !, comparisons, unary minus)
- Symbols (parentheses, brackets, member access)
- Whitespace (ignored)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List

from .errors import ExpressionSyntaxError


@dataclass
class Token:
    """
    Expression token.

    Attributes:
        type: Token type (NUMBER, STRING, KEYWORD, IDENTIFIER, OPERATOR, SYMBOL, EOF)
        value: Token text (unquoted for STRING)
        position: Offset in the source expression
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ExpressionLexer:
    """
    Splits an expression string into tokens.

    Supported tokens:
    - NUMBER: 12, 3.5
    - STRING: 'text' or "text" with backslash escapes
    - KEYWORD: true, false, null, undefined
    - IDENTIFIER: names and member names
    - OPERATOR: === !== == != <= >= < > && || ! -
    - SYMBOL: ( ) [ ] . ?.
    - EOF: end of input
    """

    # (regex_pattern, token_type, ignore_flag); order matters: longest operators first
    TOKEN_SPECS = [
        (r'\s+', 'WHITESPACE', True),

        (r'\d+(?:\.\d+)?', 'NUMBER', False),
        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),

        (r'===|!==|==|!=|<=|>=|&&|\|\|', 'OPERATOR', False),
        (r'[<>!\-]', 'OPERATOR', False),

        (r'\?\.', 'SYMBOL', False),
        (r'[()\[\].]', 'SYMBOL', False),

        # Unicode letters, digits and underscores, not starting with a digit
        (r'[^\W\d]\w*', 'IDENTIFIER', False),

        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {'true', 'false', 'null', 'undefined'}

    _ESCAPES = {'n': '\n', 't': '\t', 'r': '\r'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Splits text into tokens.

        Args:
            text: Expression source

        Returns:
            Tokens, terminated by EOF

        Raises:
            ExpressionSyntaxError: on an unexpected character
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    if token_type == 'UNKNOWN':
                        raise ExpressionSyntaxError(f"Unexpected character '{value}'", position)

                    final_type = token_type
                    if token_type == 'IDENTIFIER' and value in self.KEYWORDS:
                        final_type = 'KEYWORD'
                    elif token_type == 'STRING':
                        value = self._unquote(value)

                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens

    def tokenize_stream(self, text: str) -> Iterator[Token]:
        for token in self.tokenize(text):
            yield token

    def _unquote(self, literal: str) -> str:
        body = literal[1:-1]
        out: List[str] = []
        i = 0
        while i < len(body):
            ch = body[i]
            if ch == '\\' and i + 1 < len(body):
                nxt = body[i + 1]
                out.append(self._ESCAPES.get(nxt, nxt))
                i += 2
                continue
            out.append(ch)
            i += 1
        return ''.join(out)
