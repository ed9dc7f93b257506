"""
Lexer for POLYHEDRALSURFACE WKT/EWKT text.

Converts source text into a stream of tokens for the parser.
Supports:
- Single-character delimiters: ( ) , ; =
- Numbers with optional sign, fraction and exponent
- Bare words (keywords, dimension qualifiers and anything else made of
  letters, digits, '_', '.', '+' and '-'); the parser decides what a
  word may be, so malformed numbers like ``abc`` or ``1.2.3`` reach it
  as words and are reported with their surrounding coordinate.
"""

import re
from typing import Iterator, List

from geofence3d.errors import error_unexpected_character
from .tokens import DELIMITERS, Token, TokenType

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")
_WORD_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.+-"
)


class Lexer:
    """
    Tokenizer for polyhedral surface WKT.

    Usage:
        lexer = Lexer(text)
        tokens = lexer.tokenize()

    Or for streaming:
        for token in Lexer(text):
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _peek(self) -> str:
        if self.pos >= len(self.source):
            return "\0"
        return self.source[self.pos]

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self.source[self.pos].isspace():
            self.pos += 1

    def _scan_run(self) -> Token:
        """Scan a maximal run of word characters into a NUMBER or WORD."""
        start = self.pos
        while not self._is_at_end():
            ch = self.source[self.pos]
            if ch.isspace() or ch in DELIMITERS:
                break
            if ch not in _WORD_CHARS:
                raise error_unexpected_character(ch, self.pos, self.source)
            self.pos += 1

        lexeme = self.source[start:self.pos]
        if _NUMBER_RE.match(lexeme):
            return Token(TokenType.NUMBER, float(lexeme), lexeme, start)
        return Token(TokenType.WORD, lexeme.upper(), lexeme, start)

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_whitespace()
        if self._is_at_end():
            return Token(TokenType.EOF, None, "", self.pos)

        ch = self._peek()
        if ch in DELIMITERS:
            token = Token(DELIMITERS[ch], ch, ch, self.pos)
            self.pos += 1
            return token
        return self._scan_run()

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, ending with an EOF token."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Convenience function to tokenize WKT text."""
    return Lexer(source).tokenize()
