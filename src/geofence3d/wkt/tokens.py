"""
Token types for the polyhedral surface WKT lexer.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """All token types recognized by the WKT lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, -0.1278, 1e-9

    # --- Words ---
    WORD = auto()               # POLYHEDRALSURFACE, Z, EMPTY, SRID, or junk

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    COMMA = auto()              # ,
    SEMICOLON = auto()          # ; (ends the EWKT SRID prefix)
    EQUALS = auto()             # = (inside the EWKT SRID prefix)

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # float for NUMBER, upper-cased str for WORD
    lexeme: str             # The original source text
    offset: int             # 0-indexed character offset of the first character

    @property
    def end(self) -> int:
        return self.offset + len(self.lexeme)

    def describe(self) -> str:
        """Short human-readable form for error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.lexeme}'"

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.WORD):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keywords recognized by the parser (case-insensitive)
KEYWORD_SURFACE = "POLYHEDRALSURFACE"
KEYWORD_EMPTY = "EMPTY"
KEYWORD_SRID = "SRID"

# Dimension qualifiers; a measure ordinate is always accepted and ignored
DIMENSIONS: frozenset[str] = frozenset({"Z", "ZM", "M"})

# Single-character delimiters
DELIMITERS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "=": TokenType.EQUALS,
}
