"""
Unit tests for the polyhedral surface WKT lexer.
"""

import pytest

from geofence3d.errors import GrammarError
from geofence3d.wkt import Lexer, TokenType, tokenize


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_ewkt_empty_surface(self):
        """SRID prefix and EMPTY keyword tokenization."""
        tokens = tokenize("SRID=4326;POLYHEDRALSURFACE Z EMPTY")
        types = [t.type for t in tokens]
        assert types == [
            TokenType.WORD,
            TokenType.EQUALS,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
            TokenType.WORD,
            TokenType.WORD,
            TokenType.WORD,
            TokenType.EOF,
        ]
        assert tokens[2].value == 4326.0

    def test_words_are_upper_cased(self):
        """Keyword matching is case-insensitive; the lexeme is preserved."""
        token = tokenize("polyhedralSurface")[0]
        assert token.value == "POLYHEDRALSURFACE"
        assert token.lexeme == "polyhedralSurface"

    def test_offsets(self):
        """Tokens carry 0-indexed character offsets."""
        tokens = tokenize("  ((1 2")
        assert [t.offset for t in tokens] == [2, 3, 4, 6, 7]
        assert tokens[2].end == 5


class TestNumbers:
    """Numeric literal scanning."""

    @pytest.mark.parametrize("text,value", [
        ("42", 42.0),
        ("-0.1278", -0.1278),
        ("+3.", 3.0),
        (".5", 0.5),
        ("1e-9", 1e-9),
        ("-2.5E+3", -2500.0),
    ])
    def test_number_forms(self, text, value):
        token = tokenize(text)[0]
        assert token.type == TokenType.NUMBER
        assert token.value == value

    @pytest.mark.parametrize("text", ["abc", "1.2.3", "1e", "--1", "NaN"])
    def test_malformed_numbers_are_words(self, text):
        """The parser reports these with their coordinate context."""
        token = tokenize(text)[0]
        assert token.type == TokenType.WORD
        assert token.lexeme == text

    def test_numbers_split_on_delimiters(self):
        tokens = tokenize("1,2)")
        assert [t.type for t in tokens] == [
            TokenType.NUMBER,
            TokenType.COMMA,
            TokenType.NUMBER,
            TokenType.RPAREN,
            TokenType.EOF,
        ]


class TestErrors:
    """Characters outside the grammar."""

    def test_unexpected_character(self):
        with pytest.raises(GrammarError, match="unexpected character '\\['") as exc_info:
            tokenize("POLYHEDRALSURFACE Z [")
        assert exc_info.value.offset == 20
        assert exc_info.value.code == "G203"

    def test_unexpected_character_inside_run(self):
        with pytest.raises(GrammarError) as exc_info:
            tokenize("12#4")
        assert exc_info.value.offset == 2


def test_lexer_is_iterable():
    types = [t.type for t in Lexer("()")]
    assert types == [TokenType.LPAREN, TokenType.RPAREN, TokenType.EOF]
