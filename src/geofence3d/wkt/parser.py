"""
Recursive descent parser for POLYHEDRALSURFACE WKT/EWKT.

Grammar (keywords are case-insensitive):

    surface    := [ "SRID" "=" int ";" ] "POLYHEDRALSURFACE" [ dim ] body
    dim        := "Z" | "ZM" | "M"
    body       := "EMPTY" | "(" [ polygon { "," polygon } ] ")"
    polygon    := "(" ring ")"
    ring       := "(" coordinate { "," coordinate } ")"
    coordinate := number number number [ number ]

Only single-ring polygons are accepted.  Each ring is closure-checked,
its closing point dropped, and the remaining vertices triangulated.
"""

import logging
import math
from typing import List, Optional, Tuple

from geofence3d.errors import (
    error_interior_ring,
    error_invalid_coordinate,
    error_invalid_format,
    error_ring_not_closed,
    error_too_few_coordinates,
    error_unexpected_token,
)
from geofence3d.coords import geo_axis_scale
from geofence3d.geo_triangles import GeoTriangle, GeoVertex
from geofence3d.triangulator import MIN_AREA, triangulate_ring
from .lexer import tokenize
from .tokens import (
    DIMENSIONS,
    KEYWORD_EMPTY,
    KEYWORD_SRID,
    KEYWORD_SURFACE,
    Token,
    TokenType,
)

logger = logging.getLogger(__name__)

CLOSURE_TOLERANCE = 1e-9

Coordinate = Tuple[float, float, float]


class Parser:
    """
    Parser for a single POLYHEDRALSURFACE geometry.

    Usage:
        parser = Parser(text)
        triangles = parser.parse()

    After parsing, ``srid`` holds the EWKT SRID (or ``None``) and
    ``dimension`` the qualifier that followed the keyword (or ``None``).
    """

    def __init__(self, source: str, closure_tolerance: float = CLOSURE_TOLERANCE,
                 min_area: float = MIN_AREA):
        self.source = source.strip()
        self.closure_tolerance = closure_tolerance
        self.min_area = min_area
        self.tokens: List[Token] = []
        self.pos = 0
        self.srid: Optional[int] = None
        self.dimension: Optional[str] = None
        self.polygon_count = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _check_word(self, word: str) -> bool:
        token = self._current()
        return token.type == TokenType.WORD and token.value == word

    def _advance(self) -> Token:
        token = self._current()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(expected)

    def _error(self, expected: str):
        token = self._current()
        return error_unexpected_token(expected, token.describe(), token.offset, self.source)

    # =========================================================================
    # Grammar
    # =========================================================================

    def parse(self) -> List[GeoTriangle]:
        """Parse the source into triangles (empty for EMPTY surfaces)."""
        self.tokens = tokenize(self.source)
        self.pos = 0

        self._parse_srid()
        self._parse_header()

        if self._check_word(KEYWORD_EMPTY):
            self._advance()
            self._consume(TokenType.EOF, "end of input after EMPTY")
            logger.debug("parsed empty polyhedral surface")
            return []

        if not self._check(TokenType.LPAREN):
            raise error_invalid_format(self.source)
        self._advance()

        triangles: List[GeoTriangle] = []
        if not self._check(TokenType.RPAREN):
            triangles.extend(self._parse_polygon())
            while self._check(TokenType.COMMA):
                self._advance()
                triangles.extend(self._parse_polygon())
        self._consume(TokenType.RPAREN, "',' or ')' after polygon")
        self._consume(TokenType.EOF, "end of input after POLYHEDRALSURFACE body")

        logger.debug("parsed %d polygons into %d triangles", self.polygon_count, len(triangles))
        return triangles

    def _parse_srid(self) -> None:
        if not self._check_word(KEYWORD_SRID):
            return
        self._advance()
        self._consume(TokenType.EQUALS, "'=' after SRID")
        token = self._consume(TokenType.NUMBER, "integer SRID")
        if not float(token.value).is_integer():
            raise error_unexpected_token("integer SRID", token.describe(), token.offset, self.source)
        self.srid = int(token.value)
        self._consume(TokenType.SEMICOLON, "';' after SRID")

    def _parse_header(self) -> None:
        token = self._current()
        if token.type != TokenType.WORD or not token.value.startswith(KEYWORD_SURFACE):
            raise error_invalid_format(self.source)
        suffix = token.value[len(KEYWORD_SURFACE):]
        if suffix and suffix not in DIMENSIONS:
            raise error_invalid_format(self.source)
        self._advance()
        if suffix:
            self.dimension = suffix
        elif self._current().type == TokenType.WORD and self._current().value in DIMENSIONS:
            self.dimension = self._advance().value

    def _parse_polygon(self) -> List[GeoTriangle]:
        start = self._consume(TokenType.LPAREN, "'(' to open a polygon")
        ring = self._parse_ring()

        if self._check(TokenType.COMMA) and self._peek().type == TokenType.LPAREN:
            raise error_interior_ring(self._current().offset, self.source)
        self._consume(TokenType.RPAREN, "')' to close the polygon")
        self.polygon_count += 1

        if len(ring) < 4:
            raise error_too_few_coordinates(len(ring), start.offset)
        self._check_closure(ring)

        vertices = [coord for coord, _, _ in ring[:-1]]
        return [
            GeoTriangle(GeoVertex(*a), GeoVertex(*b), GeoVertex(*c))
            for a, b, c in triangulate_ring(
                vertices, self.min_area, geo_axis_scale(vertices[0][1])
            )
        ]

    def _parse_ring(self) -> List[Tuple[Coordinate, str, int]]:
        self._consume(TokenType.LPAREN, "'(' to open a polygon ring")
        ring = [self._parse_coordinate()]
        while self._check(TokenType.COMMA):
            self._advance()
            ring.append(self._parse_coordinate())
        self._consume(TokenType.RPAREN, "',' or ')' in polygon ring")
        return ring

    def _parse_coordinate(self) -> Tuple[Coordinate, str, int]:
        fields: List[Token] = []
        while self._current().type in (TokenType.NUMBER, TokenType.WORD):
            fields.append(self._advance())

        if not fields:
            raise self._error("a coordinate")

        offset = fields[0].offset
        text = self.source[offset:fields[-1].end]
        for field in fields:
            if field.type != TokenType.NUMBER:
                raise error_invalid_coordinate(
                    text, offset, f"contains a non-numeric value '{field.lexeme}'"
                )
            if not math.isfinite(field.value):
                raise error_invalid_coordinate(
                    text, offset, f"contains a non-finite numeric value '{field.lexeme}'"
                )
        if len(fields) < 3:
            raise error_invalid_coordinate(
                text, offset, f"has {len(fields)} numeric values, expected at least 3"
            )
        if len(fields) > 4:
            raise error_invalid_coordinate(
                text, offset, f"has {len(fields)} numeric values, expected at most 4"
            )
        coord = (fields[0].value, fields[1].value, fields[2].value)
        return coord, text, offset

    def _check_closure(self, ring: List[Tuple[Coordinate, str, int]]) -> None:
        first, first_text, _ = ring[0]
        last, last_text, last_offset = ring[-1]
        tol = self.closure_tolerance
        if any(abs(a - b) > tol for a, b in zip(first, last)):
            raise error_ring_not_closed(first_text, last_text, last_offset)


def parse_polyhedral_surface(text: str, closure_tolerance: float = CLOSURE_TOLERANCE,
                             min_area: float = MIN_AREA) -> List[GeoTriangle]:
    """Parse POLYHEDRALSURFACE WKT (or SRID-prefixed EWKT) into triangles.

    Raises ``GrammarError`` (or its ``RingClosureError`` /
    ``UnsupportedFeatureError`` subclasses) for malformed text and
    ``DegenerateGeometryError`` for rings that cannot be triangulated.
    Ring areas are compared against ``min_area`` in square meters, using
    the local scale of each ring's first vertex.
    """
    return Parser(text, closure_tolerance, min_area).parse()
