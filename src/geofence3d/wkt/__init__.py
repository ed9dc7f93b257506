"""
POLYHEDRALSURFACE WKT reading and writing.

Usage:
    from geofence3d.wkt import parse_polyhedral_surface, format_polyhedral_surface

    triangles = parse_polyhedral_surface("SRID=4326;POLYHEDRALSURFACE Z (...)")
    text = format_polyhedral_surface(triangles, precision=8)
"""

from .tokens import Token, TokenType
from .lexer import Lexer, tokenize
from .parser import CLOSURE_TOLERANCE, Parser, parse_polyhedral_surface
from .writer import (
    EMPTY_SURFACE,
    format_coordinate,
    format_empty_surface,
    format_polyhedral_surface,
)

__all__ = [
    "CLOSURE_TOLERANCE",
    "EMPTY_SURFACE",
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "format_coordinate",
    "format_empty_surface",
    "format_polyhedral_surface",
    "parse_polyhedral_surface",
    "tokenize",
]
