import pytest

from geofence3d.errors import EmptyInputError
from geofence3d.geo_triangles import GeoTriangle, GeoVertex
from geofence3d.wkt import (
    EMPTY_SURFACE,
    format_coordinate,
    format_empty_surface,
    format_polyhedral_surface,
    parse_polyhedral_surface,
)

TRIANGLE = GeoTriangle(
    GeoVertex(-0.1278, 51.5074, 0.0),
    GeoVertex(-0.127, 51.5074, 0.0),
    GeoVertex(-0.1274, 51.508, 50.0),
)


def test_format_coordinate():
    assert format_coordinate(TRIANGLE.v2) == "-0.12740000 51.50800000 50.00000000"
    assert format_coordinate(TRIANGLE.v2, 2) == "-0.13 51.51 50.00"


def test_single_triangle():
    text = format_polyhedral_surface([TRIANGLE], precision=4)
    assert text == (
        "POLYHEDRALSURFACE Z (("
        "(-0.1278 51.5074 0.0000, -0.1270 51.5074 0.0000, "
        "-0.1274 51.5080 50.0000, -0.1278 51.5074 0.0000)"
        "))"
    )


def test_polygons_are_comma_separated():
    text = format_polyhedral_surface([TRIANGLE, TRIANGLE])
    assert text.count("((") == 2
    assert ")), ((" in text


def test_accepts_plain_dicts():
    text = format_polyhedral_surface([TRIANGLE.to_dict()], precision=1)
    assert text.startswith("POLYHEDRALSURFACE Z (((-0.1 51.5 0.0,")


def test_srid_prefix():
    text = format_polyhedral_surface([TRIANGLE], srid=4326)
    assert text.startswith("SRID=4326;POLYHEDRALSURFACE Z (")


def test_output_parses_back():
    text = format_polyhedral_surface([TRIANGLE], srid=4326)
    assert parse_polyhedral_surface(text) == [TRIANGLE]


def test_empty_input_raises():
    with pytest.raises(EmptyInputError, match="no triangular faces"):
        format_polyhedral_surface([])


def test_empty_surface_literal():
    assert format_empty_surface() == EMPTY_SURFACE == "POLYHEDRALSURFACE Z EMPTY"
    assert format_empty_surface(4326) == "SRID=4326;POLYHEDRALSURFACE Z EMPTY"
    assert parse_polyhedral_surface(format_empty_surface(4326)) == []
