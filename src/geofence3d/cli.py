"""Command-line entry point for geofence3d.

Subcommands::

    geofence3d validate FILE --origin LON LAT [ALT] [--tolerance T] [--json]
    geofence3d contains FILE --origin LON LAT [ALT] --point LON LAT [ALT] [--json]
    geofence3d box WIDTH HEIGHT DEPTH --origin LON LAT [ALT] [--precision N] [--srid N]

``FILE`` holds either POLYHEDRALSURFACE WKT or, when it ends in ``.json``,
a triangle list as written by ``geofence3d.io.dumps``.  ``-`` reads stdin.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from geofence3d.config import GeofenceConfig
from geofence3d.containment import is_coords_in_geo_triangles
from geofence3d.coords import GeoPoint
from geofence3d.errors import GeofenceError
from geofence3d.geo_triangles import GeoTriangle
from geofence3d.io import loads
from geofence3d.polyhedral_surface import mesh_to_wkt
from geofence3d.primitives import box_mesh
from geofence3d.validation import validate_geo_triangles
from geofence3d.wkt import parse_polyhedral_surface

logger = logging.getLogger(__name__)

EXIT_ERROR = 2


def _geo_point(values: Sequence[float]) -> GeoPoint:
    altitude = values[2] if len(values) > 2 else 0.0
    return GeoPoint(values[0], values[1], altitude)


def _coords_arg(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from exc


def _read_triangles(path: str, config: GeofenceConfig) -> List[GeoTriangle]:
    text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    if path.lower().endswith(".json"):
        return loads(text)
    return parse_polyhedral_surface(text, config.closure_tolerance, config.min_triangle_area)


def _add_origin(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--origin",
        nargs="+",
        type=_coords_arg,
        required=True,
        metavar="LON LAT [ALT]",
        help="Geographic origin of the local frame.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geofence3d",
        description="Validate and query 3D geofence polyhedral surfaces.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check that a surface is watertight.")
    validate.add_argument("file", help="WKT or .json triangle file, '-' for stdin.")
    _add_origin(validate)
    validate.add_argument("--tolerance", type=float, default=None,
                          help="Vertex merge tolerance in meters.")
    validate.add_argument("--json", action="store_true", help="Print the report as JSON.")

    contains = sub.add_parser("contains", help="Test whether a coordinate lies inside a surface.")
    contains.add_argument("file", help="WKT or .json triangle file, '-' for stdin.")
    _add_origin(contains)
    contains.add_argument("--point", nargs="+", type=_coords_arg, required=True,
                          metavar="LON LAT [ALT]", help="Coordinate to test.")
    contains.add_argument("--json", action="store_true", help="Print the result as JSON.")

    box = sub.add_parser("box", help="Print an axis-aligned box geofence as WKT.")
    box.add_argument("width", type=float, help="East-west extent in meters.")
    box.add_argument("height", type=float, help="Vertical extent in meters.")
    box.add_argument("depth", type=float, help="North-south extent in meters.")
    _add_origin(box)
    box.add_argument("--precision", type=int, default=None, help="Decimal places.")
    box.add_argument("--srid", type=int, default=None, help="Prefix the output with SRID=<n>;")

    return parser


def _check_coords(parser: argparse.ArgumentParser, name: str, values: Sequence[float]) -> None:
    if not 2 <= len(values) <= 3:
        parser.error(f"--{name} takes LON LAT [ALT]")


def _run_validate(args: argparse.Namespace, config: GeofenceConfig) -> int:
    triangles = _read_triangles(args.file, config)
    result = validate_geo_triangles(triangles, _geo_point(args.origin), args.tolerance, config)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        status = "valid" if result.is_valid else "invalid"
        print(f"{status}: {result.triangle_count} triangles, "
              f"{result.non_manifold_edge_count} non-manifold edges")
        for msg in result.errors:
            print(f"  - {msg}")
    return 0 if result.is_valid else 1


def _run_contains(args: argparse.Namespace, config: GeofenceConfig) -> int:
    triangles = _read_triangles(args.file, config)
    result = is_coords_in_geo_triangles(_geo_point(args.point), triangles,
                                        _geo_point(args.origin), config)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.on_boundary:
        print("boundary")
    else:
        print("inside" if result.inside else "outside")
    return 0 if result.inside else 1


def _run_box(args: argparse.Namespace, config: GeofenceConfig) -> int:
    mesh = box_mesh(args.width, args.height, args.depth)
    print(mesh_to_wkt(mesh, _geo_point(args.origin), args.precision, args.srid, config))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _check_coords(parser, "origin", args.origin)
    if args.command == "contains":
        _check_coords(parser, "point", args.point)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    handlers = {
        "validate": _run_validate,
        "contains": _run_contains,
        "box": _run_box,
    }
    try:
        config = GeofenceConfig.from_env()
        return handlers[args.command](args, config)
    except (GeofenceError, OSError, UnicodeDecodeError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
