import json

import pytest

from geofence3d.cli import main
from geofence3d.coords import GeoPoint
from geofence3d.io import dumps
from geofence3d.polyhedral_surface import extract_geo_triangles
from geofence3d.primitives import box_mesh

ORIGIN_ARGS = ["--origin", "-0.1278", "51.5074"]


@pytest.fixture
def box_wkt(tmp_path, capsys):
    assert main(["box", "100", "100", "100", *ORIGIN_ARGS]) == 0
    text = capsys.readouterr().out
    path = tmp_path / "box.wkt"
    path.write_text(text)
    return path


def test_box_prints_wkt(capsys):
    assert main(["box", "10", "20", "30", *ORIGIN_ARGS, "--precision", "3", "--srid", "4326"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("SRID=4326;POLYHEDRALSURFACE Z (((")
    assert out.count("((") == 12


def test_validate_wkt(box_wkt, capsys):
    assert main(["validate", str(box_wkt), *ORIGIN_ARGS]) == 0
    out = capsys.readouterr().out
    assert out.startswith("valid: 12 triangles, 0 non-manifold edges")


def test_validate_json_report(tmp_path, capsys):
    triangles = extract_geo_triangles(box_mesh(10, 10, 10), GeoPoint(-0.1278, 51.5074))
    path = tmp_path / "box.json"
    path.write_text(dumps(triangles[:-1]))
    assert main(["validate", str(path), *ORIGIN_ARGS, "--json"]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["isValid"] is False
    assert report["triangleCount"] == 11
    assert report["nonManifoldEdgeCount"] == 3


def test_contains(box_wkt, capsys):
    assert main(["contains", str(box_wkt), *ORIGIN_ARGS,
                 "--point", "-0.1278", "51.5074", "10"]) == 0
    assert capsys.readouterr().out.strip() == "inside"

    assert main(["contains", str(box_wkt), *ORIGIN_ARGS,
                 "--point", "-0.1278", "51.5074", "80"]) == 1
    assert capsys.readouterr().out.strip() == "outside"

    assert main(["contains", str(box_wkt), *ORIGIN_ARGS,
                 "--point", "-0.1278", "51.5074", "50"]) == 0
    assert capsys.readouterr().out.strip() == "boundary"


def test_contains_json(box_wkt, capsys):
    assert main(["contains", str(box_wkt), *ORIGIN_ARGS,
                 "--point", "-0.1278", "51.5074", "--json"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result == {"inside": True, "onBoundary": False, "intersectionCount": 1}


def test_malformed_wkt(tmp_path, capsys):
    path = tmp_path / "bad.wkt"
    path.write_text("POINT (0 0)")
    assert main(["validate", str(path), *ORIGIN_ARGS]) == 2
    err = capsys.readouterr().err
    assert err.startswith("error: [G201] Invalid WKT format")


def test_missing_file(tmp_path, capsys):
    assert main(["validate", str(tmp_path / "nope.wkt"), *ORIGIN_ARGS]) == 2
    assert "error:" in capsys.readouterr().err


def test_bad_origin_arity():
    with pytest.raises(SystemExit) as exc_info:
        main(["box", "1", "1", "1", "--origin", "1"])
    assert exc_info.value.code == 2


def test_malformed_json(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    assert main(["validate", str(path), *ORIGIN_ARGS]) == 2
    err = capsys.readouterr().err
    assert err.startswith("error: [G006] Malformed triangle record at top level")
    assert "Traceback" not in err


def test_binary_input(tmp_path, capsys):
    path = tmp_path / "bad.wkt"
    path.write_bytes(b"\xff\xfe\x00")
    assert main(["validate", str(path), *ORIGIN_ARGS]) == 2
    assert capsys.readouterr().err.startswith("error:")
