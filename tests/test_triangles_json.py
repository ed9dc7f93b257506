import json

import pytest

from geofence3d.errors import StructuralError
from geofence3d.geo_triangles import GeoTriangle, GeoVertex
from geofence3d.io import dumps, loads, triangles_from_json_data, triangles_to_json_data

TRIANGLE = GeoTriangle(
    GeoVertex(-0.1278, 51.5074, 0.0),
    GeoVertex(-0.127, 51.5074, 0.0),
    GeoVertex(-0.1274, 51.508, 50.0),
)


def test_json_shape():
    data = triangles_to_json_data([TRIANGLE])
    assert data == [{
        "v0": {"longitude": -0.1278, "latitude": 51.5074, "altitude": 0.0},
        "v1": {"longitude": -0.127, "latitude": 51.5074, "altitude": 0.0},
        "v2": {"longitude": -0.1274, "latitude": 51.508, "altitude": 50.0},
    }]


def test_dumps_loads():
    text = dumps([TRIANGLE, TRIANGLE], indent=2)
    assert isinstance(json.loads(text), list)
    assert loads(text) == [TRIANGLE, TRIANGLE]


def test_integer_components_are_accepted():
    data = [{
        "v0": {"longitude": 0, "latitude": 0, "altitude": 0},
        "v1": {"longitude": 1, "latitude": 0, "altitude": 0},
        "v2": {"longitude": 0, "latitude": 1, "altitude": 0},
    }]
    tri = triangles_from_json_data(data)[0]
    assert tri.v1 == GeoVertex(1.0, 0.0, 0.0)
    assert isinstance(tri.v1.longitude, float)


def test_top_level_must_be_array():
    with pytest.raises(StructuralError, match="top level"):
        triangles_from_json_data({"v0": {}})


def test_missing_vertex_names_record():
    data = triangles_to_json_data([TRIANGLE, TRIANGLE])
    del data[1]["v2"]
    with pytest.raises(StructuralError, match=r"\[1\]: missing 'v2'"):
        triangles_from_json_data(data)


def test_missing_component():
    data = triangles_to_json_data([TRIANGLE])
    del data[0]["v1"]["altitude"]
    with pytest.raises(StructuralError, match=r"\[0\]\.v1: missing 'altitude'"):
        triangles_from_json_data(data)


@pytest.mark.parametrize("value", ["1.0", None, True, float("inf")])
def test_bad_component_values(value):
    data = triangles_to_json_data([TRIANGLE])
    data[0]["v0"]["latitude"] = value
    with pytest.raises(StructuralError, match="latitude"):
        triangles_from_json_data(data)


def test_record_must_be_object():
    with pytest.raises(StructuralError, match="expected an object"):
        triangles_from_json_data([[1, 2, 3]])


@pytest.mark.parametrize("text", ["{not json", "", "[1, 2"])
def test_invalid_json_is_structural_error(text):
    with pytest.raises(StructuralError, match="top level: invalid JSON"):
        loads(text)


def test_deeply_nested_json_is_structural_error():
    with pytest.raises(StructuralError, match="nested too deeply"):
        loads("[" * 100000 + "]" * 100000)
