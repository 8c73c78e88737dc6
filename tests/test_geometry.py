import json

import pytest

from medmap.geometry import GeometryError, feature_keys, geometry_key, join_report, load_geojson, validate_geojson
from medmap.snapshot import build_snapshot


def test_load_geojson(tmp_path, feature_collection):
    path = tmp_path / "map.json"
    path.write_text(json.dumps(feature_collection(["Karelia", "Komi"])), encoding="utf-8")
    data = load_geojson(path)
    assert feature_keys(data) == ["Karelia", "Komi"]


def test_load_geojson_missing(tmp_path):
    with pytest.raises(GeometryError):
        load_geojson(tmp_path / "nope.json")


def test_load_geojson_bad_json(tmp_path):
    path = tmp_path / "map.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(GeometryError):
        load_geojson(path)


@pytest.mark.parametrize("data", [[], {"type": "Feature"}, {"type": "FeatureCollection", "features": None}])
def test_validate_geojson_rejects(data):
    with pytest.raises(GeometryError):
        validate_geojson(data)


def test_feature_keys_custom_property_and_gaps(feature_collection):
    data = feature_collection(["Karelia", "Komi"], prop="name")
    data["features"].append({"type": "Feature", "properties": None, "geometry": None})
    assert feature_keys(data, prop="name") == ["Karelia", "Komi"]
    assert feature_keys(data) == []


def test_join_report(sample_csv):
    snap = build_snapshot(sample_csv)
    report = join_report(snap, ["Karelia", "Komi", "CityofSt.Petersburg", "Kaluga", "Omsk"])
    assert report.matched == ("Karelia", "Komi", "CityofSt.Petersburg")
    assert report.missing_geometry == ("Калужская область",)
    assert report.missing_data == ("Kaluga", "Omsk")
    assert report.suggestions["Калужская область"][0][0] == "Kaluga"
    assert not report.is_complete


def test_join_report_short_label_suggests_geometry_key():
    snap = build_snapshot("H1\nH2\nКарелия;99;120,0;45,2\n")
    report = join_report(snap, ["Karelia", "Komi"])
    assert report.missing_geometry == ("Карелия",)
    assert report.suggestions["Карелия"][0][0] == "Karelia"


def test_join_report_uses_alternate_geometry_spelling():
    snap = build_snapshot("H1\nH2\nАрхангельская обл;1;5;1\n")
    report = join_report(snap, ["Arkhangel'sk"])
    assert report.suggestions["Архангельская обл"][0][0] == "Arkhangel'sk"


def test_join_report_as_dict(sample_csv):
    snap = build_snapshot(sample_csv)
    d = join_report(snap, ["Karelia", "Komi", "CityofSt.Petersburg", "Kaluga"]).as_dict()
    assert d["matched"] == 3
    assert d["missing_geometry"] == ["Калужская область"]
    assert d["missing_data"] == ["Kaluga"]
    assert d["suggestions"]["Калужская область"][0]["key"] == "Kaluga"
    json.dumps(d, ensure_ascii=False)


def test_join_report_matches_alternate_spelling_on_map():
    snap = build_snapshot("H1\nH2\nАрхангельская обл. без АО;1;5;1\n")
    report = join_report(snap, ["Arkhangel'sk", "Komi"])
    assert report.matched == ("Arkhangelsk",)
    assert report.missing_geometry == ()
    assert report.missing_data == ("Komi",)
    assert report.is_complete


@pytest.mark.parametrize("key,expected", [("Karelia", "Karelia"), ("Arkhangelsk", "Arkhangel'sk"), ("Омск", "Омск")])
def test_geometry_key(key, expected):
    assert geometry_key(key, {"Karelia", "Arkhangel'sk"}) == expected


def test_load_geojson_directory(tmp_path):
    with pytest.raises(GeometryError):
        load_geojson(tmp_path)


def test_load_geojson_not_utf8(tmp_path):
    path = tmp_path / "map.json"
    path.write_bytes('{"type": "Карта"}'.encode("cp1251"))
    with pytest.raises(GeometryError):
        load_geojson(path)
