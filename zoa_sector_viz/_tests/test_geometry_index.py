"""
Tests for SourceGeometryIndex point queries against GeoJSON sources.
"""

from zoa_sector_viz.geometry_index import SourceGeometryIndex
from zoa_sector_viz.layers import get_fill_paint

from conftest import square, write_polygon


def fill_definition(source_id, visible=True):
    return {
        "id": f"{source_id}_fill",
        "source": source_id,
        "type": "fill",
        "paint": get_fill_paint("#ff0000", True),
        "visible": visible,
    }


def line_definition(source_id):
    return dict(fill_definition(source_id), id=f"{source_id}_line", type="line")


class TestQuery:
    def test_point_inside_polygon(self, tmp_path):
        write_polygon(tmp_path / "a.geojson", square(0, 0), minAlt=0, maxAlt=120)
        index = SourceGeometryIndex(tmp_path, [{"id": "A", "url": "a.geojson"}])

        features = index.query(0.5, 0.5, [fill_definition("A")])

        assert len(features) == 1
        f = features[0]
        assert f["layer"]["id"] == "A_fill"
        assert f["layer"]["type"] == "fill"
        assert f["source"] == "A"
        assert f["properties"]["maxAlt"] == 120
        assert f["geometry"]["type"] == "Polygon"

    def test_point_outside_polygon(self, tmp_path):
        write_polygon(tmp_path / "a.geojson", square(0, 0), minAlt=0, maxAlt=120)
        index = SourceGeometryIndex(tmp_path, [{"id": "A", "url": "a.geojson"}])
        assert index.query(5.0, 5.0, [fill_definition("A")]) == []

    def test_hidden_and_line_layers_skipped(self, tmp_path):
        write_polygon(tmp_path / "a.geojson", square(0, 0), minAlt=0, maxAlt=120)
        index = SourceGeometryIndex(tmp_path, [{"id": "A", "url": "a.geojson"}])
        assert index.query(0.5, 0.5, [fill_definition("A", visible=False)]) == []
        assert index.query(0.5, 0.5, [line_definition("A")]) == []

    def test_missing_altitudes_filtered(self, tmp_path):
        write_polygon(tmp_path / "a.geojson", square(0, 0), minAlt=0)
        index = SourceGeometryIndex(tmp_path, [{"id": "A", "url": "a.geojson"}])
        assert index.query(0.5, 0.5, [fill_definition("A")]) == []

    def test_missing_file_logged_and_skipped(self, tmp_path, caplog):
        index = SourceGeometryIndex(tmp_path, [{"id": "A", "url": "nope.geojson"}])
        assert index.query(0.5, 0.5, [fill_definition("A")]) == []
        assert "not found" in caplog.text

    def test_shared_url_reported_per_layer(self, tmp_path):
        write_polygon(tmp_path / "wx.geojson", square(0, 0), minAlt=0, maxAlt=50)
        index = SourceGeometryIndex(
            tmp_path,
            [{"id": "D1_W", "url": "wx.geojson"}, {"id": "D1_X", "url": "wx.geojson"}],
        )
        features = index.query(0.5, 0.5, [fill_definition("D1_W"), fill_definition("D1_X")])
        assert [f["layer"]["id"] for f in features] == ["D1_W_fill", "D1_X_fill"]
