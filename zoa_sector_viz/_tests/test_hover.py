"""
Tests for hover feature classification.
"""

import pytest

from zoa_sector_viz.config_types import PopupSettings
from zoa_sector_viz.hover import classify_hover, get_unique_layers
from zoa_sector_viz.layers import get_fill_paint, get_line_paint


def feature(layer_id, layer_type="fill", colored=True):
    paint_fn = get_fill_paint if layer_type == "fill" else get_line_paint
    return {
        "type": "Feature",
        "properties": {"minAlt": 0, "maxAlt": 100, "name": layer_id},
        "layer": {
            "id": f"{layer_id}_{layer_type}",
            "type": layer_type,
            "paint": paint_fn("#ff0000", colored),
        },
    }


@pytest.fixture
def mixed_features():
    """Two visible fills (one duplicated), one transparent fill, one line."""
    return [
        feature("S1_C1"),
        feature("S1_C1"),
        feature("S2_C1", colored=False),
        feature("Z1"),
        feature("Z1", layer_type="line"),
    ]


DEFAULT = PopupSettings()
SHOW_ALL = PopupSettings(show_unchecked_sectors=True)
SHOW_ALL_VISIBLE_ONLY = PopupSettings(
    show_unchecked_sectors=True, unchecked_sectors_in_visible_sectors_only=True
)


def ids(state):
    return [f["layer"]["id"] for f in state.hovered_polygons]


class TestUniqueLayers:
    def test_first_feature_per_layer_wins(self):
        first = feature("A")
        second = feature("A")
        second["properties"]["name"] = "second"
        assert get_unique_layers([first, second]) == [first]


class TestClassifyHover:
    def test_style_not_loaded(self, mixed_features):
        state = classify_hover(mixed_features, SHOW_ALL, style_loaded=False)
        assert state.hovered_polygons == []
        assert state.popup_visible is False

    def test_default_shows_visible_only(self, mixed_features):
        state = classify_hover(mixed_features, DEFAULT)
        assert ids(state) == ["S1_C1_fill", "Z1_fill"]
        assert state.popup_visible is True

    def test_show_unchecked_includes_transparent(self, mixed_features):
        state = classify_hover(mixed_features, SHOW_ALL)
        assert ids(state) == ["S1_C1_fill", "S2_C1_fill", "Z1_fill"]
        assert state.popup_visible is True

    def test_show_unchecked_over_transparent_only(self):
        state = classify_hover([feature("S2_C1", colored=False)], SHOW_ALL)
        assert ids(state) == ["S2_C1_fill"]
        assert state.popup_visible is True

    def test_visible_sectors_only_hides_over_transparent(self):
        state = classify_hover([feature("S2_C1", colored=False)], SHOW_ALL_VISIBLE_ONLY)
        assert ids(state) == ["S2_C1_fill"]
        assert state.popup_visible is False

    def test_default_over_transparent_only(self):
        state = classify_hover([feature("S2_C1", colored=False)], DEFAULT)
        assert state.hovered_polygons == []
        assert state.popup_visible is False

    def test_lines_are_ignored(self):
        state = classify_hover([feature("Z1", layer_type="line")], SHOW_ALL)
        assert state.hovered_polygons == []
        assert state.popup_visible is False

    def test_to_dict(self, mixed_features):
        d = classify_hover(mixed_features, DEFAULT).to_dict()
        assert set(d) == {"hoveredPolys", "vis"}
        assert d["vis"] is True
