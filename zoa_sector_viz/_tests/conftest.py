"""
Shared fixtures: a small catalog and cascade covering every area kind.

    Area A  independent  configs C1/C2, sectors S1/S2, one polygon per config
    Area D  dependent    configs W/E/X, sector D1 (W and X share a polygon)
    Center  simple       sectors Z1/Z2

    Flow W: P=[PW];          Q=[Q1, Q2] -> Area D = X if Q is Q2 else W
    Flow E: P=[P1, P2] keep; Q=[Q2]     -> Area D = E if P is P1 else X
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from zoa_sector_viz.cascade import CascadeRules
from zoa_sector_viz.catalog import load_catalog
from zoa_sector_viz.config_types import AppConfig
from zoa_sector_viz.display_state import DisplayStateStore
from zoa_sector_viz.geometry_index import SourceGeometryIndex
from zoa_sector_viz.layers import LayerMaterializer
from zoa_sector_viz.session import DisplaySession


MINI_CATALOG: Dict[str, Any] = {
    "areas": [
        {
            "name": "Area A",
            "kind": "independent",
            "defaultConfig": "C1",
            "possibleConfigs": ["C1", "C2"],
            "sectorConfigs": [
                {
                    "sectorName": "S1",
                    "defaultColor": "#ff0000",
                    "configPolyUrls": [
                        {"configs": ["C1"], "url": "a/s1_c1.geojson"},
                        {"configs": ["C2"], "url": "a/s1_c2.geojson"},
                    ],
                },
                {
                    "sectorName": "S2",
                    "defaultColor": "#00ff00",
                    "configPolyUrls": [
                        {"configs": ["C1"], "url": "a/s2_c1.geojson"},
                        {"configs": ["C2"], "url": "a/s2_c2.geojson"},
                    ],
                },
            ],
        },
        {
            "name": "Area D",
            "kind": "dependent",
            "defaultConfig": "W",
            "possibleConfigs": ["W", "E", "X"],
            "sectorConfigs": [
                {
                    "sectorName": "D1",
                    "defaultColor": "#0000ff",
                    "configPolyUrls": [
                        {"configs": ["W", "X"], "url": "d/d1_wx.geojson"},
                        {"configs": ["E"], "url": "d/d1_e.geojson"},
                    ],
                },
            ],
        },
        {
            "name": "Center",
            "kind": "simple",
            "sectors": [
                {"sectorName": "Z1", "defaultColor": "#ffff00", "polyUrl": "center/z1.geojson"},
                {"sectorName": "Z2", "defaultColor": "#00ffff", "polyUrl": "center/z2.geojson"},
            ],
        },
    ]
}

MINI_CASCADE: Dict[str, Any] = {
    "root": {"name": "Flow", "options": ["W", "E"], "default": "W"},
    "selectors": ["P", "Q"],
    "rules": {
        "W": {
            "selectors": {
                "P": {"options": ["PW"], "default": "PW"},
                "Q": {"options": ["Q1", "Q2"], "default": "Q1"},
            },
            "areas": {"Area D": {"selector": "Q", "map": {"Q2": "X"}, "fallback": "W"}},
        },
        "E": {
            "selectors": {
                "P": {"options": ["P1", "P2"], "default": "P1", "preserve": True},
                "Q": {"options": ["Q2"], "default": "Q2"},
            },
            "areas": {"Area D": {"selector": "P", "map": {"P1": "E"}, "fallback": "X"}},
        },
    },
}


def square(lon: float, lat: float, size: float = 1.0) -> List[List[float]]:
    """Closed square ring with its south-west corner at (lon, lat)."""
    return [
        [lon, lat],
        [lon + size, lat],
        [lon + size, lat + size],
        [lon, lat + size],
        [lon, lat],
    ]


def write_polygon(path: Path, ring: List[List[float]], **properties: Any) -> None:
    """Write a one-feature GeoJSON FeatureCollection."""
    path.parent.mkdir(parents=True, exist_ok=True)
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": properties,
                "geometry": {"type": "Polygon", "coordinates": [ring]},
            }
        ],
    }
    path.write_text(json.dumps(collection), encoding="utf-8")


@pytest.fixture
def catalog_data():
    return copy.deepcopy(MINI_CATALOG)


@pytest.fixture
def catalog(catalog_data):
    return load_catalog(catalog_data)


@pytest.fixture
def rules():
    return CascadeRules.from_dict(copy.deepcopy(MINI_CASCADE))


@pytest.fixture
def store(catalog):
    return DisplayStateStore(catalog, root_selector="W", selectors={"P": "PW", "Q": "Q1"})


@pytest.fixture
def materializer(catalog, store):
    """Materializer subscribed to the store and synced once."""
    m = LayerMaterializer(catalog)
    store.subscribe(lambda areas: m.recompute(store, areas))
    m.recompute(store)
    return m


@pytest.fixture
def app_config():
    return AppConfig.defaults()


@pytest.fixture
def polygon_dir(tmp_path):
    """
    Polygon sources on disk. Every polygon covers (0.5, 0.5); D1's E
    polygon sits elsewhere, and Z2 lacks altitude properties.
    """
    data_dir = tmp_path / "data"
    for rel in ("a/s1_c1", "a/s1_c2", "a/s2_c1", "a/s2_c2", "d/d1_wx", "center/z1"):
        write_polygon(data_dir / f"{rel}.geojson", square(0, 0), minAlt=0, maxAlt=100)
    write_polygon(data_dir / "d/d1_e.geojson", square(10, 10), minAlt=0, maxAlt=100)
    write_polygon(data_dir / "center/z2.geojson", square(0, 0))
    return data_dir


@pytest.fixture
def session(catalog, rules, app_config, polygon_dir):
    """Bootstrapped session without persistence."""
    s = DisplaySession(
        catalog,
        rules=rules,
        app_config=app_config,
        geometry_index=SourceGeometryIndex(
            polygon_dir, LayerMaterializer(catalog).sources()
        ),
    )
    s.bootstrap(snapshot={})
    return s
