#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Source Geometry Index

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Load sector polygon sources (GeoJSON) and answer point
queries against the layers the renderer currently draws. This stands in for
the map renderer's "query rendered features" call so hover classification
can run server-side.

Key Features:
1. Lazy per-URL loading with geopandas; shared URLs load once
2. Spatial index lookups (shapely predicates via GeoDataFrame.sindex)
3. Only Polygon features carrying every required property (minAlt/maxAlt)
   are candidates
4. Only visible fill layers are queried; outline hits are not modelled

Navigation Guide:
- SourceGeometryIndex.query: point -> candidate features

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point, mapping

# ═══════════════════════════════════════════════════════════════════════════
# 🔧 CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

CRS_WGS84 = "EPSG:4326"

logger = logging.getLogger(__name__)


class SourceGeometryIndex:
    """
    Point-query index over sector polygon sources.

    Sources are the {"id", "url"} records produced by
    LayerMaterializer.sources(); relative URLs resolve against data_dir.
    """

    def __init__(
        self,
        data_dir: Path,
        sources: Iterable[Dict[str, str]],
        required_properties: Sequence[str] = ("minAlt", "maxAlt"),
    ) -> None:
        self.data_dir = Path(data_dir)
        self.required_properties = tuple(required_properties)
        self._source_urls: Dict[str, str] = {s["id"]: s["url"] for s in sources}

        # url -> GeoDataFrame (None when the file could not be loaded)
        self._frames: Dict[str, Optional[gpd.GeoDataFrame]] = {}

    def _resolve(self, url: str) -> str:
        if "://" in url:
            return url
        return str(self.data_dir / url)

    def _frame(self, url: str) -> Optional[gpd.GeoDataFrame]:
        if url in self._frames:
            return self._frames[url]

        path = self._resolve(url)
        frame: Optional[gpd.GeoDataFrame] = None
        if "://" not in path and not Path(path).exists():
            logger.warning(f"⚠️ Polygon source not found: {path}")
        else:
            try:
                frame = gpd.read_file(path)
                if frame.crs is None:
                    frame = frame.set_crs(CRS_WGS84)
                elif frame.crs.to_epsg() != 4326:
                    frame = frame.to_crs(CRS_WGS84)
                logger.debug(f"Loaded {len(frame)} features from {path}")
            except Exception as e:
                logger.warning(f"⚠️ Failed to load polygon source {path}: {e}")
                frame = None

        self._frames[url] = frame
        return frame

    def query(
        self,
        lon: float,
        lat: float,
        layer_definitions: Iterable[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """
        Features under (lon, lat) for every visible fill layer.

        Args:
            lon: Longitude (WGS84)
            lat: Latitude (WGS84)
            layer_definitions: LayerMaterializer.render_definitions()

        Returns:
            GeoJSON-like features annotated with their renderer "layer"
        """
        point = Point(lon, lat)
        features: List[Dict[str, Any]] = []

        for definition in layer_definitions:
            if definition.get("type") != "fill" or not definition.get("visible"):
                continue
            url = self._source_urls.get(definition["source"])
            if url is None:
                continue
            frame = self._frame(url)
            if frame is None or frame.empty:
                continue

            for idx in frame.sindex.query(point, predicate="within"):
                row = frame.iloc[int(idx)]
                geom = row.geometry
                if geom is None or geom.geom_type != "Polygon":
                    continue
                properties = {
                    k: _to_builtin(v)
                    for k, v in row.drop(labels=frame.geometry.name).items()
                    if not _is_missing(v)
                }
                if not all(p in properties for p in self.required_properties):
                    continue
                features.append(
                    {
                        "type": "Feature",
                        "geometry": mapping(geom),
                        "properties": properties,
                        "source": definition["source"],
                        "layer": {
                            "id": definition["id"],
                            "type": definition["type"],
                            "paint": definition["paint"],
                        },
                    }
                )
        return features


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _to_builtin(value: Any) -> Any:
    # numpy scalars are not JSON serializable
    return value.item() if hasattr(value, "item") else value
