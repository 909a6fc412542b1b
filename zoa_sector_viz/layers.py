#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Layer Materializer

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Derive renderer-facing overlay layers from the catalog and the
display state store without rendering churn.

Materialize-once, toggle-forever:
- Every layer record is created once, at construction, from the catalog
  cross-product. The collection is append-only and in practice fixed.
- Simple (center) layers are always mounted and always visible; the paint
  (transparent vs colored) conveys the checked state.
- Configured (TRACON) layers are mounted the first time their configuration
  becomes active (has_been_modified is sticky) and are visible only while
  their configuration is the area's active one.

Key Interactions:
- DisplaySession subscribes recompute() to the store; the store passes the
  set of affected area IDs once per batch
- render_definitions() feeds LayerSync, which turns snapshots into renderer
  add/update operations (never removals)

Navigation Guide:
- PAINT HELPERS: line/fill paint shared by both layer kinds
- LayerMaterializer: materialization and flag recomputation
- LayerSync: renderer create-once bookkeeping

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
import copy
import logging

from zoa_sector_viz.config_types import PaintConfig
from zoa_sector_viz.models import (
    AreaDisplayState,
    ConfiguredLayer,
    Layer,
    LayerKind,
    SectorCatalog,
    SimpleLayer,
    layer_to_dict,
)

logger = logging.getLogger(__name__)

# Renderer transitions disabled so toggles are instantaneous
NO_TRANSITION: Dict[str, int] = {"duration": 0, "delay": 0}


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 PAINT HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def get_layer_color(
    base_color: str, is_displayed: bool, paint: PaintConfig = PaintConfig()
) -> str:
    return base_color if is_displayed else paint.transparent_color


def get_fill_opacity(is_displayed: bool, paint: PaintConfig = PaintConfig()) -> float:
    return paint.fill_opacity_on if is_displayed else paint.fill_opacity_off


def get_line_paint(
    color: str, is_displayed: bool, paint: PaintConfig = PaintConfig()
) -> Dict[str, Any]:
    """Line paint for a sector outline."""
    return {
        "line-color": get_layer_color(color, is_displayed, paint),
        "line-width": paint.line_width,
        "line-color-transition": dict(NO_TRANSITION),
    }


def get_fill_paint(
    color: str, is_displayed: bool, paint: PaintConfig = PaintConfig()
) -> Dict[str, Any]:
    """Fill paint for a sector polygon."""
    return {
        "fill-color": get_layer_color(color, is_displayed, paint),
        "fill-opacity": get_fill_opacity(is_displayed, paint),
        "fill-color-transition": dict(NO_TRANSITION),
        "fill-opacity-transition": dict(NO_TRANSITION),
    }


def is_transparent_fill(
    fill_paint: Optional[Dict[str, Any]], paint: PaintConfig = PaintConfig()
) -> bool:
    """True when a fill paint was produced for an unchecked sector."""
    if not fill_paint:
        return True
    return fill_paint.get("fill-color") == paint.transparent_color


# ═══════════════════════════════════════════════════════════════════════════
# 🏗️ LAYER MATERIALIZER
# ═══════════════════════════════════════════════════════════════════════════


class LayerMaterializer:
    """
    Own the layer records of one session and keep their flags current.

    Layer records are created in __init__ and never removed. recompute() only
    reads the store; it never writes display state.
    """

    def __init__(self, catalog: SectorCatalog, paint: Optional[PaintConfig] = None) -> None:
        self.catalog = catalog
        self.paint = paint or PaintConfig()
        self._layers: List[Layer] = self._materialize()
        self._simple_areas = {a.area_id for a in catalog.simple_areas}
        self._configured_areas = {a.area_id for a in catalog.configured_areas}

        logger.info(
            f"🧱 Materialized {len(self._layers)} layers "
            f"({self.count(LayerKind.SIMPLE)} simple, "
            f"{self.count(LayerKind.CONFIGURED)} configured)"
        )

    def _materialize(self) -> List[Layer]:
        layers: List[Layer] = []
        for area in self.catalog.simple_areas:
            for entry in area.sectors:
                layers.append(
                    SimpleLayer(
                        sector_id=entry.sector_id,
                        source_url=entry.source_url,
                        color=entry.default_color,
                    )
                )
        for area in self.catalog.configured_areas:
            for entry in area.sectors:
                for config_id, url in entry.iter_config_sources():
                    layers.append(
                        ConfiguredLayer(
                            area_id=area.area_id,
                            sector_id=entry.sector_id,
                            config_id=config_id,
                            source_url=url,
                            color=entry.default_color,
                        )
                    )
        return layers

    # ═══════════════════════════════════════════════════════════════════════
    # 🔍 ACCESSORS
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    def count(self, kind: Optional[LayerKind] = None) -> int:
        if kind is None:
            return len(self._layers)
        return sum(1 for layer in self._layers if layer.kind is kind)

    def find(self, layer_id: str) -> Optional[Layer]:
        for layer in self._layers:
            if layer.layer_id == layer_id:
                return layer
        return None

    # ═══════════════════════════════════════════════════════════════════════
    # 🔄 RECOMPUTATION
    # ═══════════════════════════════════════════════════════════════════════

    def recompute(self, store: Any, area_ids: Optional[Iterable[str]] = None) -> None:
        """
        Recompute layer flags from the store.

        Args:
            store: DisplayStateStore (read only)
            area_ids: Areas whose state changed; None recomputes every area
        """
        wanted = set(area_ids) if area_ids is not None else None
        simple_states: List[AreaDisplayState] = []
        configured_states: List[AreaDisplayState] = []
        for state in store.areas():
            if wanted is not None and state.area_id not in wanted:
                continue
            if state.area_id in self._simple_areas:
                simple_states.append(state)
            elif state.area_id in self._configured_areas:
                configured_states.append(state)

        if simple_states:
            self._update_simple_layers(simple_states)
        if configured_states:
            self._update_configured_layers(configured_states)

    def _update_simple_layers(self, states: List[AreaDisplayState]) -> None:
        display_map = {s.sector_id: s for area in states for s in area.sectors}
        logger.debug(f"Updating simple layers: {sorted(display_map)}")

        for layer in self._layers:
            if layer.kind is not LayerKind.SIMPLE or layer.sector_id not in display_map:
                continue
            state = display_map[layer.sector_id]
            layer.color = state.color
            layer.is_displayed = state.is_displayed
            layer.is_displayed_transparent = not state.is_displayed
            layer.is_displayed_color = state.is_displayed

    def _update_configured_layers(self, states: List[AreaDisplayState]) -> None:
        display_map = {
            s.sector_id: (s, area.selected_config)
            for area in states
            for s in area.sectors
        }
        logger.debug(f"Updating configured layers: {sorted(display_map)}")

        for layer in self._layers:
            if layer.kind is not LayerKind.CONFIGURED or layer.sector_id not in display_map:
                continue
            state, selected_config = display_map[layer.sector_id]
            active = selected_config == layer.config_id
            layer.has_been_modified = layer.has_been_modified or active
            layer.color = state.color
            layer.is_displayed_transparent = active
            layer.is_displayed_color = active and state.is_displayed
            layer.is_displayed = layer.is_displayed_color or layer.is_displayed_transparent

    # ═══════════════════════════════════════════════════════════════════════
    # 🖼️ RENDERER VIEW
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    def should_render(layer: Layer) -> bool:
        """Whether the renderer should have this layer mounted."""
        if layer.kind is LayerKind.SIMPLE:
            return True
        elif layer.kind is LayerKind.CONFIGURED:
            return layer.has_been_modified
        raise ValueError(f"Unhandled layer kind: {layer.kind}")

    @staticmethod
    def is_visible(layer: Layer) -> bool:
        """Whether a mounted layer is shown."""
        if layer.kind is LayerKind.SIMPLE:
            return True
        elif layer.kind is LayerKind.CONFIGURED:
            return layer.is_displayed_transparent
        raise ValueError(f"Unhandled layer kind: {layer.kind}")

    def render_definitions(self) -> List[Dict[str, Any]]:
        """
        Ordered line + fill layer definitions for every mounted layer.

        Each definition has a stable "id" ("<layer>_line" / "<layer>_fill"),
        its polygon "source", a "visible" flag and its "paint" properties.
        """
        definitions: List[Dict[str, Any]] = []
        for layer in self._layers:
            if not self.should_render(layer):
                continue
            source_id = layer.layer_id
            visible = self.is_visible(layer)
            definitions.append(
                {
                    "id": f"{source_id}_line",
                    "source": source_id,
                    "type": "line",
                    "paint": get_line_paint(layer.color, layer.is_displayed_color, self.paint),
                    "visible": visible,
                }
            )
            definitions.append(
                {
                    "id": f"{source_id}_fill",
                    "source": source_id,
                    "type": "fill",
                    "paint": get_fill_paint(layer.color, layer.is_displayed_color, self.paint),
                    "visible": visible,
                }
            )
        return definitions

    def sources(self) -> List[Dict[str, str]]:
        """Polygon sources keyed like the layers that draw them."""
        return [{"id": layer.layer_id, "url": layer.source_url} for layer in self._layers]

    def to_dict(self) -> List[Dict[str, Any]]:
        """All layer records, mounted or not, for the frontend/debug API."""
        return [
            dict(
                layer_to_dict(layer),
                shouldRender=self.should_render(layer),
                isVisible=self.is_visible(layer),
            )
            for layer in self._layers
        ]


# ═══════════════════════════════════════════════════════════════════════════
# 🔁 RENDERER SYNC
# ═══════════════════════════════════════════════════════════════════════════


class LayerSync:
    """
    Track which renderer layers exist and emit create-once operations.

    The first time an ID appears it produces an "add" operation; afterwards
    only "update" operations for changed visibility or paint. There is no
    removal operation.
    """

    def __init__(self) -> None:
        self._mounted: Dict[str, Dict[str, Any]] = {}

    @property
    def mounted_ids(self) -> List[str]:
        return list(self._mounted)

    def sync(self, definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Diff a render_definitions() snapshot against what is mounted.

        Returns:
            List of {"op": "add"|"update", "layer": definition}
        """
        ops: List[Dict[str, Any]] = []
        seen = set()
        for definition in definitions:
            layer_id = definition["id"]
            seen.add(layer_id)
            previous = self._mounted.get(layer_id)
            if previous is None:
                ops.append({"op": "add", "layer": definition})
            elif (
                previous["visible"] != definition["visible"]
                or previous["paint"] != definition["paint"]
            ):
                ops.append({"op": "update", "layer": definition})
            else:
                continue
            self._mounted[layer_id] = copy.deepcopy(definition)

        missing = set(self._mounted) - seen
        if missing:
            logger.warning(
                f"⚠️ {len(missing)} mounted layers absent from snapshot; keeping them"
            )
        return ops
