"""
Renderer-facing layer records.

Architectural Overview:
=======================
Layers are a tagged union discriminated by LayerKind:

- SimpleLayer: one per simple (center) sector. Always mounted; the paint
  (transparent vs colored) conveys the checked state.
- ConfiguredLayer: one per (sector, configuration) pair. Mounted the first
  time its configuration becomes active and kept mounted afterwards
  (has_been_modified is sticky), visible only while its configuration is the
  area's active one.

The layer collection is created once at startup and is append-only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union


class LayerKind(Enum):
    """Discriminant for the layer union."""

    SIMPLE = "center"
    CONFIGURED = "tracon"


@dataclass
class SimpleLayer:
    """Overlay layer for a sector without a configuration dimension."""

    sector_id: str
    source_url: str
    color: str
    is_displayed: bool = False
    is_displayed_color: bool = False
    is_displayed_transparent: bool = False
    kind: LayerKind = field(default=LayerKind.SIMPLE, init=False)

    @property
    def layer_id(self) -> str:
        return self.sector_id


@dataclass
class ConfiguredLayer:
    """Overlay layer for one configuration variant of a sector."""

    area_id: str
    sector_id: str
    config_id: str
    source_url: str
    color: str
    is_displayed: bool = False
    is_displayed_color: bool = False
    is_displayed_transparent: bool = False
    has_been_modified: bool = False
    kind: LayerKind = field(default=LayerKind.CONFIGURED, init=False)

    @property
    def layer_id(self) -> str:
        # Each configuration variant has its own source geometry
        return f"{self.sector_id}_{self.config_id}"


Layer = Union[SimpleLayer, ConfiguredLayer]


def layer_to_dict(layer: Layer) -> Dict[str, Any]:
    """Convert a layer record to a dictionary for JSON serialization."""
    d: Dict[str, Any] = {
        "type": layer.kind.value,
        "id": layer.layer_id,
        "name": layer.sector_id,
        "color": layer.color,
        "isDisplayed": layer.is_displayed,
        "isDisplayedColor": layer.is_displayed_color,
        "isDisplayedTransparent": layer.is_displayed_transparent,
    }
    if isinstance(layer, ConfiguredLayer):
        d["parentAreaName"] = layer.area_id
        d["config"] = layer.config_id
        d["hasBeenModified"] = layer.has_been_modified
    return d


@dataclass(frozen=True)
class PopupState:
    """Result of hover classification."""

    hovered_polygons: List[Dict[str, Any]] = field(default_factory=list)
    popup_visible: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"hoveredPolys": self.hovered_polygons, "vis": self.popup_visible}
