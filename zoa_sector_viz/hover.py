"""
Hover feature classification.

Given the polygon features under the cursor, decide what the info popup shows
and whether it is open. Features are renderer-style dicts carrying the layer
they were drawn by::

    {"type": "Feature", "geometry": {...}, "properties": {...},
     "layer": {"id": "Boulder_SFOW_fill", "type": "fill", "paint": {...}}}
"""

from typing import Any, Dict, Iterable, List
import logging

from zoa_sector_viz.config_types import PaintConfig, PopupSettings
from zoa_sector_viz.layers import is_transparent_fill
from zoa_sector_viz.models import PopupState

logger = logging.getLogger(__name__)


def get_unique_layers(features: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first feature of every renderer layer, preserving order."""
    seen = set()
    unique: List[Dict[str, Any]] = []
    for feature in features:
        layer_id = (feature.get("layer") or {}).get("id")
        if layer_id in seen:
            continue
        seen.add(layer_id)
        unique.append(feature)
    return unique


def classify_hover(
    features: Iterable[Dict[str, Any]],
    settings: PopupSettings,
    style_loaded: bool = True,
    paint: PaintConfig = PaintConfig(),
) -> PopupState:
    """
    Partition hovered fill features into transparent and visible ones and
    decide popup contents and visibility.

    Args:
        features: Candidate features at the cursor
        settings: Popup settings
        style_loaded: False while the map style is still loading; no
            candidates are reported in that case
        paint: Paint constants used to recognise transparent fills

    Returns:
        PopupState with hovered polygons and popup visibility
    """
    if not style_loaded:
        logger.debug("Hover ignored: map style not loaded")
        return PopupState()

    fill_layers = get_unique_layers(
        f for f in features if (f.get("layer") or {}).get("type") == "fill"
    )
    if not fill_layers:
        return PopupState()

    transparent: List[Dict[str, Any]] = []
    visible: List[Dict[str, Any]] = []
    for feature in fill_layers:
        if is_transparent_fill(feature["layer"].get("paint"), paint):
            transparent.append(feature)
        else:
            visible.append(feature)
    logger.debug(
        f"Hover: {len(visible)} visible, {len(transparent)} transparent fill layers"
    )

    if settings.show_unchecked_sectors:
        if settings.unchecked_sectors_in_visible_sectors_only:
            popup_visible = len(visible) > 0
        else:
            popup_visible = True
        return PopupState(hovered_polygons=fill_layers, popup_visible=popup_visible)

    return PopupState(hovered_polygons=visible, popup_visible=len(visible) > 0)
