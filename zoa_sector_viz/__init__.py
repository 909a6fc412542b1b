"""
ZOA Sector Visualizer.

Configuration cascade and overlay layer engine for Oakland Center (ZOA)
airspace sectors, served to a map renderer through a small Flask API.
"""

from zoa_sector_viz.catalog import load_catalog, load_catalog_file, load_default_catalog
from zoa_sector_viz.cascade import CascadeResult, CascadeRules, ConfigCascadeResolver
from zoa_sector_viz.display_state import DisplayStateStore
from zoa_sector_viz.hover import classify_hover
from zoa_sector_viz.layers import LayerMaterializer, LayerSync
from zoa_sector_viz.session import DisplaySession

__all__ = [
    "load_catalog",
    "load_catalog_file",
    "load_default_catalog",
    "CascadeResult",
    "CascadeRules",
    "ConfigCascadeResolver",
    "DisplayStateStore",
    "classify_hover",
    "LayerMaterializer",
    "LayerSync",
    "DisplaySession",
]
