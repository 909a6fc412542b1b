"""Data models package for sector catalog, display state and overlay layers."""

from .errors import (
    SectorVizError,
    CatalogIntegrityError,
    CascadeConfigError,
)

from .catalog_models import (
    AreaKind,
    ConfigPolySource,
    SectorCatalogEntry,
    AreaDefinition,
    SectorCatalog,
)

from .display_models import (
    SectorDisplayState,
    AreaDisplayState,
)

from .layer_models import (
    LayerKind,
    SimpleLayer,
    ConfiguredLayer,
    Layer,
    PopupState,
    layer_to_dict,
)

__all__ = [
    # Errors
    "SectorVizError",
    "CatalogIntegrityError",
    "CascadeConfigError",
    # Catalog models
    "AreaKind",
    "ConfigPolySource",
    "SectorCatalogEntry",
    "AreaDefinition",
    "SectorCatalog",
    # Display state models
    "SectorDisplayState",
    "AreaDisplayState",
    # Layer models
    "LayerKind",
    "SimpleLayer",
    "ConfiguredLayer",
    "Layer",
    "PopupState",
    "layer_to_dict",
]
