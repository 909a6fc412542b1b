#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Catalog Loader

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Build the immutable SectorCatalog from a catalog dictionary
(the built-in CATALOG_DATA or a JSON file) and validate it once at startup.

Key Features:
1. Accepts TRACON-style areas ("sectorConfigs" with "configPolyUrls") and
   Center-style areas ("sectors" with a single "polyUrl")
2. Validates area/sector uniqueness and configuration references
3. Raises CatalogIntegrityError for malformed catalogs; nothing downstream
   re-checks the catalog

Navigation Guide:
- load_catalog: dictionary -> SectorCatalog
- load_catalog_file: JSON file -> SectorCatalog
- load_default_catalog: built-in ZOA catalog

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from pathlib import Path
from typing import Any, Dict, List, Set
import json
import logging

from zoa_sector_viz.models import (
    AreaDefinition,
    AreaKind,
    CatalogIntegrityError,
    ConfigPolySource,
    SectorCatalog,
    SectorCatalogEntry,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 📂 LOADING
# ═══════════════════════════════════════════════════════════════════════════


def load_catalog(data: Dict[str, Any]) -> SectorCatalog:
    """
    Build and validate a SectorCatalog from a catalog dictionary.

    Args:
        data: Dictionary with an "areas" list (see catalog_data.py)

    Returns:
        Validated SectorCatalog

    Raises:
        CatalogIntegrityError: If the catalog is malformed
    """
    areas_data = data.get("areas")
    if not isinstance(areas_data, list) or not areas_data:
        raise CatalogIntegrityError("Catalog must define a non-empty 'areas' list")

    areas = tuple(_parse_area(a) for a in areas_data)
    catalog = SectorCatalog(areas=areas)
    validate_catalog(catalog)

    logger.info(
        f"📚 Catalog loaded: {len(catalog.areas)} areas, "
        f"{catalog.sector_count()} sectors"
    )
    return catalog


def load_catalog_file(path: Path) -> SectorCatalog:
    """Load and validate a catalog from a JSON file."""
    path = Path(path)
    logger.info(f"📂 Loading catalog: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return load_catalog(data)


def load_default_catalog() -> SectorCatalog:
    """Load the built-in ZOA catalog."""
    from zoa_sector_viz.catalog_data import CATALOG_DATA

    return load_catalog(CATALOG_DATA)


def _parse_area(d: Dict[str, Any]) -> AreaDefinition:
    name = d.get("name") if isinstance(d, dict) else None
    if not name:
        raise CatalogIntegrityError(f"Area without a name: {d!r}")

    try:
        kind = AreaKind.from_string(d.get("kind", "simple"))
    except ValueError as e:
        raise CatalogIntegrityError(f"Area {name!r}: {e}") from e

    if kind is AreaKind.SIMPLE:
        sectors = tuple(_parse_simple_sector(name, s) for s in d.get("sectors", []))
        return AreaDefinition(area_id=name, kind=kind, sectors=sectors)

    possible = tuple(d.get("possibleConfigs", ()))
    sectors = tuple(
        _parse_configured_sector(name, s)
        for s in d.get("sectorConfigs", d.get("sectors", []))
    )
    options = tuple(d.get("configOptions", ()))
    if kind is AreaKind.INDEPENDENT and not options:
        options = possible
    return AreaDefinition(
        area_id=name,
        kind=kind,
        sectors=sectors,
        possible_configs=possible,
        default_config=d.get("defaultConfig", possible[0] if possible else ""),
        config_options=options,
    )


def _sector_name(area_id: str, s: Dict[str, Any]) -> str:
    name = s.get("sectorName") if isinstance(s, dict) else None
    if not name:
        raise CatalogIntegrityError(f"Sector without a sectorName in {area_id!r}: {s!r}")
    return name


def _parse_simple_sector(area_id: str, s: Dict[str, Any]) -> SectorCatalogEntry:
    name = _sector_name(area_id, s)
    url = s.get("polyUrl", "")
    if not url:
        raise CatalogIntegrityError(f"Sector {name!r} in {area_id!r} has no polyUrl")
    return SectorCatalogEntry(
        sector_id=name,
        area_id=area_id,
        default_color=s.get("defaultColor", "#ffffff"),
        config_sources=(ConfigPolySource(configs=(), source_url=url),),
    )


def _parse_configured_sector(area_id: str, s: Dict[str, Any]) -> SectorCatalogEntry:
    name = _sector_name(area_id, s)
    sources: List[ConfigPolySource] = []
    for p in s.get("configPolyUrls", []):
        url = p.get("url") if isinstance(p, dict) else None
        if not url:
            raise CatalogIntegrityError(
                f"Sector {name!r} in {area_id!r} has a config polygon without a url"
            )
        sources.append(ConfigPolySource(configs=tuple(p.get("configs", ())), source_url=url))
    return SectorCatalogEntry(
        sector_id=name,
        area_id=area_id,
        default_color=s.get("defaultColor", "#ffffff"),
        config_sources=tuple(sources),
    )


# ═══════════════════════════════════════════════════════════════════════════
# ✅ VALIDATION
# ═══════════════════════════════════════════════════════════════════════════


def validate_catalog(catalog: SectorCatalog) -> None:
    """
    Check catalog integrity.

    Rules:
    - Area names are unique
    - Sector names are unique within an area, and across all areas of the
      same layer family (simple vs configured), since layers key by sector
    - Configured areas have possible configs and a default among them
    - Every config referenced by a sector or offered to the user is a
      possible config of its area

    Raises:
        CatalogIntegrityError: Listing every problem found
    """
    problems: List[str] = []

    seen_areas: Set[str] = set()
    seen_simple: Set[str] = set()
    seen_configured: Set[str] = set()

    for area in catalog.areas:
        if area.area_id in seen_areas:
            problems.append(f"Duplicate area {area.area_id!r}")
        seen_areas.add(area.area_id)

        if not area.sectors:
            problems.append(f"Area {area.area_id!r} has no sectors")

        family = seen_configured if area.kind.is_configured else seen_simple
        in_area: Set[str] = set()
        for entry in area.sectors:
            if entry.sector_id in in_area:
                problems.append(
                    f"Duplicate sector {entry.sector_id!r} in area {area.area_id!r}"
                )
            elif entry.sector_id in family:
                problems.append(
                    f"Sector {entry.sector_id!r} appears in more than one area"
                )
            in_area.add(entry.sector_id)
            family.add(entry.sector_id)

        if area.kind.is_configured:
            problems.extend(_configured_area_problems(area))

    if problems:
        for p in problems:
            logger.error(f"❌ Catalog: {p}")
        raise CatalogIntegrityError("; ".join(problems))


def _configured_area_problems(area: AreaDefinition) -> List[str]:
    problems: List[str] = []
    possible = set(area.possible_configs)
    if not possible:
        return [f"Area {area.area_id!r} has no possible configs"]

    if area.default_config not in possible:
        problems.append(
            f"Area {area.area_id!r} default config {area.default_config!r} "
            f"is not a possible config"
        )
    for option in area.config_options:
        if option not in possible:
            problems.append(
                f"Area {area.area_id!r} offers unknown config {option!r}"
            )
    for entry in area.sectors:
        if not entry.config_sources:
            problems.append(f"Sector {entry.sector_id!r} has no polygon sources")
        for poly in entry.config_sources:
            if not poly.configs:
                problems.append(
                    f"Sector {entry.sector_id!r} polygon {poly.source_url!r} "
                    f"lists no configs"
                )
        seen: Set[str] = set()
        for config_id in entry.applicable_configs:
            if config_id not in possible:
                problems.append(
                    f"Sector {entry.sector_id!r} references unknown config "
                    f"{config_id!r} of area {area.area_id!r}"
                )
            if config_id in seen:
                problems.append(
                    f"Sector {entry.sector_id!r} lists config {config_id!r} twice"
                )
            seen.add(config_id)
    return problems
