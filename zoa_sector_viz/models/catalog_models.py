"""
Typed catalog models for airspace sectors.

Architectural Overview:
=======================
Immutable dataclasses describing every area, its sectors, the configurations
an area can be in, default colors, and the polygon source for each
(sector, configuration-set) pair. The catalog is loaded once at startup and
never mutated.

Key Interactions:
-----------------
- Input: catalog.load_catalog() builds these from a dictionary or JSON file
- Output: display_state seeds per-sector state from catalog defaults;
  layers materializes one layer per sector / per (sector, config)

MODIFICATION POINT: Add new AreaKind values here for new area behaviours
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple


# ═══════════════════════════════════════════════════════════════════════════
# 🏷️ ENUMS SECTION
# ═══════════════════════════════════════════════════════════════════════════


class AreaKind(Enum):
    """How an area's configuration is chosen.

    SIMPLE areas have no configuration dimension (center sectors).
    INDEPENDENT areas are configured directly by the user.
    DEPENDENT areas are configured by the cascade from the root selector.
    """

    SIMPLE = "simple"
    INDEPENDENT = "independent"
    DEPENDENT = "dependent"

    @classmethod
    def from_string(cls, s: str) -> "AreaKind":
        """Convert string to AreaKind.

        Raises:
            ValueError: If the string names no AreaKind
        """
        for member in cls:
            if member.value == s:
                return member
        raise ValueError(f"Unknown area kind: {s!r}")

    @property
    def is_configured(self) -> bool:
        """True for kinds that carry a selected configuration."""
        return self is not AreaKind.SIMPLE


# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ SECTOR CATALOG ENTRIES
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ConfigPolySource:
    """Polygon source shared by one or more configurations of a sector."""

    configs: Tuple[str, ...]
    source_url: str


@dataclass(frozen=True)
class SectorCatalogEntry:
    """Immutable description of one sector.

    Simple sectors carry a single ConfigPolySource with no configs.
    """

    sector_id: str
    area_id: str
    default_color: str
    config_sources: Tuple[ConfigPolySource, ...]

    @property
    def source_url(self) -> str:
        """Polygon source of a simple (unconfigured) sector."""
        return self.config_sources[0].source_url if self.config_sources else ""

    def iter_config_sources(self) -> Iterator[Tuple[str, str]]:
        """Yield (config_id, source_url) for every applicable configuration."""
        for poly in self.config_sources:
            for config_id in poly.configs:
                yield config_id, poly.source_url

    @property
    def applicable_configs(self) -> Tuple[str, ...]:
        """All configurations this sector has a polygon for, in catalog order."""
        return tuple(config_id for config_id, _ in self.iter_config_sources())


@dataclass(frozen=True)
class AreaDefinition:
    """Immutable description of one area and its member sectors."""

    area_id: str
    kind: AreaKind
    sectors: Tuple[SectorCatalogEntry, ...]
    possible_configs: Tuple[str, ...] = ()
    default_config: str = ""
    config_options: Tuple[str, ...] = ()

    def sector(self, sector_id: str) -> Optional[SectorCatalogEntry]:
        for entry in self.sectors:
            if entry.sector_id == sector_id:
                return entry
        return None


# ═══════════════════════════════════════════════════════════════════════════
# 📚 CATALOG
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SectorCatalog:
    """Ordered, validated collection of areas.

    Build via catalog.load_catalog(); the constructor does not validate.
    """

    areas: Tuple[AreaDefinition, ...]

    def area(self, area_id: str) -> Optional[AreaDefinition]:
        for area in self.areas:
            if area.area_id == area_id:
                return area
        return None

    def areas_of_kind(self, *kinds: AreaKind) -> Tuple[AreaDefinition, ...]:
        return tuple(a for a in self.areas if a.kind in kinds)

    @property
    def simple_areas(self) -> Tuple[AreaDefinition, ...]:
        return self.areas_of_kind(AreaKind.SIMPLE)

    @property
    def configured_areas(self) -> Tuple[AreaDefinition, ...]:
        return self.areas_of_kind(AreaKind.INDEPENDENT, AreaKind.DEPENDENT)

    def area_ids(self) -> Tuple[str, ...]:
        return tuple(a.area_id for a in self.areas)

    def sector_count(self) -> int:
        return sum(len(a.sectors) for a in self.areas)

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for the frontend catalog API."""
        return {
            "areas": [
                {
                    "name": area.area_id,
                    "kind": area.kind.value,
                    "defaultConfig": area.default_config,
                    "possibleConfigs": list(area.possible_configs),
                    "configOptions": list(area.config_options),
                    "sectors": [_entry_to_dict(area.kind, e) for e in area.sectors],
                }
                for area in self.areas
            ]
        }


def _entry_to_dict(kind: AreaKind, entry: SectorCatalogEntry) -> Dict[str, object]:
    d: Dict[str, object] = {
        "sectorName": entry.sector_id,
        "defaultColor": entry.default_color,
    }
    if kind is AreaKind.SIMPLE:
        d["polyUrl"] = entry.source_url
    else:
        d["configPolyUrls"] = [
            {"configs": list(p.configs), "url": p.source_url}
            for p in entry.config_sources
        ]
    return d
