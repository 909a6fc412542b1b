#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Built-in Catalog Data

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Static catalog of ZOA TRACON and Center airspace areas and the
Bay Flow cascade rules. This is the data file - edit values here.

Pattern:
- catalog_data.py defines CATALOG_DATA and CASCADE_DATA dictionaries (edit this)
- catalog.py turns CATALOG_DATA into a validated SectorCatalog
- cascade.py turns CASCADE_DATA into typed cascade rules

Polygon source URLs are relative to the configured data directory.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Any, Dict, List, Sequence


def _tracon_sector(
    name: str, color: str, config_groups: Sequence[Sequence[str]]
) -> Dict[str, Any]:
    """Build one TRACON sector entry; each group shares one polygon file."""
    slug = name.lower().replace(" ", "_")
    return {
        "sectorName": name,
        "defaultColor": color,
        "configPolyUrls": [
            {
                "configs": list(group),
                "url": f"tracon/{slug}_{'_'.join(group).lower()}.geojson",
            }
            for group in config_groups
        ],
    }


def _center_sectors(names: Sequence[str], color: str) -> List[Dict[str, Any]]:
    return [
        {
            "sectorName": name,
            "defaultColor": color,
            "polyUrl": f"center/{name.lower().replace(' ', '_')}.geojson",
        }
        for name in names
    ]


# ═══════════════════════════════════════════════════════════════════════════
# 🛫 TRACON AREAS
# ═══════════════════════════════════════════════════════════════════════════

_TRACON_AREAS: List[Dict[str, Any]] = [
    # ═══════════════════════════════════════════════════════════════════════
    # Bay areas - configuration driven by the Bay Flow cascade
    # ═══════════════════════════════════════════════════════════════════════
    {
        "name": "Area A",
        "kind": "dependent",
        "defaultConfig": "SFOW",
        "possibleConfigs": ["SFOW", "SFOE", "SJCE"],
        "sectorConfigs": [
            _tracon_sector("Boulder", "#e74c3c", [["SFOW", "SJCE"], ["SFOE"]]),
            _tracon_sector("Cedar", "#3498db", [["SFOW"], ["SFOE", "SJCE"]]),
            _tracon_sector("Foster", "#27ae60", [["SFOW"], ["SFOE"], ["SJCE"]]),
            _tracon_sector("Laguna", "#f39c12", [["SFOW", "SFOE", "SJCE"]]),
            _tracon_sector("Woodside", "#9b59b6", [["SFOW", "SJCE"], ["SFOE"]]),
        ],
    },
    {
        "name": "Area B",
        "kind": "dependent",
        "defaultConfig": "SFOW",
        "possibleConfigs": ["SFOW", "SFOE", "SFO10", "OAKE"],
        "sectorConfigs": [
            _tracon_sector("Richmond", "#1abc9c", [["SFOW", "OAKE"], ["SFOE", "SFO10"]]),
            _tracon_sector("Sutro", "#e67e22", [["SFOW"], ["SFOE"], ["SFO10"], ["OAKE"]]),
            _tracon_sector("Grove", "#2ecc71", [["SFOW", "SFOE", "SFO10", "OAKE"]]),
        ],
    },
    {
        "name": "Area C",
        "kind": "dependent",
        "defaultConfig": "SFOW",
        "possibleConfigs": ["SFOW", "SFOE", "SFO10", "OAKE"],
        "sectorConfigs": [
            _tracon_sector("Valley", "#8e44ad", [["SFOW", "OAKE"], ["SFOE"], ["SFO10"]]),
            _tracon_sector("Sunol", "#c0392b", [["SFOW"], ["SFOE", "SFO10", "OAKE"]]),
            _tracon_sector("Niles", "#16a085", [["SFOW", "SFOE"], ["SFO10", "OAKE"]]),
        ],
    },
    {
        "name": "Area D",
        "kind": "dependent",
        "defaultConfig": "SFOW",
        "possibleConfigs": ["SFOW", "SFOE", "OAKE"],
        "sectorConfigs": [
            _tracon_sector("Seca", "#d35400", [["SFOW", "OAKE"], ["SFOE"]]),
            _tracon_sector("Morgan", "#2980b9", [["SFOW"], ["SFOE"], ["OAKE"]]),
            _tracon_sector("Licke", "#f1c40f", [["SFOW", "SFOE", "OAKE"]]),
            _tracon_sector("Toga", "#7f8c8d", [["SFOW"], ["SFOE", "OAKE"]]),
        ],
    },
    # ═══════════════════════════════════════════════════════════════════════
    # Outlying areas - configuration chosen directly by the user
    # ═══════════════════════════════════════════════════════════════════════
    {
        "name": "SMF",
        "kind": "independent",
        "defaultConfig": "SMFS",
        "possibleConfigs": ["SMFN", "SMFS"],
        "configOptions": ["SMFS", "SMFN"],
        "sectorConfigs": [
            _tracon_sector("Nugget", "#e74c3c", [["SMFN"], ["SMFS"]]),
            _tracon_sector("Silver", "#3498db", [["SMFN"], ["SMFS"]]),
            _tracon_sector("Elkhorn", "#27ae60", [["SMFN", "SMFS"]]),
            _tracon_sector("Paradise", "#9b59b6", [["SMFN"], ["SMFS"]]),
        ],
    },
    {
        "name": "RNO",
        "kind": "independent",
        "defaultConfig": "RNOS",
        "possibleConfigs": ["RNON", "RNOS"],
        "configOptions": ["RNOS", "RNON"],
        "sectorConfigs": [
            _tracon_sector("Washoe", "#e67e22", [["RNON"], ["RNOS"]]),
            _tracon_sector("Pyramid", "#1abc9c", [["RNON", "RNOS"]]),
        ],
    },
    {
        "name": "FAT",
        "kind": "independent",
        "defaultConfig": "FATN",
        "possibleConfigs": ["FATN", "FATS"],
        "configOptions": ["FATN", "FATS"],
        "sectorConfigs": [
            _tracon_sector("Friant", "#c0392b", [["FATN"], ["FATS"]]),
            _tracon_sector("Chandler", "#2980b9", [["FATN", "FATS"]]),
            _tracon_sector("FAT South", "#f39c12", [["FATN"], ["FATS"]]),
        ],
    },
]

# ═══════════════════════════════════════════════════════════════════════════
# 🛰️ CENTER AREAS
# ═══════════════════════════════════════════════════════════════════════════

_CENTER_AREAS: List[Dict[str, Any]] = [
    {
        "name": "Area North",
        "kind": "simple",
        "sectors": _center_sectors(["ZOA 12", "ZOA 13", "ZOA 14", "ZOA 15"], "#e74c3c"),
    },
    {
        "name": "Area East",
        "kind": "simple",
        "sectors": _center_sectors(["ZOA 31", "ZOA 32", "ZOA 33", "ZOA 34"], "#3498db"),
    },
    {
        "name": "Area South",
        "kind": "simple",
        "sectors": _center_sectors(["ZOA 40", "ZOA 41", "ZOA 42", "ZOA 43"], "#27ae60"),
    },
    {
        "name": "Pac North",
        "kind": "simple",
        "sectors": _center_sectors(["ZOA 36", "ZOA 37", "ZOA 38"], "#9b59b6"),
    },
    {
        "name": "Pac South",
        "kind": "simple",
        "sectors": _center_sectors(["ZOA 35", "ZOA 39", "ZOA 46"], "#f39c12"),
    },
]

CATALOG_DATA: Dict[str, Any] = {"areas": _TRACON_AREAS + _CENTER_AREAS}

# ═══════════════════════════════════════════════════════════════════════════
# 🔀 BAY FLOW CASCADE
# ═══════════════════════════════════════════════════════════════════════════
# For every root (Bay Flow) value:
#   selectors: permitted options and default per airport selector. A
#     selector with "preserve" keeps its current value when the new root
#     still permits it.
#   areas: how each dependent area's configuration is projected. "selector"
#     names the airport selector consulted, "map" translates its value, and
#     "fallback" applies when the value is not in "map". Without a selector
#     the fallback is the configuration.
# ═══════════════════════════════════════════════════════════════════════════

CASCADE_DATA: Dict[str, Any] = {
    "root": {"name": "Bay Flow", "options": ["SFOW", "SFOE"], "default": "SFOW"},
    "selectors": ["SFO", "OAK", "SJC"],
    "rules": {
        "SFOW": {
            "selectors": {
                "SFO": {"options": ["SFOW"], "default": "SFOW"},
                "OAK": {"options": ["OAKW", "OAKE"], "default": "OAKW"},
                "SJC": {"options": ["SJCW", "SJCE"], "default": "SJCW"},
            },
            "areas": {
                "Area A": {"selector": "SJC", "map": {"SJCE": "SJCE"}, "fallback": "SFOW"},
                "Area B": {"selector": "OAK", "map": {"OAKE": "OAKE"}, "fallback": "SFOW"},
                "Area C": {"selector": "OAK", "map": {"OAKE": "OAKE"}, "fallback": "SFOW"},
                "Area D": {"selector": "OAK", "map": {"OAKE": "OAKE"}, "fallback": "SFOW"},
            },
        },
        "SFOE": {
            "selectors": {
                "SFO": {
                    "options": ["SFO19", "SFO10"],
                    "default": "SFO19",
                    "preserve": True,
                },
                "OAK": {"options": ["OAKE"], "default": "OAKE"},
                "SJC": {"options": ["SJCE"], "default": "SJCE"},
            },
            "areas": {
                "Area A": {"fallback": "SFOE"},
                "Area B": {"selector": "SFO", "map": {"SFO19": "SFOE"}, "fallback": "SFO10"},
                "Area C": {"selector": "SFO", "map": {"SFO19": "SFOE"}, "fallback": "SFO10"},
                "Area D": {"fallback": "SFOE"},
            },
        },
    },
}
