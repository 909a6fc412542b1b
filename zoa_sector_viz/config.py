#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Configuration

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Centralized, user-editable configuration for the sector
overlay engine and its HTTP server. Edit values here.

Pattern: Same as config_types.py pairing
- config.py defines the CONFIG dictionary (edit this)
- config_types.py defines typed dataclasses and loads from CONFIG

Configuration Sections:
1. server: Flask host/port
2. paint: Line width and fill opacities shared by every overlay layer
3. popup: Default hover popup settings
4. persistence: Snapshot file location and enable flag
5. data: Catalog file and polygon source directory
6. logging: Log level and optional log file

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between sections
"""

import os
from typing import Dict, Any, TypeVar, Callable, Optional

T = TypeVar("T")

ENV_PREFIX = "ZOA_"

_FLAG_VALUES = {
    "true": True, "1": True, "yes": True, "on": True,
    "false": False, "0": False, "no": False, "off": False,
}


def _zoa_env(
    name: str, default: T, type_fn: Optional[Callable[[str], T]] = None
) -> T:
    """
    Read ZOA_<name> from the environment.

    Args:
        name: Variable name without the ZOA_ prefix (e.g., "SERVER_PORT")
        default: Used when the variable is unset
        type_fn: Conversion applied to the raw string (e.g., int)

    Raises:
        ValueError: If type_fn rejects the value; the message names the variable
    """
    key = ENV_PREFIX + name
    raw = os.getenv(key)
    if raw is None:
        return default
    if type_fn is None:
        return raw  # type: ignore
    try:
        return type_fn(raw)
    except ValueError as e:
        raise ValueError(f"{key}={raw!r}: {e}") from e


def _zoa_flag(name: str, default: bool) -> bool:
    """ZOA_<name> as an on/off flag; unset or unrecognized values keep default."""
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None:
        return default
    return _FLAG_VALUES.get(raw.strip().lower(), default)


# ═══════════════════════════════════════════════════════════════════════════
# 🔧 ENVIRONMENT VARIABLE OVERRIDES
# ═══════════════════════════════════════════════════════════════════════════
# ZOA_SERVER_HOST   - bind address (default: "127.0.0.1")
# ZOA_SERVER_PORT   - int (default: 5052)
# ZOA_PERSIST       - true/1/yes/on or false/0/no/off (default: on)
# ZOA_STATE_FILE    - snapshot path (default: "state/display_state.json")
# ZOA_DATA_DIR      - polygon source directory (default: "data")
# ZOA_CATALOG_FILE  - JSON catalog path; empty uses the built-in ZOA catalog
# ZOA_LOG_LEVEL     - "DEBUG", "INFO", ... (default: "INFO")
#
# Example usage:
#   $env:ZOA_LOG_LEVEL = "DEBUG"
#   python -m zoa_sector_viz.server
# ═══════════════════════════════════════════════════════════════════════════

# ═══════════════════════════════════════════════════════════════════════════
# ⚙️ MASTER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

CONFIG: Dict[str, Any] = {
    # ═══════════════════════════════════════════════════════════════════════
    # 🌐 SERVER
    # ═══════════════════════════════════════════════════════════════════════
    "server": {
        "host": _zoa_env("SERVER_HOST", "127.0.0.1"),
        "port": _zoa_env("SERVER_PORT", 5052, int),
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🎨 OVERLAY PAINT
    # ═══════════════════════════════════════════════════════════════════════
    # Colored fills are drawn faint so underlying map detail stays legible.
    # An "off" fill is fully opaque but transparent-colored.
    "paint": {
        "line_width": 2,
        "fill_opacity_on": 0.2,
        "fill_opacity_off": 1.0,
        "transparent_color": "transparent",
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 💬 HOVER POPUP
    # ═══════════════════════════════════════════════════════════════════════
    "popup": {
        "show_unchecked_sectors": False,
        "unchecked_sectors_in_visible_sectors_only": False,
        "follow_mouse": True,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 💾 PERSISTENCE
    # ═══════════════════════════════════════════════════════════════════════
    "persistence": {
        "enabled": _zoa_flag("PERSIST", True),
        "state_file": _zoa_env("STATE_FILE", "state/display_state.json"),
        "lock_timeout_s": 5.0,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📂 DATA
    # ═══════════════════════════════════════════════════════════════════════
    "data": {
        "data_dir": _zoa_env("DATA_DIR", "data"),
        "catalog_file": _zoa_env("CATALOG_FILE", ""),
        # Hover only considers polygons carrying both altitude properties
        "hover_required_properties": ["minAlt", "maxAlt"],
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📝 LOGGING
    # ═══════════════════════════════════════════════════════════════════════
    "logging": {
        "level": _zoa_env("LOG_LEVEL", "INFO"),
        "log_file": "",
    },
}
