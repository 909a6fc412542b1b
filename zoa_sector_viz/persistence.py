#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Display State Persistence

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Save and restore the user's display state (checked sectors,
colors, selected configurations, root and airport selectors, popup settings)
as a JSON snapshot file.

Key Features:
1. Per-field fallback: anything missing, unknown or invalid in a snapshot
   keeps its catalog default; one bad field never discards the rest
2. File access guarded by filelock so two server processes never interleave
   a read with a half-written snapshot
3. Read/write failures are logged and non-fatal

Snapshot format:
    {
        "version": 1,
        "rootSelector": "SFOW",
        "selectors": {"SFO": "SFOW", "OAK": "OAKW", "SJC": "SJCW"},
        "popupSettings": {"showUncheckedSectors": false, ...},
        "areaDisplayStates": [
            {"name": "Area A", "selectedConfig": "SFOW",
             "sectors": [{"name": "Boulder", "isDisplayed": true, "color": "#ff0000"}]}
        ]
    }

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import os

import filelock

from zoa_sector_viz.cascade import CascadeRules
from zoa_sector_viz.config_types import PersistenceConfig, PopupSettings
from zoa_sector_viz.display_state import DisplayStateStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


# ═══════════════════════════════════════════════════════════════════════════
# 📸 SNAPSHOT <-> STORE
# ═══════════════════════════════════════════════════════════════════════════


def snapshot_from_store(
    store: DisplayStateStore, settings: Optional[PopupSettings] = None
) -> Dict[str, Any]:
    """Serialize the persistent part of a store (and popup settings)."""
    snapshot: Dict[str, Any] = {
        "version": SNAPSHOT_VERSION,
        "rootSelector": store.root_selector,
        "selectors": dict(store.selectors),
        "areaDisplayStates": [
            {
                "name": area.area_id,
                "selectedConfig": area.selected_config,
                "sectors": [
                    {"name": s.sector_id, "isDisplayed": s.is_displayed, "color": s.color}
                    for s in area.sectors
                ],
            }
            for area in store.areas()
        ],
    }
    if settings is not None:
        snapshot["popupSettings"] = settings.to_dict()
    return snapshot


def restore_into_store(
    store: DisplayStateStore, snapshot: Dict[str, Any], rules: CascadeRules
) -> int:
    """
    Write snapshot values into a freshly created store.

    Root and airport selector values are restored only when they belong to
    the enumerated domain; whether a selector value is permitted under the
    restored root is left to the initial cascade evaluation.

    Args:
        store: Store seeded with catalog defaults
        snapshot: Parsed snapshot dictionary
        rules: Cascade rules used to validate selector values

    Returns:
        Number of fields restored
    """
    restored = 0
    with store.batch():
        root = snapshot.get("rootSelector")
        if root in rules.root_options:
            store.set_root_value(root)
            restored += 1
        elif root is not None:
            logger.warning(f"⚠️ Ignoring unknown {rules.root_name} value {root!r}")

        selectors = snapshot.get("selectors")
        if isinstance(selectors, dict):
            for selector_id, value in selectors.items():
                if selector_id not in rules.selector_ids:
                    logger.warning(f"⚠️ Ignoring unknown selector {selector_id!r}")
                elif value not in rules.all_selector_options(selector_id):
                    logger.warning(
                        f"⚠️ Ignoring invalid value {value!r} for selector {selector_id!r}"
                    )
                else:
                    store.set_selector_value(selector_id, value)
                    restored += 1

        areas = snapshot.get("areaDisplayStates")
        if isinstance(areas, list):
            for area_data in areas:
                if isinstance(area_data, dict):
                    restored += _restore_area(store, area_data)
    return restored


def _restore_area(store: DisplayStateStore, area_data: Dict[str, Any]) -> int:
    area_id = area_data.get("name")
    definition = store.catalog.area(area_id) if area_id else None
    if definition is None:
        logger.warning(f"⚠️ Ignoring unknown area {area_id!r} in snapshot")
        return 0

    restored = 0
    config_id = area_data.get("selectedConfig")
    if definition.kind.is_configured and config_id:
        if config_id in definition.possible_configs:
            store.restore_configuration(area_id, config_id)
            restored += 1
        else:
            logger.warning(f"⚠️ Ignoring unknown config {config_id!r} for {area_id!r}")

    for sector_data in area_data.get("sectors", []):
        sector_id = sector_data.get("name")
        if definition.sector(sector_id) is None:
            logger.warning(f"⚠️ Ignoring unknown sector {sector_id!r} in {area_id!r}")
            continue
        if isinstance(sector_data.get("isDisplayed"), bool):
            store.set_sector_displayed(area_id, sector_id, sector_data["isDisplayed"])
            restored += 1
        if isinstance(sector_data.get("color"), str) and sector_data["color"]:
            store.set_sector_color(area_id, sector_id, sector_data["color"])
            restored += 1
    return restored


def restore_popup_settings(
    snapshot: Dict[str, Any], default: PopupSettings
) -> PopupSettings:
    """Popup settings from a snapshot, falling back field by field."""
    saved = snapshot.get("popupSettings")
    if not isinstance(saved, dict):
        return default
    merged = dict(default.to_dict())
    merged.update({k: v for k, v in saved.items() if isinstance(v, bool)})
    return PopupSettings.from_dict(merged)


# ═══════════════════════════════════════════════════════════════════════════
# 💾 SNAPSHOT FILE
# ═══════════════════════════════════════════════════════════════════════════


class StateFile:
    """
    JSON snapshot file guarded by a sibling ".lock" file.

    Writes go to a temporary file first and replace the snapshot, so a
    reader never sees a partial file.
    """

    def __init__(self, path: Path, lock_timeout_s: float = 5.0) -> None:
        self.path = Path(path)
        self.lock_timeout_s = lock_timeout_s
        self._lock_path = self.path.with_name(self.path.name + ".lock")

    @classmethod
    def from_config(cls, config: PersistenceConfig) -> Optional["StateFile"]:
        """StateFile for the configured path, or None when persistence is off."""
        if not config.enabled:
            return None
        return cls(config.state_path, config.lock_timeout_s)

    def _lock(self) -> filelock.FileLock:
        return filelock.FileLock(str(self._lock_path), timeout=self.lock_timeout_s)

    def read(self) -> Optional[Dict[str, Any]]:
        """Parsed snapshot, or None if missing, locked or unreadable."""
        if not self.path.exists():
            logger.debug(f"No snapshot at {self.path}")
            return None
        try:
            with self._lock():
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
        except filelock.Timeout:
            logger.warning(f"⏱️ Lock timeout reading {self.path} after {self.lock_timeout_s}s")
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Corrupted snapshot {self.path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"⚠️ Snapshot {self.path} is not a JSON object; ignoring")
            return None
        logger.info(f"📥 Loaded display state snapshot: {self.path}")
        return data

    def write(self, snapshot: Dict[str, Any]) -> bool:
        """Write a snapshot; returns False (after logging) on failure."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock():
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2)
                os.replace(tmp_path, self.path)
        except filelock.Timeout:
            logger.warning(f"⏱️ Lock timeout writing {self.path} after {self.lock_timeout_s}s")
            return False
        except OSError as e:
            logger.warning(f"⚠️ Failed to save snapshot {self.path}: {e}")
            return False

        logger.debug(f"💾 Saved display state snapshot: {self.path}")
        return True
