#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Sector Display State Store

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Single mutable source of truth for which sectors are checked,
their colors, each area's selected configuration, the root selector and the
airport selectors. Every user interaction mutates this store through its
mutation API; nothing else writes display state.

Key Features:
1. Total mutation functions: unknown identifiers are logged and ignored
2. update_count heartbeat incremented on every accepted mutation
3. Explicit observer registration with batched notification - observers run
   once per outermost batch with the set of affected area IDs
4. Derived queries for the check/uncheck-all affordances

Navigation Guide:
- DisplayStateStore: store class
- batch(): context manager grouping mutations into one notification
- subscribe(): observer registration

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Set
import logging

from zoa_sector_viz.models import (
    AreaDefinition,
    AreaDisplayState,
    AreaKind,
    SectorCatalog,
    SectorDisplayState,
)

logger = logging.getLogger(__name__)

StoreObserver = Callable[[FrozenSet[str]], None]


class DisplayStateStore:
    """
    Canonical display state for one session.

    Created once by the DisplaySession from catalog defaults. Sector records
    are never added or removed after construction, only mutated.
    """

    def __init__(
        self,
        catalog: SectorCatalog,
        root_selector: str = "",
        selectors: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Args:
            catalog: Validated sector catalog
            root_selector: Initial root selector value
            selectors: Initial airport selector values
        """
        self.catalog = catalog
        self.root_selector = root_selector
        self.selectors: Dict[str, str] = dict(selectors or {})
        self.update_count = 0

        self._areas: Dict[str, AreaDisplayState] = {
            area.area_id: _default_area_state(area) for area in catalog.areas
        }

        self._observers: List[StoreObserver] = []
        self._batch_depth = 0
        self._pending_areas: Set[str] = set()
        self._dirty = False

    # ═══════════════════════════════════════════════════════════════════════
    # 📣 OBSERVERS & BATCHING
    # ═══════════════════════════════════════════════════════════════════════

    def subscribe(self, observer: StoreObserver) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator["DisplayStateStore"]:
        """
        Group mutations so observers are notified once, after all writes.

        Nested batches are folded into the outermost one.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    def _touch(self, area_id: Optional[str] = None) -> None:
        self.update_count += 1
        self._dirty = True
        if area_id is not None:
            self._pending_areas.add(area_id)
        if self._batch_depth == 0:
            self._flush()

    def _flush(self) -> None:
        if not self._dirty:
            return
        changed = frozenset(self._pending_areas)
        self._pending_areas = set()
        self._dirty = False
        logger.debug(f"Update count {self.update_count}, changed areas: {sorted(changed)}")
        for observer in list(self._observers):
            observer(changed)

    # ═══════════════════════════════════════════════════════════════════════
    # ✏️ MUTATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def set_sector_displayed(self, area_id: str, sector_id: str, value: bool) -> bool:
        """Check or uncheck one sector."""
        state = self._sector(area_id, sector_id)
        if state is None:
            return False
        state.is_displayed = bool(value)
        self._touch(area_id)
        return True

    def set_sector_color(self, area_id: str, sector_id: str, color: str) -> bool:
        """Change one sector's color."""
        state = self._sector(area_id, sector_id)
        if state is None:
            return False
        state.color = color
        self._touch(area_id)
        return True

    def toggle_all(self, area_id: str, value: bool) -> bool:
        """Check or uncheck every sector of an area."""
        area = self._area(area_id)
        if area is None:
            return False
        for state in area.sectors:
            state.is_displayed = bool(value)
        self._touch(area_id)
        return True

    def set_area_configuration(self, area_id: str, config_id: str) -> bool:
        """
        Select the configuration of an independent area.

        Dependent areas follow the cascade and simple areas have no
        configuration; both are rejected.
        """
        definition = self.catalog.area(area_id)
        if definition is None:
            logger.error(f"❌ Unknown area {area_id!r}")
            return False
        if definition.kind is not AreaKind.INDEPENDENT:
            logger.error(
                f"❌ Area {area_id!r} is {definition.kind.value}; "
                f"its configuration cannot be set directly"
            )
            return False
        return self._write_config(definition, config_id)

    def apply_dependent_configuration(self, area_id: str, config_id: str) -> bool:
        """Write a cascade-derived configuration into a dependent area."""
        definition = self.catalog.area(area_id)
        if definition is None or definition.kind is not AreaKind.DEPENDENT:
            logger.error(f"❌ {area_id!r} is not a dependent area")
            return False
        if self._areas[area_id].selected_config == config_id:
            return True
        return self._write_config(definition, config_id)

    def restore_configuration(self, area_id: str, config_id: str) -> bool:
        """Restore a persisted configuration into any configured area."""
        definition = self.catalog.area(area_id)
        if definition is None or not definition.kind.is_configured:
            logger.error(f"❌ Cannot restore configuration of {area_id!r}")
            return False
        return self._write_config(definition, config_id)

    def set_root_value(self, value: str) -> None:
        """Write the root selector. Callers validate the value first."""
        self.root_selector = value
        self._touch()

    def set_selector_value(self, selector_id: str, value: str) -> None:
        """Write an airport selector. Callers validate the value first."""
        self.selectors[selector_id] = value
        self._touch()

    def _write_config(self, definition: AreaDefinition, config_id: str) -> bool:
        if config_id not in definition.possible_configs:
            logger.error(
                f"❌ Config {config_id!r} is not possible for area "
                f"{definition.area_id!r} (expected one of {list(definition.possible_configs)})"
            )
            return False
        self._areas[definition.area_id].selected_config = config_id
        self._touch(definition.area_id)
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # 🔍 QUERIES
    # ═══════════════════════════════════════════════════════════════════════

    def area_state(self, area_id: str) -> Optional[AreaDisplayState]:
        return self._areas.get(area_id)

    def areas(self) -> List[AreaDisplayState]:
        """Area states in catalog order."""
        return list(self._areas.values())

    def selected_config(self, area_id: str) -> Optional[str]:
        area = self._areas.get(area_id)
        return area.selected_config if area is not None else None

    def checked_sectors(self, area_id: str) -> List[SectorDisplayState]:
        area = self._areas.get(area_id)
        if area is None:
            return []
        return [s for s in area.sectors if s.is_displayed]

    def show_check_all_affordance(self, area_id: str) -> bool:
        """True while at least one sector of the area is unchecked."""
        area = self._areas.get(area_id)
        if area is None:
            return False
        return len(self.checked_sectors(area_id)) < len(area.sectors)

    def show_uncheck_all_affordance(self, area_id: str) -> bool:
        """True while at least one sector of the area is checked."""
        return len(self.checked_sectors(area_id)) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the frontend state API."""
        return {
            "updateCount": self.update_count,
            "rootSelector": self.root_selector,
            "selectors": dict(self.selectors),
            "areaDisplayStates": [
                dict(
                    area.to_dict(),
                    kind=self.catalog.area(area.area_id).kind.value,
                    showCheckAll=self.show_check_all_affordance(area.area_id),
                    showUncheckAll=self.show_uncheck_all_affordance(area.area_id),
                )
                for area in self._areas.values()
            ],
        }

    # ═══════════════════════════════════════════════════════════════════════
    # 🔧 HELPERS
    # ═══════════════════════════════════════════════════════════════════════

    def _area(self, area_id: str) -> Optional[AreaDisplayState]:
        area = self._areas.get(area_id)
        if area is None:
            logger.error(f"❌ Unknown area {area_id!r}")
        return area

    def _sector(self, area_id: str, sector_id: str) -> Optional[SectorDisplayState]:
        area = self._area(area_id)
        if area is None:
            return None
        state = area.sector(sector_id)
        if state is None:
            logger.error(f"❌ Unknown sector {sector_id!r} in area {area_id!r}")
        return state


def _default_area_state(area: AreaDefinition) -> AreaDisplayState:
    return AreaDisplayState(
        area_id=area.area_id,
        selected_config=area.default_config if area.kind.is_configured else "",
        sectors=[
            SectorDisplayState(
                sector_id=entry.sector_id,
                area_id=area.area_id,
                is_displayed=False,
                color=entry.default_color,
            )
            for entry in area.sectors
        ],
    )
