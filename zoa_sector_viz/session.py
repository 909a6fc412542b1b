#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Display Session

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Own one user's display state and wire the components
together. The session creates the store, the cascade resolver, the layer
materializer and the renderer sync, subscribes the materializer to the
store, and exposes the user-intent API the HTTP layer calls.

Data flow:
    user intent -> store mutation(s) inside one batch
                -> (root/selector changes) cascade writes in the same batch
                -> store notifies once with the affected area IDs
                -> materializer recomputes those areas' layers
                -> sync_ops() reports add/update operations for the renderer

Bootstrap:
1. Seed the store from catalog and cascade defaults
2. Restore the persisted snapshot (if any)
3. Resolve the cascade with is_initial_evaluation=True, so restored selector
   values are kept rather than reset
4. Recompute every layer once

Navigation Guide:
- DisplaySession.bootstrap: startup sequence
- USER INTENTS: mutations called by the HTTP layer
- RENDERER VIEW: layer definitions, sync ops, hover

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Any, Dict, FrozenSet, List, Optional
import logging

from zoa_sector_viz.cascade import CascadeResult, CascadeRules, ConfigCascadeResolver
from zoa_sector_viz.config_types import APP_CONFIG, AppConfig, PopupSettings
from zoa_sector_viz.display_state import DisplayStateStore
from zoa_sector_viz.geometry_index import SourceGeometryIndex
from zoa_sector_viz.hover import classify_hover
from zoa_sector_viz.layers import LayerMaterializer, LayerSync
from zoa_sector_viz.models import AreaKind, CascadeConfigError, PopupState, SectorCatalog
from zoa_sector_viz.persistence import (
    StateFile,
    restore_into_store,
    restore_popup_settings,
    snapshot_from_store,
)

logger = logging.getLogger(__name__)


class DisplaySession:
    """
    Single owner of the display store and everything derived from it.

    Args:
        catalog: Validated sector catalog
        rules: Cascade rules; defaults to the built-in Bay Flow rules
        app_config: Typed configuration; defaults to APP_CONFIG
        state_file: Snapshot file; None disables persistence
        geometry_index: Polygon index for hover queries; built from the
            configured data directory when omitted
    """

    def __init__(
        self,
        catalog: SectorCatalog,
        rules: Optional[CascadeRules] = None,
        app_config: Optional[AppConfig] = None,
        state_file: Optional[StateFile] = None,
        geometry_index: Optional[SourceGeometryIndex] = None,
    ) -> None:
        self.catalog = catalog
        self.rules = rules or CascadeRules.defaults()
        self.rules.validate_against(catalog)
        self.config = app_config or APP_CONFIG
        self.settings: PopupSettings = self.config.popup
        self.state_file = state_file

        root = self.rules.root_default
        root_rule = self.rules.rules[root]
        self.store = DisplayStateStore(
            catalog,
            root_selector=root,
            selectors={
                sid: root_rule.selectors[sid].default for sid in self.rules.selector_ids
            },
        )
        self.resolver = ConfigCascadeResolver(self.rules, self.store)
        self.materializer = LayerMaterializer(catalog, self.config.paint)
        self.renderer_sync = LayerSync()
        self.geometry_index = geometry_index or SourceGeometryIndex(
            self.config.data.data_path,
            self.materializer.sources(),
            self.config.data.hover_required_properties,
        )

        self.last_cascade: Optional[CascadeResult] = None
        self.bootstrapped = False
        self._unsubscribe = self.store.subscribe(self._on_store_change)

    def _on_store_change(self, area_ids: FrozenSet[str]) -> None:
        self.materializer.recompute(self.store, area_ids)

    # ═══════════════════════════════════════════════════════════════════════
    # 🚀 BOOTSTRAP
    # ═══════════════════════════════════════════════════════════════════════

    def bootstrap(self, snapshot: Optional[Dict[str, Any]] = None) -> None:
        """
        Restore persisted state and run the initial cascade evaluation.

        Args:
            snapshot: Snapshot to restore; read from the state file when None
        """
        if snapshot is None and self.state_file is not None:
            snapshot = self.state_file.read()

        with self.store.batch():
            if snapshot:
                restored = restore_into_store(self.store, snapshot, self.rules)
                self.settings = restore_popup_settings(snapshot, self.settings)
                logger.info(f"♻️ Restored {restored} display state fields")

            root = self.store.root_selector
            try:
                self.resolver.check_root(root)
            except CascadeConfigError as e:
                logger.error(f"❌ {e}; using {self.rules.root_default}")
                root = self.rules.root_default
            self._apply_cascade(
                self.resolver.resolve(root, is_initial_evaluation=True)
            )

        # Simple layers start with stale flags until their first recompute
        self.materializer.recompute(self.store)
        self.bootstrapped = True
        logger.info(
            f"✅ Session ready: {self.rules.root_name}={self.store.root_selector}, "
            f"selectors={self.store.selectors}"
        )

    def _apply_cascade(self, result: CascadeResult) -> None:
        with self.store.batch():
            if self.store.root_selector != result.root:
                self.store.set_root_value(result.root)
            for selector_id, value in result.selectors.items():
                if self.store.selectors.get(selector_id) != value:
                    self.store.set_selector_value(selector_id, value)
            self._apply_area_configs(result.area_configs)
        self.last_cascade = result

    def _apply_area_configs(self, area_configs: Dict[str, str]) -> None:
        for area_id, config_id in area_configs.items():
            # Rules may name areas a trimmed-down catalog does not carry
            if self.catalog.area(area_id) is None:
                continue
            self.store.apply_dependent_configuration(area_id, config_id)

    # ═══════════════════════════════════════════════════════════════════════
    # 👆 USER INTENTS
    # ═══════════════════════════════════════════════════════════════════════

    def set_root_selector(self, value: str) -> bool:
        """Change the root selector and cascade into selectors and areas."""
        try:
            result = self.resolver.resolve(value, is_initial_evaluation=False)
        except CascadeConfigError as e:
            logger.error(f"❌ {e}")
            return False
        self._apply_cascade(result)
        logger.info(f"🔀 {self.rules.root_name} -> {value}: {result.area_configs}")
        return True

    def set_selector(self, selector_id: str, value: str) -> bool:
        """Change one airport selector and re-project the dependent areas."""
        root = self.store.root_selector
        options = self.resolver.selector_options(root).get(selector_id)
        if options is None:
            logger.error(f"❌ Unknown selector {selector_id!r}")
            return False
        if value not in options:
            logger.error(
                f"❌ {selector_id} value {value!r} not permitted under "
                f"{self.rules.root_name} {root} (expected one of {list(options)})"
            )
            return False

        with self.store.batch():
            self.store.set_selector_value(selector_id, value)
            self._apply_area_configs(self.resolver.project(root, self.store.selectors))
        return True

    def set_sector_displayed(self, area_id: str, sector_id: str, value: bool) -> bool:
        return self.store.set_sector_displayed(area_id, sector_id, value)

    def set_sector_color(self, area_id: str, sector_id: str, color: str) -> bool:
        return self.store.set_sector_color(area_id, sector_id, color)

    def toggle_all(self, area_id: str, value: bool) -> bool:
        return self.store.toggle_all(area_id, value)

    def set_area_configuration(self, area_id: str, config_id: str) -> bool:
        return self.store.set_area_configuration(area_id, config_id)

    def update_settings(self, values: Dict[str, Any]) -> PopupSettings:
        """
        Merge new popup settings over the current ones.

        Raises:
            ValueError: If any value is not a boolean; nothing is applied
        """
        for key, value in values.items():
            if not isinstance(value, bool):
                raise ValueError(f"Setting {key!r} must be a boolean, got {value!r}")
        merged = dict(self.settings.to_dict())
        merged.update(values)
        self.settings = PopupSettings.from_dict(merged)
        return self.settings

    # ═══════════════════════════════════════════════════════════════════════
    # 🖼️ RENDERER VIEW
    # ═══════════════════════════════════════════════════════════════════════

    def layer_definitions(self) -> List[Dict[str, Any]]:
        return self.materializer.render_definitions()

    def sync_ops(self) -> List[Dict[str, Any]]:
        """Renderer operations since the previous call."""
        return self.renderer_sync.sync(self.layer_definitions())

    def hover(self, lon: float, lat: float, style_loaded: bool = True) -> PopupState:
        """Popup contents for a cursor position."""
        if not style_loaded:
            return classify_hover([], self.settings, style_loaded=False)
        features = self.geometry_index.query(lon, lat, self.layer_definitions())
        return classify_hover(features, self.settings, paint=self.config.paint)

    def cascade_state(self) -> Dict[str, Any]:
        """Root selector, airport selectors and their permitted options."""
        root = self.store.root_selector
        return {
            "rootName": self.rules.root_name,
            "root": root,
            "rootOptions": list(self.rules.root_options),
            "selectors": dict(self.store.selectors),
            "selectorOptions": {
                k: list(v) for k, v in self.resolver.selector_options(root).items()
            },
            "areaConfigs": {
                area.area_id: self.store.selected_config(area.area_id)
                for area in self.catalog.areas_of_kind(AreaKind.DEPENDENT)
            },
        }

    # ═══════════════════════════════════════════════════════════════════════
    # 💾 PERSISTENCE
    # ═══════════════════════════════════════════════════════════════════════

    def snapshot(self) -> Dict[str, Any]:
        return snapshot_from_store(self.store, self.settings)

    def save(self) -> bool:
        """Write the snapshot file; no-op (False) when persistence is off."""
        if self.state_file is None:
            return False
        return self.state_file.write(self.snapshot())

    def close(self) -> None:
        self._unsubscribe()
