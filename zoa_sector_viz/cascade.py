#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Config Cascade Resolver

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Propagate the single root selector (Bay Flow) into the airport
selectors (SFO/OAK/SJC) and from there into every dependent area's
configuration.

Key Features:
1. Declarative rules per root value (from CASCADE_DATA)
2. Conditional preservation: a selector flagged "preserve" keeps its current
   value when the new root still permits it
3. Initial-evaluation exception: on the first resolution after restoring a
   snapshot, permitted selector values are never reset to defaults
4. Read-only area projections computed from the root plus airport selectors;
   these are derived every time, never stored as independent state

Navigation Guide:
- CascadeRules: typed rules + validation against the catalog
- ConfigCascadeResolver.resolve: root -> CascadeResult
- ConfigCascadeResolver.project: root + selectors -> dependent area configs

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from zoa_sector_viz.models import AreaKind, CascadeConfigError, SectorCatalog

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 📜 RULE TYPES
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SelectorRule:
    """Permitted options and default of one airport selector under one root."""

    options: Tuple[str, ...]
    default: str
    preserve: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SelectorRule":
        options = tuple(d.get("options", ()))
        return cls(
            options=options,
            default=d.get("default", options[0] if options else ""),
            preserve=bool(d.get("preserve", False)),
        )

    def permits(self, value: Optional[str]) -> bool:
        return value is not None and value in self.options


@dataclass(frozen=True)
class AreaProjectionRule:
    """How a dependent area's configuration follows an airport selector."""

    fallback: str
    selector: Optional[str] = None
    mapping: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AreaProjectionRule":
        return cls(
            fallback=d["fallback"],
            selector=d.get("selector"),
            mapping=dict(d.get("map", {})),
        )

    def project(self, selectors: Mapping[str, str]) -> str:
        if self.selector is None:
            return self.fallback
        return self.mapping.get(selectors.get(self.selector, ""), self.fallback)

    def possible_outputs(self) -> Tuple[str, ...]:
        return tuple(self.mapping.values()) + (self.fallback,)


@dataclass(frozen=True)
class RootRule:
    """Everything one root value implies."""

    selectors: Dict[str, SelectorRule]
    areas: Dict[str, AreaProjectionRule]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RootRule":
        return cls(
            selectors={
                k: SelectorRule.from_dict(v) for k, v in d.get("selectors", {}).items()
            },
            areas={
                k: AreaProjectionRule.from_dict(v) for k, v in d.get("areas", {}).items()
            },
        )


@dataclass(frozen=True)
class CascadeRules:
    """Root domain, selector names and per-root rules."""

    root_name: str
    root_options: Tuple[str, ...]
    root_default: str
    selector_ids: Tuple[str, ...]
    rules: Dict[str, RootRule]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CascadeRules":
        root = d.get("root", {})
        options = tuple(root.get("options", ()))
        rules = cls(
            root_name=root.get("name", "root"),
            root_options=options,
            root_default=root.get("default", options[0] if options else ""),
            selector_ids=tuple(d.get("selectors", ())),
            rules={k: RootRule.from_dict(v) for k, v in d.get("rules", {}).items()},
        )
        rules._check_shape()
        return rules

    @classmethod
    def defaults(cls) -> "CascadeRules":
        """Bay Flow rules from the built-in catalog data."""
        from zoa_sector_viz.catalog_data import CASCADE_DATA

        return cls.from_dict(CASCADE_DATA)

    def _check_shape(self) -> None:
        if self.root_default not in self.root_options:
            raise CascadeConfigError(
                f"Root default {self.root_default!r} not in {self.root_options}"
            )
        for value in self.root_options:
            rule = self.rules.get(value)
            if rule is None:
                raise CascadeConfigError(f"No cascade rule for root {value!r}")
            for selector_id in self.selector_ids:
                sel = rule.selectors.get(selector_id)
                if sel is None:
                    raise CascadeConfigError(
                        f"Root {value!r} has no rule for selector {selector_id!r}"
                    )
                if sel.default not in sel.options:
                    raise CascadeConfigError(
                        f"Selector {selector_id!r} default {sel.default!r} "
                        f"not permitted under root {value!r}"
                    )

    def validate_against(self, catalog: SectorCatalog) -> None:
        """
        Check that every dependent area has a projection under every root and
        that every projected configuration is a possible config of that area.

        Raises:
            CascadeConfigError: On the first mismatch
        """
        for area in catalog.areas_of_kind(AreaKind.DEPENDENT):
            for root_value in self.root_options:
                projection = self.rules[root_value].areas.get(area.area_id)
                if projection is None:
                    raise CascadeConfigError(
                        f"Dependent area {area.area_id!r} has no projection "
                        f"under root {root_value!r}"
                    )
                for config_id in projection.possible_outputs():
                    if config_id not in area.possible_configs:
                        raise CascadeConfigError(
                            f"Projection of {area.area_id!r} under {root_value!r} "
                            f"yields unknown config {config_id!r}"
                        )

    def all_selector_options(self, selector_id: str) -> Tuple[str, ...]:
        """Every value a selector may take under any root."""
        seen: List[str] = []
        for root_value in self.root_options:
            for option in self.rules[root_value].selectors[selector_id].options:
                if option not in seen:
                    seen.append(option)
        return tuple(seen)


# ═══════════════════════════════════════════════════════════════════════════
# 📦 RESULT
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CascadeResult:
    """Selector values, their permitted options and dependent area configs."""

    root: str
    selectors: Dict[str, str]
    selector_options: Dict[str, Tuple[str, ...]]
    area_configs: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "selectors": dict(self.selectors),
            "selectorOptions": {k: list(v) for k, v in self.selector_options.items()},
            "areaConfigs": dict(self.area_configs),
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🔀 RESOLVER
# ═══════════════════════════════════════════════════════════════════════════


class ConfigCascadeResolver:
    """
    Resolve dependent configurations from the root selector.

    The resolver is side-effect free: it reads current selector values from
    the injected state source and returns a CascadeResult. Writing the result
    into the store is the session's job, which lets the store apply all
    cascade writes in a single batch.
    """

    def __init__(self, rules: CascadeRules, state: Any) -> None:
        """
        Args:
            rules: Cascade rules
            state: Object exposing a ``selectors`` mapping of current airport
                selector values (the DisplayStateStore)
        """
        self.rules = rules
        self._state = state

    def check_root(self, root: str) -> RootRule:
        """Return the rule for a root value or raise CascadeConfigError."""
        rule = self.rules.rules.get(root)
        if root not in self.rules.root_options or rule is None:
            raise CascadeConfigError(
                f"{self.rules.root_name} value {root!r} is not one of "
                f"{list(self.rules.root_options)}"
            )
        return rule

    def resolve(self, root: str, is_initial_evaluation: bool) -> CascadeResult:
        """
        Compute selector values and dependent area configs for a root value.

        Args:
            root: Root selector value
            is_initial_evaluation: True only for the first resolution after
                restoring persisted state; permitted selector values are then
                kept as restored instead of being reset to defaults

        Returns:
            CascadeResult

        Raises:
            CascadeConfigError: If root is outside the enumerated domain
        """
        rule = self.check_root(root)
        current: Mapping[str, str] = self._state.selectors

        selectors: Dict[str, str] = {}
        for selector_id in self.rules.selector_ids:
            sel = rule.selectors[selector_id]
            value = current.get(selector_id)
            keep = sel.permits(value) and (is_initial_evaluation or sel.preserve)
            selectors[selector_id] = value if keep else sel.default

        result = CascadeResult(
            root=root,
            selectors=selectors,
            selector_options=self.selector_options(root),
            area_configs=self.project(root, selectors),
        )
        logger.debug(
            f"Cascade resolved root={root} initial={is_initial_evaluation}: "
            f"{result.selectors} -> {result.area_configs}"
        )
        return result

    def project(self, root: str, selectors: Mapping[str, str]) -> Dict[str, str]:
        """Effective configuration of every dependent area."""
        rule = self.check_root(root)
        return {
            area_id: projection.project(selectors)
            for area_id, projection in rule.areas.items()
        }

    def selector_options(self, root: str) -> Dict[str, Tuple[str, ...]]:
        """Options the user may choose for each airport selector."""
        rule = self.check_root(root)
        return {
            selector_id: rule.selectors[selector_id].options
            for selector_id in self.rules.selector_ids
        }
