"""
Mutable display-state records.

One SectorDisplayState exists for every sector of every area for the whole
session. Records are created from catalog defaults and only ever mutated
through DisplayStateStore.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SectorDisplayState:
    """Checked state and color of one sector."""

    sector_id: str
    area_id: str
    is_displayed: bool = False
    color: str = "#ffffff"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.sector_id,
            "parentAreaName": self.area_id,
            "isDisplayed": self.is_displayed,
            "color": self.color,
        }


@dataclass
class AreaDisplayState:
    """Selected configuration and sector states of one area.

    selected_config is "" for simple areas, which have no configuration.
    """

    area_id: str
    selected_config: str = ""
    sectors: List[SectorDisplayState] = field(default_factory=list)

    def sector(self, sector_id: str) -> Optional[SectorDisplayState]:
        for state in self.sectors:
            if state.sector_id == sector_id:
                return state
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.area_id,
            "selectedConfig": self.selected_config,
            "sectors": [s.to_dict() for s in self.sectors],
        }
