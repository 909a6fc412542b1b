"""
═══════════════════════════════════════════════════════════════════════════════
📋 CONFIGURATION TYPES
═══════════════════════════════════════════════════════════════════════════════

ARCHITECTURAL OVERVIEW
----------------------
Responsibility: Typed, frozen configuration dataclasses for the sector overlay
engine. Wraps the CONFIG dictionary from config.py so the rest of the
application receives typed objects instead of raw dict lookups.

Usage:
    from zoa_sector_viz.config_types import APP_CONFIG

    paint = APP_CONFIG.paint
    settings = APP_CONFIG.popup

For Navigation: Use VS Code outline (Ctrl+Shift+O)

NAVIGATION GUIDE
----------------
# ═════ 1. SERVER CONFIGURATION
# ═════ 2. PAINT CONFIGURATION
# ═════ 3. POPUP SETTINGS
# ═════ 4. PERSISTENCE CONFIGURATION
# ═════ 5. DATA CONFIGURATION
# ═════ 6. LOGGING CONFIGURATION
# ═════ 7. APP CONFIG (MASTER FACADE)

═══════════════════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple


# ═══════════════════════════════════════════════════════════════════════════════
# 🌐 1. SERVER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ServerConfig:
    """Flask server bind settings."""

    host: str = "127.0.0.1"
    port: int = 5052

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ServerConfig":
        """Create ServerConfig from CONFIG['server'] dictionary."""
        return cls(
            host=d.get("host", "127.0.0.1"),
            port=int(d.get("port", 5052)),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# 🎨 2. PAINT CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PaintConfig:
    """
    Paint constants shared by line and fill overlay layers.

    Attributes:
        line_width: Sector outline width in pixels.
        fill_opacity_on: Fill opacity while a sector is colored.
        fill_opacity_off: Fill opacity while a sector is transparent.
        transparent_color: Color value the renderer treats as invisible.
    """

    line_width: float = 2
    fill_opacity_on: float = 0.2
    fill_opacity_off: float = 1.0
    transparent_color: str = "transparent"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PaintConfig":
        """Create PaintConfig from CONFIG['paint'] dictionary."""
        return cls(
            line_width=d.get("line_width", 2),
            fill_opacity_on=d.get("fill_opacity_on", 0.2),
            fill_opacity_off=d.get("fill_opacity_off", 1.0),
            transparent_color=d.get("transparent_color", "transparent"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "line_width": self.line_width,
            "fill_opacity_on": self.fill_opacity_on,
            "fill_opacity_off": self.fill_opacity_off,
            "transparent_color": self.transparent_color,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 💬 3. POPUP SETTINGS
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PopupSettings:
    """
    Hover popup behaviour.

    Attributes:
        show_unchecked_sectors: Include transparent (unchecked) sectors in the
            popup contents.
        unchecked_sectors_in_visible_sectors_only: When unchecked sectors are
            shown, only open the popup if at least one visible sector is
            under the cursor.
        follow_mouse: Popup tracks the cursor (renderer-side only).
    """

    show_unchecked_sectors: bool = False
    unchecked_sectors_in_visible_sectors_only: bool = False
    follow_mouse: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PopupSettings":
        """Create PopupSettings from dictionary (snake_case or camelCase keys)."""
        return cls(
            show_unchecked_sectors=bool(
                d.get("show_unchecked_sectors", d.get("showUncheckedSectors", False))
            ),
            unchecked_sectors_in_visible_sectors_only=bool(
                d.get(
                    "unchecked_sectors_in_visible_sectors_only",
                    d.get("uncheckedSectorsInVisibleSectorsOnly", False),
                )
            ),
            follow_mouse=bool(d.get("follow_mouse", d.get("followMouse", True))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for frontend JSON API."""
        return {
            "showUncheckedSectors": self.show_unchecked_sectors,
            "uncheckedSectorsInVisibleSectorsOnly": self.unchecked_sectors_in_visible_sectors_only,
            "followMouse": self.follow_mouse,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 💾 4. PERSISTENCE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PersistenceConfig:
    """Snapshot file settings."""

    enabled: bool = True
    state_file: str = "state/display_state.json"
    lock_timeout_s: float = 5.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PersistenceConfig":
        """Create PersistenceConfig from CONFIG['persistence'] dictionary."""
        return cls(
            enabled=d.get("enabled", True),
            state_file=d.get("state_file", "state/display_state.json"),
            lock_timeout_s=d.get("lock_timeout_s", 5.0),
        )

    @property
    def state_path(self) -> Path:
        """Get snapshot file as a Path object."""
        return Path(self.state_file)


# ═══════════════════════════════════════════════════════════════════════════════
# 📂 5. DATA CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DataConfig:
    """Catalog and polygon source locations."""

    data_dir: str = "data"
    catalog_file: str = ""
    hover_required_properties: Tuple[str, ...] = ("minAlt", "maxAlt")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DataConfig":
        """Create DataConfig from CONFIG['data'] dictionary."""
        return cls(
            data_dir=d.get("data_dir", "data"),
            catalog_file=d.get("catalog_file", ""),
            hover_required_properties=tuple(
                d.get("hover_required_properties", ("minAlt", "maxAlt"))
            ),
        )

    @property
    def data_path(self) -> Path:
        """Get polygon source directory as a Path object."""
        return Path(self.data_dir)


# ═══════════════════════════════════════════════════════════════════════════════
# 📝 6. LOGGING CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LoggingConfig:
    """Log level and optional log file."""

    level: str = "INFO"
    log_file: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LoggingConfig":
        """Create LoggingConfig from CONFIG['logging'] dictionary."""
        return cls(
            level=str(d.get("level", "INFO")).upper(),
            log_file=d.get("log_file", ""),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# ⚙️ 7. APP CONFIG (MASTER FACADE)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AppConfig:
    """
    Master configuration facade.

    Create once at startup with AppConfig.from_dict(CONFIG) and pass the
    typed sub-configs to the components that need them.
    """

    server: ServerConfig = field(default_factory=ServerConfig)
    paint: PaintConfig = field(default_factory=PaintConfig)
    popup: PopupSettings = field(default_factory=PopupSettings)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        """Create AppConfig from the CONFIG dictionary."""
        return cls(
            server=ServerConfig.from_dict(d.get("server", {})),
            paint=PaintConfig.from_dict(d.get("paint", {})),
            popup=PopupSettings.from_dict(d.get("popup", {})),
            persistence=PersistenceConfig.from_dict(d.get("persistence", {})),
            data=DataConfig.from_dict(d.get("data", {})),
            logging=LoggingConfig.from_dict(d.get("logging", {})),
        )

    @classmethod
    def defaults(cls) -> "AppConfig":
        """Create with all default values."""
        return cls.from_dict({})

    def to_frontend_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for frontend JSON API."""
        return {
            "paint": self.paint.to_dict(),
            "popup": self.popup.to_dict(),
            "persistence": {"enabled": self.persistence.enabled},
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 📌 MODULE-LEVEL CONFIG INSTANCE
# ═══════════════════════════════════════════════════════════════════════════════

from zoa_sector_viz.config import CONFIG

APP_CONFIG: AppConfig = AppConfig.from_dict(CONFIG)
