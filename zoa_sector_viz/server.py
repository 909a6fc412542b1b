#!/usr/bin/env python3
"""
ZOA Sector Visualizer - Flask Server

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Lightweight Flask server exposing the display session as a
JSON API. A browser map renderer (or any other client) reads the catalog,
state and layer definitions, posts user intents, and applies the returned
add/update layer operations.

Key Interactions:
- Builds the SectorCatalog (built-in ZOA catalog or a JSON file)
- Owns one DisplaySession, guarded by an RLock so concurrent requests never
  observe a half-applied cascade
- Persists the session snapshot after every accepted mutation

Navigation Guide:
- READ ROUTES: /api/config, /api/catalog, /api/state, /api/layers,
  /api/sources, /api/selectors, /api/settings
- MUTATION ROUTES: /api/sector/*, /api/area/*, /api/root, /api/selector,
  /api/settings (POST)
- HOVER: /api/hover
- STARTUP: setup_logging, initialize_session, main

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging
import sys
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

from zoa_sector_viz.catalog import load_catalog_file, load_default_catalog
from zoa_sector_viz.config_types import APP_CONFIG, AppConfig, LoggingConfig
from zoa_sector_viz.models import SectorVizError
from zoa_sector_viz.persistence import StateFile
from zoa_sector_viz.session import DisplaySession

# ═══════════════════════════════════════════════════════════════════════════
# 🌐 FLASK APPLICATION
# ═══════════════════════════════════════════════════════════════════════════

app = Flask(__name__)
CORS(app)

# Global session - initialized on startup
session: Optional[DisplaySession] = None
session_lock = threading.RLock()

logger = logging.getLogger(__name__)


def _require_fields(data: Optional[Dict[str, Any]], fields: List[str]) -> Optional[str]:
    """Return an error message for the first missing field, else None."""
    if not data:
        return "Missing request body"
    for name in fields:
        if name not in data:
            return f"Missing {name} in request body"
    return None


def _require_bool(data: Dict[str, Any], name: str) -> Optional[str]:
    """Return an error message unless data[name] is a JSON boolean."""
    if not isinstance(data[name], bool):
        return f"{name} must be a boolean, got {data[name]!r}"
    return None


def _mutation_response(accepted: bool, error: str) -> Tuple[Any, int]:
    """
    Build the response of a mutation route.

    Accepted mutations are persisted and answer with the renderer operations
    they caused. Call with session_lock held.
    """
    if not accepted:
        return jsonify({"success": False, "error": error}), 400
    session.save()
    return (
        jsonify(
            {
                "success": True,
                "updateCount": session.store.update_count,
                "ops": session.sync_ops(),
            }
        ),
        200,
    )


# ═══════════════════════════════════════════════════════════════════════════
# 📖 READ ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/config")
def get_config() -> Any:
    """Frontend configuration (paint constants, popup defaults)."""
    return jsonify(APP_CONFIG.to_frontend_dict())


@app.route("/api/catalog")
def get_catalog() -> Any:
    """The sector catalog as loaded at startup."""
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    return jsonify(session.catalog.to_dict())


@app.route("/api/state")
def get_state() -> Any:
    """Current display state, including check/uncheck-all affordances."""
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    with session_lock:
        return jsonify(session.store.to_dict())


@app.route("/api/layers")
def get_layers() -> Any:
    """
    Renderer layer definitions.

    Query Parameters:
        all: "true" to also list layer records that are not mounted yet

    Returns:
        {"definitions": [...], "ops": [...]} where ops are the add/update
        operations accumulated since the last sync
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    with session_lock:
        result: Dict[str, Any] = {
            "definitions": session.layer_definitions(),
            "ops": session.sync_ops(),
        }
        if request.args.get("all", "").lower() == "true":
            result["layers"] = session.materializer.to_dict()
        return jsonify(result)


@app.route("/api/sources")
def get_sources() -> Any:
    """Polygon sources keyed like the layers that draw them."""
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    return jsonify(session.materializer.sources())


@app.route("/api/selectors")
def get_selectors() -> Any:
    """Root selector, airport selectors, permitted options and area configs."""
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    with session_lock:
        return jsonify(session.cascade_state())


@app.route("/api/settings", methods=["GET", "POST"])
def settings() -> Any:
    """
    Get or update the hover popup settings.

    Request Body (POST):
        Any of {"showUncheckedSectors", "uncheckedSectorsInVisibleSectorsOnly",
        "followMouse"} as booleans
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    with session_lock:
        if request.method == "POST":
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return jsonify({"error": "Missing request body"}), 400
            try:
                session.update_settings(data)
            except ValueError as e:
                return jsonify({"error": str(e)}), 400
            session.save()
        return jsonify(session.settings.to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# ✏️ MUTATION ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/sector/display", methods=["POST"])
def set_sector_display() -> Any:
    """
    Check or uncheck one sector.

    Request Body:
        {"area": str, "sector": str, "value": bool}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["area", "sector", "value"])
    error = error or _require_bool(data, "value")
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.set_sector_displayed(
            data["area"], data["sector"], data["value"]
        )
        return _mutation_response(
            accepted, f"Unknown sector {data['sector']!r} in {data['area']!r}"
        )


@app.route("/api/sector/color", methods=["POST"])
def set_sector_color() -> Any:
    """
    Change one sector's color.

    Request Body:
        {"area": str, "sector": str, "color": str}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["area", "sector", "color"])
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.set_sector_color(data["area"], data["sector"], str(data["color"]))
        return _mutation_response(
            accepted, f"Unknown sector {data['sector']!r} in {data['area']!r}"
        )


@app.route("/api/area/toggle-all", methods=["POST"])
def toggle_all() -> Any:
    """
    Check or uncheck every sector of an area.

    Request Body:
        {"area": str, "value": bool}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["area", "value"])
    error = error or _require_bool(data, "value")
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.toggle_all(data["area"], data["value"])
        return _mutation_response(accepted, f"Unknown area {data['area']!r}")


@app.route("/api/area/config", methods=["POST"])
def set_area_config() -> Any:
    """
    Select the configuration of an independent area.

    Request Body:
        {"area": str, "config": str}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["area", "config"])
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.set_area_configuration(data["area"], data["config"])
        return _mutation_response(
            accepted, f"Cannot set config {data['config']!r} on {data['area']!r}"
        )


@app.route("/api/root", methods=["POST"])
def set_root() -> Any:
    """
    Change the root selector (Bay Flow) and cascade.

    Request Body:
        {"value": str}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["value"])
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.set_root_selector(data["value"])
        return _mutation_response(
            accepted, f"Invalid {session.rules.root_name} value {data['value']!r}"
        )


@app.route("/api/selector", methods=["POST"])
def set_selector() -> Any:
    """
    Change one airport selector.

    Request Body:
        {"selector": str, "value": str}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["selector", "value"])
    if error:
        return jsonify({"error": error}), 400

    with session_lock:
        accepted = session.set_selector(data["selector"], data["value"])
        return _mutation_response(
            accepted, f"Invalid value {data['value']!r} for {data['selector']!r}"
        )


# ═══════════════════════════════════════════════════════════════════════════
# 🖱️ HOVER
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/hover", methods=["POST"])
def hover() -> Any:
    """
    Popup contents for a cursor position.

    Request Body:
        {
            "lon": float,            # Longitude (WGS84)
            "lat": float,            # Latitude (WGS84)
            "styleLoaded": bool      # Optional, default true
        }

    Returns:
        {"hoveredPolys": [...features...], "vis": bool}
    """
    if session is None:
        return jsonify({"error": "Server not initialized"}), 500
    data = request.get_json(silent=True)
    error = _require_fields(data, ["lon", "lat"])
    if error:
        return jsonify({"error": error}), 400

    try:
        lon = float(data["lon"])
        lat = float(data["lat"])
    except (TypeError, ValueError):
        return jsonify({"error": "lon/lat must be numbers"}), 400
    style_loaded = data.get("styleLoaded", True)
    if not isinstance(style_loaded, bool):
        return jsonify({"error": "styleLoaded must be a boolean"}), 400

    with session_lock:
        popup = session.hover(lon, lat, style_loaded=style_loaded)
    return jsonify(popup.to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# 🚀 SERVER INITIALIZATION
# ═══════════════════════════════════════════════════════════════════════════


def setup_logging(config: LoggingConfig) -> None:
    """Configure a console handler and, if configured, a log file."""
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)
    formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")

    if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root_logger.addHandler(console)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def initialize_session(
    catalog_path: Optional[Path] = None, config: AppConfig = APP_CONFIG
) -> bool:
    """
    Load the catalog, create the session and restore persisted state.

    Args:
        catalog_path: JSON catalog; the configured catalog file or the
            built-in ZOA catalog when None

    Returns:
        True if initialization successful, False otherwise.
    """
    global session

    if catalog_path is None and config.data.catalog_file:
        catalog_path = Path(config.data.catalog_file)

    try:
        catalog = load_catalog_file(catalog_path) if catalog_path else load_default_catalog()
        new_session = DisplaySession(
            catalog,
            app_config=config,
            state_file=StateFile.from_config(config.persistence),
        )
        new_session.bootstrap()
    except (SectorVizError, OSError, ValueError) as e:
        logger.error(f"❌ Failed to initialize session: {e}")
        return False

    with session_lock:
        session = new_session
    logger.info(f"✅ Loaded {len(session.materializer.layers)} overlay layers")
    return True


def main() -> None:
    """Main entry point - initialize and start server."""
    setup_logging(APP_CONFIG.logging)

    catalog_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    if not initialize_session(catalog_path):
        logger.error("Failed to initialize. Check the catalog file.")
        sys.exit(1)

    host, port = APP_CONFIG.server.host, APP_CONFIG.server.port
    logger.info(f"🌐 Starting server at http://{host}:{port}")
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()
