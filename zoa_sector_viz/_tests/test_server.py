"""
Tests for the Flask JSON API (Flask test client).
"""

import json

import pytest

from zoa_sector_viz import server
from zoa_sector_viz.config_types import AppConfig
from zoa_sector_viz.persistence import StateFile


@pytest.fixture
def client(monkeypatch, session):
    monkeypatch.setattr(server, "session", session)
    server.app.config["TESTING"] = True
    with server.app.test_client() as c:
        yield c


def post(client, url, body):
    return client.post(url, data=json.dumps(body), content_type="application/json")


class TestReadRoutes:
    def test_config(self, client):
        data = client.get("/api/config").get_json()
        assert data["paint"]["line_width"] == 2
        assert "showUncheckedSectors" in data["popup"]

    def test_catalog(self, client):
        data = client.get("/api/catalog").get_json()
        assert [a["name"] for a in data["areas"]] == ["Area A", "Area D", "Center"]

    def test_state(self, client):
        data = client.get("/api/state").get_json()
        assert data["rootSelector"] == "W"
        assert data["areaDisplayStates"][0]["showCheckAll"] is True

    def test_layers_first_call_adds(self, client):
        data = client.get("/api/layers").get_json()
        assert len(data["definitions"]) == 10
        assert all(op["op"] == "add" for op in data["ops"])
        assert "layers" not in data

    def test_layers_all(self, client):
        data = client.get("/api/layers?all=true").get_json()
        assert len(data["layers"]) == 9

    def test_sources(self, client):
        sources = client.get("/api/sources").get_json()
        assert {"id": "Z1", "url": "center/z1.geojson"} in sources

    def test_selectors(self, client):
        data = client.get("/api/selectors").get_json()
        assert data["root"] == "W"
        assert data["selectorOptions"]["Q"] == ["Q1", "Q2"]

    def test_not_initialized(self, monkeypatch):
        monkeypatch.setattr(server, "session", None)
        response = server.app.test_client().get("/api/state")
        assert response.status_code == 500


class TestMutationRoutes:
    def test_sector_display(self, client):
        client.get("/api/layers")
        response = post(client, "/api/sector/display", {"area": "Center", "sector": "Z1", "value": True})
        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        updated = {op["layer"]["id"] for op in data["ops"] if op["op"] == "update"}
        assert updated == {"Z1_line", "Z1_fill"}

    def test_sector_color(self, client):
        response = post(client, "/api/sector/color", {"area": "Area A", "sector": "S1", "color": "#abcdef"})
        assert response.status_code == 200
        state = client.get("/api/state").get_json()
        assert state["areaDisplayStates"][0]["sectors"][0]["color"] == "#abcdef"

    @pytest.mark.parametrize("value", ["false", 0, 1, None])
    def test_sector_display_requires_boolean(self, client, value):
        response = post(client, "/api/sector/display", {"area": "Center", "sector": "Z1", "value": value})
        assert response.status_code == 400
        assert "value must be a boolean" in response.get_json()["error"]
        state = client.get("/api/state").get_json()
        assert state["areaDisplayStates"][2]["sectors"][0]["isDisplayed"] is False

    @pytest.mark.parametrize("value", ["true", 1])
    def test_toggle_all_requires_boolean(self, client, value):
        response = post(client, "/api/area/toggle-all", {"area": "Area A", "value": value})
        assert response.status_code == 400
        assert client.get("/api/state").get_json()["areaDisplayStates"][0]["showCheckAll"] is True

    def test_unknown_sector(self, client):
        response = post(client, "/api/sector/display", {"area": "Center", "sector": "Z9", "value": True})
        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_missing_field(self, client):
        response = post(client, "/api/sector/display", {"area": "Center"})
        assert response.status_code == 400
        assert "Missing sector" in response.get_json()["error"]

    def test_missing_body(self, client):
        assert client.post("/api/root").status_code == 400

    def test_toggle_all(self, client):
        response = post(client, "/api/area/toggle-all", {"area": "Area A", "value": True})
        assert response.status_code == 200
        area = client.get("/api/state").get_json()["areaDisplayStates"][0]
        assert area["showCheckAll"] is False
        assert area["showUncheckAll"] is True

    def test_area_config_independent(self, client):
        client.get("/api/layers")
        response = post(client, "/api/area/config", {"area": "Area A", "config": "C2"})
        assert response.status_code == 200
        added = {op["layer"]["id"] for op in response.get_json()["ops"] if op["op"] == "add"}
        assert added == {"S1_C2_line", "S1_C2_fill", "S2_C2_line", "S2_C2_fill"}

    def test_area_config_dependent_rejected(self, client):
        response = post(client, "/api/area/config", {"area": "Area D", "config": "E"})
        assert response.status_code == 400

    def test_root(self, client):
        response = post(client, "/api/root", {"value": "E"})
        assert response.status_code == 200
        data = client.get("/api/selectors").get_json()
        assert data["root"] == "E"
        assert data["areaConfigs"] == {"Area D": "E"}

    def test_invalid_root(self, client):
        assert post(client, "/api/root", {"value": "NORTH"}).status_code == 400

    def test_selector(self, client):
        response = post(client, "/api/selector", {"selector": "Q", "value": "Q2"})
        assert response.status_code == 200
        assert client.get("/api/selectors").get_json()["areaConfigs"] == {"Area D": "X"}

    def test_invalid_selector_value(self, client):
        assert post(client, "/api/selector", {"selector": "Q", "value": "Q7"}).status_code == 400

    def test_mutation_persists_snapshot(self, client, session, tmp_path):
        session.state_file = StateFile(tmp_path / "snap.json")
        post(client, "/api/sector/display", {"area": "Center", "sector": "Z2", "value": True})
        saved = json.loads((tmp_path / "snap.json").read_text(encoding="utf-8"))
        center = saved["areaDisplayStates"][2]
        assert center["sectors"][1]["isDisplayed"] is True


class TestHoverAndSettings:
    def test_hover(self, client):
        post(client, "/api/sector/display", {"area": "Center", "sector": "Z1", "value": True})
        data = post(client, "/api/hover", {"lon": 0.5, "lat": 0.5}).get_json()
        assert data["vis"] is True
        assert [f["layer"]["id"] for f in data["hoveredPolys"]] == ["Z1_fill"]

    def test_hover_style_not_loaded(self, client):
        data = post(client, "/api/hover", {"lon": 0.5, "lat": 0.5, "styleLoaded": False}).get_json()
        assert data == {"hoveredPolys": [], "vis": False}

    def test_hover_bad_coordinates(self, client):
        assert post(client, "/api/hover", {"lon": "x", "lat": 0}).status_code == 400

    def test_settings_round_trip(self, client):
        assert client.get("/api/settings").get_json()["showUncheckedSectors"] is False
        data = post(client, "/api/settings", {"showUncheckedSectors": True}).get_json()
        assert data["showUncheckedSectors"] is True
        data = post(client, "/api/hover", {"lon": 0.5, "lat": 0.5}).get_json()
        assert len(data["hoveredPolys"]) == 4

    @pytest.mark.parametrize("value", ["false", 0, 1])
    def test_settings_require_booleans(self, client, value):
        response = post(client, "/api/settings", {"showUncheckedSectors": value})
        assert response.status_code == 400
        assert client.get("/api/settings").get_json()["showUncheckedSectors"] is False

    def test_hover_style_loaded_requires_boolean(self, client):
        response = post(client, "/api/hover", {"lon": 0.5, "lat": 0.5, "styleLoaded": "false"})
        assert response.status_code == 400


class TestInitialization:
    def test_initialize_default_catalog(self, monkeypatch):
        monkeypatch.setattr(server, "session", None)
        config = AppConfig.from_dict({"persistence": {"enabled": False}})
        assert server.initialize_session(config=config)
        assert server.session.store.root_selector == "SFOW"
        assert server.session.state_file is None

    def test_initialize_inconsistent_catalog(self, monkeypatch, tmp_path, catalog_data):
        monkeypatch.setattr(server, "session", None)
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")
        config = AppConfig.from_dict({"persistence": {"enabled": False}})
        # Area D's configs do not match the Bay Flow projections
        assert server.initialize_session(path, config=config) is False
        assert server.session is None

    @pytest.mark.parametrize("drop", ["sectorName", "url"])
    def test_initialize_malformed_catalog(self, monkeypatch, tmp_path, catalog_data, drop):
        monkeypatch.setattr(server, "session", None)
        if drop == "sectorName":
            del catalog_data["areas"][0]["sectorConfigs"][0]["sectorName"]
        else:
            del catalog_data["areas"][0]["sectorConfigs"][0]["configPolyUrls"][0]["url"]
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")
        config = AppConfig.from_dict({"persistence": {"enabled": False}})
        assert server.initialize_session(path, config=config) is False
        assert server.session is None
