"""
Tests for DisplayStateStore: mutations, affordances and batched notification.
"""

import pytest


@pytest.fixture
def notifications(store):
    received = []
    store.subscribe(received.append)
    return received


class TestDefaults:
    def test_seeded_from_catalog(self, store):
        assert store.selected_config("Area A") == "C1"
        assert store.selected_config("Area D") == "W"
        assert store.selected_config("Center") == ""
        s1 = store.area_state("Area A").sector("S1")
        assert s1.is_displayed is False
        assert s1.color == "#ff0000"
        assert store.update_count == 0


class TestMutations:
    def test_set_sector_displayed(self, store, notifications):
        assert store.set_sector_displayed("Area A", "S1", True)
        assert [s.sector_id for s in store.checked_sectors("Area A")] == ["S1"]
        assert store.update_count == 1
        assert notifications == [frozenset({"Area A"})]

    def test_set_sector_color(self, store):
        assert store.set_sector_color("Center", "Z2", "#123456")
        assert store.area_state("Center").sector("Z2").color == "#123456"

    def test_unknown_area_is_logged_noop(self, store, notifications, caplog):
        assert not store.set_sector_displayed("Area Q", "S1", True)
        assert store.update_count == 0
        assert notifications == []
        assert "Unknown area" in caplog.text

    def test_unknown_sector_is_noop(self, store):
        assert not store.set_sector_color("Area A", "D1", "#000000")
        assert store.update_count == 0

    def test_set_area_configuration_independent(self, store):
        assert store.set_area_configuration("Area A", "C2")
        assert store.selected_config("Area A") == "C2"

    def test_set_area_configuration_rejects_dependent(self, store):
        assert not store.set_area_configuration("Area D", "E")
        assert store.selected_config("Area D") == "W"

    def test_set_area_configuration_rejects_simple(self, store):
        assert not store.set_area_configuration("Center", "C1")

    def test_set_area_configuration_rejects_unknown_config(self, store):
        assert not store.set_area_configuration("Area A", "C7")
        assert store.selected_config("Area A") == "C1"

    def test_apply_dependent_configuration(self, store):
        assert store.apply_dependent_configuration("Area D", "X")
        assert store.selected_config("Area D") == "X"
        assert not store.apply_dependent_configuration("Area A", "C2")

    def test_apply_same_dependent_configuration_does_not_notify(self, store, notifications):
        assert store.apply_dependent_configuration("Area D", "W")
        assert notifications == []


class TestAffordances:
    def test_toggle_all_on(self, store):
        store.toggle_all("Area A", True)
        assert store.show_check_all_affordance("Area A") is False
        assert store.show_uncheck_all_affordance("Area A") is True

    def test_toggle_all_off(self, store):
        store.toggle_all("Area A", True)
        store.toggle_all("Area A", False)
        assert store.show_check_all_affordance("Area A") is True
        assert store.show_uncheck_all_affordance("Area A") is False

    def test_partially_checked_shows_both(self, store):
        store.set_sector_displayed("Area A", "S2", True)
        assert store.show_check_all_affordance("Area A") is True
        assert store.show_uncheck_all_affordance("Area A") is True


class TestBatching:
    def test_single_notification_per_batch(self, store, notifications):
        with store.batch():
            store.set_sector_displayed("Area A", "S1", True)
            store.apply_dependent_configuration("Area D", "E")
            store.set_selector_value("Q", "Q2")
            assert notifications == []
        assert notifications == [frozenset({"Area A", "Area D"})]
        assert store.update_count == 3

    def test_nested_batches_fold(self, store, notifications):
        with store.batch():
            with store.batch():
                store.toggle_all("Center", True)
            assert notifications == []
        assert notifications == [frozenset({"Center"})]

    def test_empty_batch_does_not_notify(self, store, notifications):
        with store.batch():
            pass
        assert notifications == []

    def test_unsubscribe(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        store.toggle_all("Center", True)
        assert received == []


class TestToDict:
    def test_frontend_shape(self, store):
        store.toggle_all("Center", True)
        d = store.to_dict()
        assert d["updateCount"] == 1
        assert d["rootSelector"] == "W"
        center = d["areaDisplayStates"][2]
        assert center["name"] == "Center"
        assert center["kind"] == "simple"
        assert center["showCheckAll"] is False
        assert center["sectors"][0]["isDisplayed"] is True
