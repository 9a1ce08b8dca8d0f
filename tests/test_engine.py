"""Test the engine layer: clock, session, export, config, headless runner."""
import json

import pytest

from chain_engine.config import EngineConfig, config_from_env
from chain_engine.export import dumps_save_export, import_save_file, make_save_export, read_save_export
from chain_engine.persistence import MemoryStore
from chain_engine.scheduler import TickClock
from chain_engine.session import GameSession
from chain_engine.sim_runner import run_headless_sim


class TestTickClock:

    def test_first_call_arms(self):
        clock = TickClock(interval_s=1.0)
        assert clock.due(100.0) == 0
        assert clock.due(100.5) == 0
        assert clock.due(101.0) == 1

    def test_remainder_carries(self):
        clock = TickClock(interval_s=1.0)
        clock.due(0.0)
        assert clock.due(1.5) == 1
        assert clock.due(2.0) == 1
        assert clock.due(2.9) == 0

    def test_catchup_is_capped(self):
        clock = TickClock(interval_s=1.0, max_catchup=5)
        clock.due(0.0)
        assert clock.due(100.0) == 5
        assert clock.due(100.5) == 0
        assert clock.due(101.0) == 1

    def test_reset_rearms(self):
        clock = TickClock(interval_s=1.0)
        clock.due(0.0)
        clock.reset()
        assert clock.due(50.0) == 0

    @pytest.mark.parametrize("kwargs", [{"interval_s": 0}, {"interval_s": -1.0}, {"max_catchup": 0}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            TickClock(**kwargs)


class TestGameSession:

    def test_open_fresh(self, config, store):
        session = GameSession.open(config, store)
        assert not session.restored
        assert session.ledger.names() == ["A", "B", "C", "D", "E"]
        assert session.clock.interval_s == 1.0

    def test_open_restores(self, config):
        store = MemoryStore({"units": json.dumps({"A": 12.0, "B": 3.5})})
        session = GameSession.open(config, store)
        assert session.restored
        assert session.ledger.value_of("A") == 12.0
        assert session.ledger.value_of("B") == 3.5
        assert session.ledger.value_of("C") == 0.0

    def test_open_with_corrupt_state(self, config):
        session = GameSession.open(config, MemoryStore({"units": "]["}))
        assert not session.restored
        assert all(u.value == 0.0 for u in session.ledger)

    def test_tick_persists(self, config, store):
        session = GameSession.open(config, store)
        session.click("A")
        assert store.get_item("units") is None
        session.tick()
        assert session.ticks == 1
        assert json.loads(store.get_item("units"))["A"] == 1.0

    def test_pump_runs_due_ticks(self, config, store):
        session = GameSession.open(config, store)
        session.ledger.restore({"B": 2.0})
        assert session.pump(10.0) == 0
        assert session.pump(13.2) == 3
        assert session.ticks == 3
        assert session.ledger.value_of("A") == pytest.approx(3.0)

    def test_reset_persists(self, config, store):
        session = GameSession.open(config, store)
        session.ledger.restore({"A": 9.0})
        session.tick()
        session.reset()
        assert json.loads(store.get_item("units")) == {"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.0, "E": 0.0}

    def test_import_replaces_values(self, config, store):
        session = GameSession.open(config, store)
        session.ledger.restore({"A": 9.0, "B": 1.0})
        assert session.import_values({"C": 4.0}) == 1
        assert session.ledger.serialize() == {"A": 0.0, "B": 0.0, "C": 4.0, "D": 0.0, "E": 0.0}
        assert json.loads(store.get_item("units"))["C"] == 4.0

    @pytest.mark.parametrize(
        "raw",
        ['{"meta": {"app": "x"}, "foo": 1}', '{"units": {"A": "junk"}}'],
    )
    def test_import_without_usable_values_keeps_state(self, config, store, raw):
        session = GameSession.open(config, store)
        session.ledger.restore({"A": 500.0})
        session.tick()
        saved = store.get_item("units")

        assert session.import_values(read_save_export(raw)) == 0
        assert session.ledger.value_of("A") == 500.0
        assert store.get_item("units") == saved

    def test_custom_storage_key(self, store):
        cfg = EngineConfig(storage_key="slot")
        session = GameSession.open(cfg, store)
        session.tick()
        assert store.get_item("slot") is not None
        assert store.get_item("units") is None


class TestExport:

    def test_export_then_import(self, ledger):
        ledger.restore({"A": 1.25, "E": 2.0})
        obj = make_save_export(ledger, ticks=7, app="Chain Clicker", version="1.0.0")
        assert obj["meta"]["ticks"] == 7
        assert read_save_export(dumps_save_export(obj)) == ledger.serialize()

    def test_flat_record_accepted(self):
        assert read_save_export('{"A": 3}') == {"A": 3}

    @pytest.mark.parametrize("raw", ["nope", "[]", '{"units": 5}', "12"])
    def test_bad_input(self, raw):
        assert read_save_export(raw) is None

    def test_import_save_file_success(self, config, store):
        session = GameSession.open(config, store)
        ok, message = import_save_file(session, b'{"units": {"A": 2.5, "D": 1}}')
        assert ok
        assert message == "Save loaded (2 units)."
        assert session.ledger.value_of("A") == 2.5
        assert session.ledger.value_of("D") == 1.0

    @pytest.mark.parametrize(
        "data, text",
        [
            (b"\xff\xfe\x00", "Import failed"),
            (b"not json", "not a Chain Clicker save"),
            (b'{"meta": {"app": "x"}, "foo": 1}', "no unit values"),
            (b'{"units": {"A": "junk"}}', "no unit values"),
        ],
    )
    def test_import_save_file_rejects(self, config, store, data, text):
        session = GameSession.open(config, store)
        session.ledger.restore({"A": 500.0})
        ok, message = import_save_file(session, data)
        assert not ok
        assert text in message
        assert session.ledger.value_of("A") == 500.0
        assert store.get_item("units") is None


class TestConfig:

    def test_defaults(self):
        cfg = config_from_env({})
        assert cfg == EngineConfig()
        assert cfg.tick_ms == 1000
        assert cfg.storage_key == "units"
        assert cfg.tick_seconds == 1.0

    def test_from_env(self):
        cfg = config_from_env(
            {
                "CHAIN_CLICKER_TICK_MS": "250",
                "CHAIN_CLICKER_STORAGE_KEY": "slot1",
                "CHAIN_CLICKER_SAVE_PATH": "/tmp/save.json",
                "CHAIN_CLICKER_MAX_CATCHUP": "2",
                "CHAIN_CLICKER_LOG_LEVEL": "debug",
            }
        )
        assert cfg.tick_ms == 250
        assert cfg.tick_seconds == 0.25
        assert cfg.storage_key == "slot1"
        assert cfg.save_path == "/tmp/save.json"
        assert cfg.max_catchup == 2
        assert cfg.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {"CHAIN_CLICKER_TICK_MS": "fast"},
            {"CHAIN_CLICKER_TICK_MS": "0"},
            {"CHAIN_CLICKER_MAX_CATCHUP": "-3"},
            {"CHAIN_CLICKER_LOG_LEVEL": "chatty"},
        ],
    )
    def test_invalid_env(self, env):
        with pytest.raises(ValueError):
            config_from_env(env)


class TestHeadlessSim:

    def test_two_ticks_exact(self):
        summary = run_headless_sim(ticks=2, clicks_per_tick=5)
        assert summary["ticks"] == 2
        # round 1: five A; round 2: A reaches 10, then B, C and D convert once each
        assert summary["clicks_applied"] == 13
        assert summary["final"] == pytest.approx({"A": 0.0, "B": 0.0, "C": 0.1, "D": 1.0, "E": 0.0})

    def test_long_run_stays_non_negative(self):
        summary = run_headless_sim(ticks=200, clicks_per_tick=7)
        assert all(v >= 0.0 for v in summary["final"].values())
        assert json.loads(summary["stored"]) == summary["final"]
