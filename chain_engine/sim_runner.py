"""chain_engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic by avoiding the UI, the wall clock and disk.
It plays a fixed clicking script against an in-memory store.
"""

from __future__ import annotations

from typing import Any, Dict

from .config import EngineConfig
from .persistence import MemoryStore
from .session import GameSession


def run_headless_sim(ticks: int = 60, clicks_per_tick: int = 5) -> Dict[str, Any]:
    """Run a deterministic session and return summary."""
    cfg = EngineConfig()
    store = MemoryStore()
    session = GameSession.open(cfg, store)

    clicks_applied = 0
    for _ in range(ticks):
        for _ in range(clicks_per_tick):
            clicks_applied += int(session.click("A"))
        # climb whenever a conversion is affordable
        for name in ("B", "C", "D", "E"):
            clicks_applied += int(session.click(name))
        session.tick()

    return {
        "ticks": session.ticks,
        "final": session.ledger.serialize(),
        "clicks_applied": clicks_applied,
        "stored": store.get_item(cfg.storage_key),
    }


if __name__ == "__main__":
    summary = run_headless_sim()
    print(f"OK: {summary['ticks']} ticks, {summary['clicks_applied']} clicks applied.")
    print("Final values:", summary["final"])
