"""
chain_core.selfcheck
Minimal "it runs" proof for the ledger.

Run:
  python -m chain_core.selfcheck
"""

from __future__ import annotations

from .catalog import default_ledger


def run_chain_smoke(ticks: int = 60) -> None:
    ledger = default_ledger()

    # climb the chain by hand: enough A for B, B for C, C for D, D for E
    for _ in range(10):
        ledger.click("A")
    assert ledger.click("B")
    assert ledger.value_of("A") == 0.0

    ledger.restore({"A": 20_000.0})
    for _ in range(2000):
        ledger.click("B")
    for _ in range(1900):
        ledger.click("C")
    for _ in range(1800):
        ledger.click("D")
    for _ in range(10):
        ledger.click("E")

    for t in range(ticks):
        before = ledger.serialize()
        ledger.tick_all()
        after = ledger.serialize()

        # invariants
        for name, v in after.items():
            assert v >= 0.0, (t, name, v)
            assert v >= before[name], (t, name, before[name], v)

    assert ledger.restore(ledger.serialize()) == len(ledger)

    print(f"OK: {ticks}-tick ledger smoke test passed.")
    print("Final values:", ledger.serialize())


if __name__ == "__main__":
    run_chain_smoke()
