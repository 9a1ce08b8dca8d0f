"""
chain_core.rules
Production / conversion rules:
- tick rules (automatic growth fed by another unit)
- click rules (manual production, upstream conversions)

Every rule finds its collaborator by name through the ledger at call time.
A missing collaborator is treated exactly like an empty one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .state import Delta, Unit


class UnitLookup(Protocol):
    def get(self, name: str) -> Optional[Unit]: ...


class TickRule(Protocol):
    def tick(self, unit: Unit, units: UnitLookup) -> float:
        """Return the value delta for one time step."""
        ...


class ClickRule(Protocol):
    def click(self, unit: Unit, units: UnitLookup) -> Delta:
        """Return the full delta of one click (empty when the click is refused)."""
        ...


# -------------------------
# Tick rules
# -------------------------


@dataclass(frozen=True)
class NoYield:
    """No automatic production."""

    def tick(self, unit: Unit, units: UnitLookup) -> float:
        return 0.0


@dataclass(frozen=True)
class UpstreamYield:
    """Grow by `rate` x the source unit's current value."""

    source: str
    rate: float

    def tick(self, unit: Unit, units: UnitLookup) -> float:
        src = units.get(self.source)
        if src is None or src.value <= 0:
            return 0.0
        return float(src.value) * float(self.rate)


# -------------------------
# Click rules
# -------------------------


@dataclass(frozen=True)
class ManualClick:
    """Base producer: every click adds `amount`, no upstream cost."""

    amount: float = 1.0

    def click(self, unit: Unit, units: UnitLookup) -> Delta:
        return {unit.name: float(self.amount)}


@dataclass(frozen=True)
class Conversion:
    """Spend `cost` of the source unit to gain `gain` of this unit.

    The threshold is inclusive and checked before anything is deducted.
    """

    source: str
    cost: float
    gain: float

    def click(self, unit: Unit, units: UnitLookup) -> Delta:
        src = units.get(self.source)
        if src is None or src.value < self.cost:
            return {}
        out: Delta = {unit.name: float(self.gain)}
        out[src.name] = out.get(src.name, 0.0) - float(self.cost)
        return out
