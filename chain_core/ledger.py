"""
chain_core.ledger
The unit ledger: every unit, its value, and the two operations that move
values around (tick_all, click).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .state import Delta, Unit, UnitSpec, as_quantity

logger = logging.getLogger(__name__)


class Ledger:
    """Ordered collection of units plus a name -> unit registry.

    Order is declaration order. It decides the tick order and the display
    order, nothing else.
    """

    def __init__(self, units: Iterable[Unit]) -> None:
        self._units: List[Unit] = list(units)
        self._by_name: Dict[str, Unit] = {}
        for u in self._units:
            if u.name in self._by_name:
                raise ValueError(f"Duplicate unit name: {u.name!r}")
            self._by_name[u.name] = u

    @classmethod
    def from_specs(cls, specs: Iterable[UnitSpec]) -> "Ledger":
        return cls(Unit(spec=s, value=0.0) for s in specs)

    # ------------------------------------------------------------------
    # Lookup

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[Unit]:
        return self._by_name.get(name)

    def value_of(self, name: str) -> float:
        u = self._by_name.get(name)
        return float(u.value) if u is not None else 0.0

    def names(self) -> List[str]:
        return [u.name for u in self._units]

    # ------------------------------------------------------------------
    # Operations

    def tick_all(self) -> None:
        """Apply every unit's tick rule in order.

        Each delta lands before the next unit is computed, so a unit that
        comes after its source in the order sees the source's new value.
        """
        for u in self._units:
            delta = u.spec.tick_rule.tick(u, self)
            if delta:
                u.value += float(delta)

    def click(self, name: str) -> bool:
        """Apply one click on `name`. Unknown names are a no-op.

        Returns True if any value changed.
        """
        u = self._by_name.get(name)
        if u is None:
            logger.debug("click on unknown unit %r ignored", name)
            return False
        delta = u.spec.click_rule.click(u, self)
        return self._apply(delta)

    def rates(self) -> Delta:
        """Preview of the next tick's deltas against current values (read only)."""
        return {u.name: float(u.spec.tick_rule.tick(u, self)) for u in self._units}

    def reset(self) -> None:
        for u in self._units:
            u.value = 0.0

    def _apply(self, delta: Delta) -> bool:
        # whole delta is computed by the rule before any value moves
        changed = False
        for name, d in delta.items():
            target = self._by_name.get(name)
            if target is None or not d:
                continue
            target.value += float(d)
            changed = True
        return changed

    # ------------------------------------------------------------------
    # Persistence bridge

    def serialize(self) -> Dict[str, float]:
        return {u.name: float(u.value) for u in self._units}

    def restore(self, mapping: Any) -> int:
        """Overwrite values from a name -> value mapping.

        Anything that is not a mapping counts as "no stored state". Bad
        entries are skipped, the rest still apply. Returns how many units
        were restored.
        """
        if not isinstance(mapping, Mapping):
            logger.warning("ignoring stored state of type %s", type(mapping).__name__)
            return 0
        restored = 0
        for u in self._units:
            if u.name not in mapping or mapping[u.name] is None:
                continue
            v = as_quantity(mapping[u.name])
            if v is None:
                logger.warning("ignoring stored value for %s: %r", u.name, mapping[u.name])
                continue
            u.value = v
            restored += 1
        return restored
