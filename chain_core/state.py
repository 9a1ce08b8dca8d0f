"""
chain_core.state
Core domain data models (UI/storage independent).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .rules import ClickRule, TickRule


Delta = Dict[str, float]


@dataclass(frozen=True)
class UnitSpec:
    """Static declaration of one unit.

    Rules are read from the UnitSpec at call time, so the catalog is the only
    place production behavior is written down.
    """

    name: str
    description: str
    tick_rule: "TickRule"
    click_rule: "ClickRule"


@dataclass
class Unit:
    """One named resource in the chain.

    Only `value` ever changes after construction.
    """

    spec: UnitSpec
    value: float = 0.0

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def description(self) -> str:
        return self.spec.description


def as_quantity(x: Any) -> Optional[float]:
    """Return x as a finite, non-negative float, or None if it can't be one."""
    if isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f) or f < 0.0:
        return None
    return f


def display_value(value: float) -> str:
    """Round to 3 decimals and drop trailing zeros (12.5, 3, 0.125)."""
    txt = f"{float(value):.3f}".rstrip("0").rstrip(".")
    if txt in ("", "-0"):
        return "0"
    return txt
