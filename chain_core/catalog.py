"""
chain_core.catalog
The unit table (names, descriptions, rules).

Kept in core so the whole production chain lives in one place, but the UI can
still display descriptions.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ledger import Ledger
from .rules import Conversion, ManualClick, NoYield, UpstreamYield
from .state import UnitSpec


# Chain: E feeds D feeds C feeds B feeds A; clicks convert the other way.
DEFAULT_UNITS: List[UnitSpec] = [
    UnitSpec(
        name="A",
        description="One per click",
        tick_rule=UpstreamYield(source="B", rate=0.5),
        click_rule=ManualClick(amount=1.0),
    ),
    UnitSpec(
        name="B",
        description="1 per 10 A",
        tick_rule=UpstreamYield(source="C", rate=0.25),
        click_rule=Conversion(source="A", cost=10.0, gain=100.0),
    ),
    UnitSpec(
        name="C",
        description="1 per 100 B",
        tick_rule=UpstreamYield(source="D", rate=0.10),
        click_rule=Conversion(source="B", cost=100.0, gain=100.0),
    ),
    UnitSpec(
        name="D",
        description="1 per 100 C",
        tick_rule=UpstreamYield(source="E", rate=0.05),
        click_rule=Conversion(source="C", cost=100.0, gain=1.0),
    ),
    UnitSpec(
        name="E",
        description="1 per 100 D",
        tick_rule=NoYield(),
        click_rule=Conversion(source="D", cost=100.0, gain=1.0),
    ),
]

_BY_NAME: Dict[str, UnitSpec] = {s.name: s for s in DEFAULT_UNITS}


def get_unit_spec(name: str) -> Optional[UnitSpec]:
    return _BY_NAME.get(name)


def default_ledger() -> Ledger:
    """Fresh ledger with every unit at 0.

    Keep it in core so headless tests and the UI share the same chain.
    """
    return Ledger.from_specs(DEFAULT_UNITS)
