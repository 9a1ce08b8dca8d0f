"""Unit ledger core: pure Python, no UI or storage dependencies."""

from .catalog import DEFAULT_UNITS, default_ledger, get_unit_spec
from .ledger import Ledger
from .state import Unit, UnitSpec, display_value

API_VERSION = "chain-core-v1"

__all__ = [
    "API_VERSION",
    "DEFAULT_UNITS",
    "Ledger",
    "Unit",
    "UnitSpec",
    "default_ledger",
    "display_value",
    "get_unit_spec",
]
