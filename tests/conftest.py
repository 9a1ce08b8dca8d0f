"""Pytest fixtures for Chain Clicker tests."""
import pytest

from chain_core.catalog import DEFAULT_UNITS, default_ledger
from chain_core.ledger import Ledger
from chain_engine.config import EngineConfig
from chain_engine.persistence import MemoryStore


@pytest.fixture
def ledger():
    """Fresh A-E ledger, every unit at 0."""
    return default_ledger()


@pytest.fixture
def ones_ledger():
    """A-E ledger with every unit at 1."""
    led = default_ledger()
    led.restore({name: 1.0 for name in led.names()})
    return led


@pytest.fixture
def reversed_ledger():
    """The same units declared E, D, C, B, A."""
    return Ledger.from_specs(list(reversed(DEFAULT_UNITS)))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def config():
    return EngineConfig()
