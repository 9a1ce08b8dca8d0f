"""chain_engine.session

One play session: a ledger bound to its store, config and tick clock.

This layer is UI-agnostic. The UI keeps the GameSession object and passes it
around; nothing here is module-global.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from chain_core.catalog import default_ledger
from chain_core.ledger import Ledger

from .config import EngineConfig
from .persistence import KeyValueStore, load_ledger, save_ledger
from .scheduler import TickClock

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    ledger: Ledger
    store: KeyValueStore
    config: EngineConfig = field(default_factory=EngineConfig)
    clock: Optional[TickClock] = None
    ticks: int = 0
    restored: bool = False

    def __post_init__(self) -> None:
        if self.clock is None:
            self.clock = TickClock(interval_s=self.config.tick_seconds, max_catchup=self.config.max_catchup)

    @classmethod
    def open(cls, config: EngineConfig, store: KeyValueStore, ledger: Optional[Ledger] = None) -> "GameSession":
        """Build the unit chain and pull stored values, if any."""
        ledger = ledger if ledger is not None else default_ledger()
        restored = load_ledger(ledger, store, config.storage_key)
        logger.info("session opened (restored=%s, units=%d)", restored, len(ledger))
        return cls(ledger=ledger, store=store, config=config, restored=restored)

    def tick(self) -> None:
        self.ledger.tick_all()
        self.ticks += 1
        self.save()

    def pump(self, now: float) -> int:
        """Run every tick the clock says is due. Returns how many ran."""
        n = self.clock.due(now)
        for _ in range(n):
            self.tick()
        return n

    def click(self, name: str) -> bool:
        # persisted on the next tick
        return self.ledger.click(name)

    def reset(self) -> None:
        self.ledger.reset()
        self.save()
        logger.info("session reset")

    def import_values(self, mapping: Any) -> int:
        """Replace values from an imported save. Returns units restored.

        A save with no usable unit values leaves the ledger and the store
        untouched and returns 0.
        """
        staged = Ledger.from_specs(u.spec for u in self.ledger)
        n = staged.restore(mapping)
        if n == 0:
            logger.warning("import has no usable unit values, current state kept")
            return 0
        self.ledger.restore(staged.serialize())
        self.save()
        logger.info("imported %d unit values", n)
        return n

    def save(self) -> None:
        save_ledger(self.ledger, self.store, self.config.storage_key)
