"""chain_engine.export

Small helpers for save-file export/import.

An export is JSON-serializable so it can be downloaded and uploaded later.
A bare flat record (what the store holds) is accepted on import too.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from chain_core.ledger import Ledger

from .session import GameSession

logger = logging.getLogger(__name__)


def make_save_export(ledger: Ledger, *, ticks: int, app: str, version: str) -> Dict[str, Any]:
    return {
        "meta": {
            "app": str(app),
            "version": str(version),
            "ticks": int(ticks),
            "exported_at": datetime.now(timezone.utc).isoformat(),
        },
        "units": ledger.serialize(),
    }


def dumps_save_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)


def read_save_export(raw: str) -> Optional[Mapping[str, Any]]:
    """Return the name -> value record from an export (or a bare record), or None."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("save import is not JSON: %s", e)
        return None
    if not isinstance(data, dict):
        return None
    units = data.get("units") if "units" in data else data
    if not isinstance(units, dict):
        return None
    return units


def import_save_file(session: GameSession, data: bytes) -> Tuple[bool, str]:
    """Apply an uploaded save to the session. Returns (ok, message for the UI)."""
    try:
        raw = data.decode("utf-8")
    except UnicodeDecodeError as e:
        return False, f"Import failed: {e}"
    units = read_save_export(raw)
    if units is None:
        return False, "Import failed: not a Chain Clicker save."
    n = session.import_values(units)
    if n == 0:
        return False, "Import failed: no unit values in this save."
    return True, f"Save loaded ({n} units)."
