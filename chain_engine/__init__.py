"""Session, storage and scheduling around the unit ledger (UI independent)."""

API_VERSION = "chain-engine-v1"
