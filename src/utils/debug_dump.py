from __future__ import annotations

import json
from pathlib import Path

from domain.ledger import Ledger


def ledger_payload(ledger: Ledger) -> dict[str, object]:
    return {
        account.name: {
            "quantity": str(account.quantity),
            "history": [transaction.model_dump(mode="json") for transaction in account.history],
        }
        for account in ledger.accounts()
    }


def dump_ledger(ledger: Ledger, path: Path) -> Path:
    """Write every account with its balance and ordered history as JSON."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(ledger_payload(ledger), indent=2), encoding="utf-8")
    return path
