from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from domain.ledger import Ledger

from .formatting import format_decimal, format_time


@dataclass
class AccountSummary:
    asset_id: str
    quantity: Decimal
    entries: int
    first_seen: datetime | None
    last_seen: datetime | None


@dataclass
class LedgerSummary:
    accounts: list[AccountSummary] = field(default_factory=list)

    @property
    def total_entries(self) -> int:
        return sum(account.entries for account in self.accounts)


def compute_ledger_summary(ledger: Ledger, *, include_empty: bool = True) -> LedgerSummary:
    summaries: list[AccountSummary] = []
    for account in ledger.accounts():
        if not include_empty and account.quantity == 0:
            continue
        summaries.append(
            AccountSummary(
                asset_id=account.name,
                quantity=account.quantity,
                entries=len(account.history),
                first_seen=account.history[0].time if account.history else None,
                last_seen=account.history[-1].time if account.history else None,
            )
        )
    return LedgerSummary(accounts=summaries)


def render_ledger_summary(summary: LedgerSummary) -> None:
    print("Ledger:")
    if not summary.accounts:
        print("  (empty)")
        return

    labels = ("Asset", "Quantity", "Entries", "First", "Last")
    rows: list[tuple[str, str, str, str, str]] = [
        (
            account.asset_id,
            format_decimal(account.quantity),
            str(account.entries),
            format_time(account.first_seen),
            format_time(account.last_seen),
        )
        for account in summary.accounts
    ]

    widths = [max(len(label), max(len(row[idx]) for row in rows)) for idx, label in enumerate(labels)]

    def _line(values: tuple[str, ...]) -> str:
        asset, *rest = values
        cells = [f"{asset:<{widths[0]}}"]
        cells.extend(f"{value:>{width}}" for value, width in zip(rest, widths[1:]))
        return " ".join(cells)

    header = _line(labels)
    lines = [header, "-" * len(header)]
    lines.extend(_line(row) for row in rows)
    lines.append("-" * len(header))
    lines.append(f"{len(summary.accounts)} accounts, {summary.total_entries} history entries")
    print("\n".join(lines))
