# flake8: noqa E402
# Run via: uv run scripts/analyze_coinbase.py --csv data/coinbase-transactions.csv
from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from importers.coinbase_importer import COINBASE_ACTIONS, CoinbaseImporter


def run(csv_path: Path) -> int:
    """Tally action keywords and assets without building a ledger.

    Returns the number of rows whose action the importer would reject.
    """
    importer = CoinbaseImporter(csv_path)
    actions: Counter[str] = Counter()
    assets: Counter[str] = Counter()
    unknown_lines: dict[str, list[int]] = {}

    for line_number, row in importer.iter_rows():
        actions[row.transaction_type] += 1
        assets[row.asset.upper()] += 1
        if row.transaction_type not in COINBASE_ACTIONS:
            unknown_lines.setdefault(row.transaction_type, []).append(line_number)

    print(f"Rows: {sum(actions.values())}")
    print("Actions:")
    for action, count in actions.most_common():
        marker = "" if action in COINBASE_ACTIONS else "  (unsupported)"
        print(f"  {action:<24} {count}{marker}")
    print("Assets:")
    for asset, count in sorted(assets.items()):
        print(f"  {asset:<8} {count}")

    for action, lines in unknown_lines.items():
        preview = ", ".join(str(line) for line in lines[:10])
        print(f"Unsupported action {action!r} on lines {preview}{' ...' if len(lines) > 10 else ''}")

    return sum(len(lines) for lines in unknown_lines.values())


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Inspect a Coinbase export before building a ledger.")
    parser.add_argument("--csv", type=Path, default=Path("data/coinbase-transactions.csv"))
    args = parser.parse_args(argv)
    unknown = run(args.csv)
    sys.exit(1 if unknown else 0)


if __name__ == "__main__":
    main()
