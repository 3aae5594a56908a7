from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from domain.transaction import Transaction


class TransactionImporter(ABC):
    """Reads one exchange export and yields canonical transactions in file order."""

    exchange: str

    def __init__(self, source_path: str | Path) -> None:
        self._source_path = Path(source_path)

    @abstractmethod
    def iter_transactions(self) -> Iterator[Transaction]: ...

    def load_transactions(self) -> list[Transaction]:
        return list(self.iter_transactions())
