"""Domain models and the ledger accumulation engine.

`transaction` holds the immutable (Pydantic) records produced by importers;
`ledger` holds the per-asset accounts and the rules for applying records to
them. Nothing here touches files or the database.
"""

__all__ = [
    "ledger",
    "transaction",
]
