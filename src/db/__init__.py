"""SQLite persistence for finished ledgers."""
