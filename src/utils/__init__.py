"""Report sinks and formatting helpers for finished ledgers."""
