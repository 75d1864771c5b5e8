"""CLI commands for ledgerlink."""
