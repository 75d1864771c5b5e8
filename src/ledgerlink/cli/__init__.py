"""Command line interface for ledgerlink."""
