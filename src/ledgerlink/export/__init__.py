"""Serializers that turn a ledgerlink model into text."""

from ledgerlink.export.csv_exporter import export_csv
from ledgerlink.export.ledger_exporter import export_ledger

__all__ = ["export_csv", "export_ledger"]
