"""Importers that turn external files into ledgerlink models."""

from ledgerlink.importers.account_listing import parse_account_listing
from ledgerlink.importers.csv_listing import DataField, create_csv_importer
from ledgerlink.importers.ledger_file import parse_ledger
from ledgerlink.importers.tsv_mapping import parse_tsv_mapping

__all__ = [
    "DataField",
    "create_csv_importer",
    "parse_account_listing",
    "parse_ledger",
    "parse_tsv_mapping",
]
