"""Domain layer for ledgerlink."""

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction
from ledgerlink.domain.merge import merge
from ledgerlink.domain.model import Model

__all__ = [
    "Account",
    "AccountType",
    "Model",
    "Split",
    "Transaction",
    "merge",
]
