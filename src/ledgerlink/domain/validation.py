"""Model invariant checks."""

from fractions import Fraction
from typing import Iterable, Mapping

from ledgerlink.domain.entities import Account, Split, Transaction


def balance_of(splits: Iterable[Split]) -> Fraction:
    """Return the exact sum of the split amounts."""
    return sum((split.amount for split in splits), Fraction(0))


def are_balanced(splits: Iterable[Split]) -> bool:
    """Return True if the splits sum to exactly zero (double-entry balance)."""
    return balance_of(splits) == 0


def bad_references(
    split: Split,
    accounts_by_id: Mapping[str, Account],
    transactions_by_id: Mapping[str, Transaction],
) -> list[str]:
    """List which references of a split do not resolve.

    Returns:
        Subset of ["transaction", "account"], empty when the split is valid
    """
    bad = []
    if split.transaction_id not in transactions_by_id:
        bad.append("transaction")
    if split.account_id not in accounts_by_id:
        bad.append("account")
    return bad
