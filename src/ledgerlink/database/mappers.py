"""Mapper functions to convert GnuCash rows to domain entities."""

import logging

from ledgerlink.database.models import (
    Account as ORMAccount,
    Split as ORMSplit,
    Transaction as ORMTransaction,
)
from ledgerlink.domain import entities as domain
from ledgerlink.utils.date_parser import from_epoch_second, parse_timestamp, to_epoch_second

logger = logging.getLogger(__name__)

GNUCASH_ACCOUNT_TYPES = {
    "ASSET": domain.AccountType.ASSET,
    "BANK": domain.AccountType.ASSET,
    "CASH": domain.AccountType.ASSET,
    "STOCK": domain.AccountType.ASSET,
    "MUTUAL": domain.AccountType.ASSET,
    "RECEIVABLE": domain.AccountType.ASSET,
    "TRADING": domain.AccountType.ASSET,
    "LIABILITY": domain.AccountType.LIABILITY,
    "CREDIT": domain.AccountType.LIABILITY,
    "PAYABLE": domain.AccountType.LIABILITY,
    "INCOME": domain.AccountType.INCOME,
    "EXPENSE": domain.AccountType.EXPENSE,
    "EQUITY": domain.AccountType.EQUITY,
    "ROOT": domain.AccountType.ROOT,
}


def account_type_to_domain(gnucash_type: str | None) -> domain.AccountType:
    """Map a GnuCash account type name, falling back to UNKNOWN."""
    account_type = GNUCASH_ACCOUNT_TYPES.get((gnucash_type or "").upper())
    if account_type is None:
        logger.warning("Unknown GnuCash account type '%s'. Using UNKNOWN.", gnucash_type)
        return domain.AccountType.UNKNOWN
    return account_type


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert a GnuCash account row to a domain Account."""
    return domain.Account(
        id=orm_account.guid,
        name=orm_account.name or "",
        type=account_type_to_domain(orm_account.account_type),
        parent_id=orm_account.parent_guid or "",
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert a GnuCash transaction row to a domain Transaction.

    The post date is truncated to its UTC calendar day.

    Raises:
        ValueError: If the post date cannot be parsed
    """
    return domain.Transaction(
        id=orm_transaction.guid,
        post_date_epoch_second=to_epoch_second(
            from_epoch_second(parse_timestamp(orm_transaction.post_date or ""))
        ),
        description=orm_transaction.description or "",
    )


def split_to_domain(orm_split: ORMSplit) -> domain.Split:
    """Convert a GnuCash split row to a domain Split.

    Raises:
        ValueError: If the denominator is not positive
    """
    return domain.Split(
        account_id=orm_split.account_guid,
        transaction_id=orm_split.tx_guid,
        value_numerator=orm_split.value_num,
        value_denominator=orm_split.value_denom,
    )
