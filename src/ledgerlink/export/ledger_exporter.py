"""Ledger CLI format exporter."""

import logging

from ledgerlink.domain.entities import AccountType, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.importers.ledger_file import ACCOUNT_DECLARATION, CODE_TOKEN
from ledgerlink.utils.amount_parser import format_ledger_currency
from ledgerlink.utils.date_parser import format_ledger_date

logger = logging.getLogger(__name__)

IMBALANCE_ACCOUNT_NAME = "Imbalance"
ACCOUNT_AMOUNT_GAP = 2
EMPTY_CODE = "()"


def transaction_header(transaction: Transaction) -> str:
    """Header line of a cleared transaction.

    A description whose first word looks like a transaction code is preceded
    by an empty code so that reading the file back keeps that word.
    """
    header = f"{format_ledger_date(transaction.post_date_epoch_second)} *"
    first_word = transaction.description.split()[:1]
    if first_word and CODE_TOKEN.fullmatch(first_word[0]):
        header = f"{header} {EMPTY_CODE}"
    return f"{header} {transaction.description}"


def export_ledger(model: Model) -> list[str]:
    """Render a model as ledger file lines.

    Account declarations come first, sorted by full name and without ROOT
    accounts, then every transaction by date and description. All
    transactions are written as cleared. Splits are ordered from largest to
    smallest amount; a split whose account is unknown is written against
    the "Imbalance" account.

    Args:
        model: Model to export

    Returns:
        Lines without trailing newlines
    """
    full_names = {
        account.id: model.full_account_name(account.id) for account in model.accounts
    }
    declared = sorted(
        {
            full_names[account.id]
            for account in model.accounts
            if full_names[account.id] and account.type is not AccountType.ROOT
        }
    )
    names = [*full_names.values(), IMBALANCE_ACCOUNT_NAME]
    width = max(len(name) for name in names) + ACCOUNT_AMOUNT_GAP

    lines = [f"{ACCOUNT_DECLARATION} {name}" for name in declared]
    if lines:
        lines.append("")

    def split_account_name(split: Split) -> str:
        return full_names.get(split.account_id) or IMBALANCE_ACCOUNT_NAME

    transactions = sorted(
        model.transactions,
        key=lambda transaction: (transaction.post_date_epoch_second, transaction.description),
    )
    for transaction in transactions:
        lines.append(transaction_header(transaction))
        splits = sorted(
            model.splits_for(transaction.id),
            key=lambda split: (-split.amount, split_account_name(split)),
        )
        for split in splits:
            lines.append(
                f"  {split_account_name(split).ljust(width)}{format_ledger_currency(split.amount)}"
            )
        lines.append("")

    logger.info("Exported %s as %d ledger lines.", model, len(lines))
    return lines
