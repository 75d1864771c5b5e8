"""CSV exporter: one row per split."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from ledgerlink.domain.entities import Account, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.utils.amount_parser import format_currency
from ledgerlink.utils.date_parser import format_ledger_date

logger = logging.getLogger(__name__)

CSV_HEADER = '"date","account","amount"'


@dataclass(frozen=True)
class ExportItem:
    """A split with its resolved account and transaction."""

    account: Account
    transaction: Transaction
    split: Split


ExportFilter = Callable[[ExportItem], bool]


def _quote(value: str) -> str:
    return '"' + value.replace('"', "") + '"'


def export_csv(model: Model, filters: Iterable[ExportFilter] = ()) -> list[str]:
    """Render the splits of a model as CSV lines sorted by post date.

    Args:
        model: Model to export
        filters: Predicates; an item is left out when any of them returns True

    Returns:
        Header line followed by one line per exported split
    """
    filters = list(filters)
    items = []
    for split in model.splits:
        account = model.account(split.account_id)
        transaction = model.transaction(split.transaction_id)
        if account is None or transaction is None:
            logger.warning("Not exporting split with unresolved references: %s", split)
            continue
        item = ExportItem(account, transaction, split)
        if any(should_exclude(item) for should_exclude in filters):
            continue
        items.append(item)

    items.sort(key=lambda item: item.transaction.post_date_epoch_second)
    lines = [CSV_HEADER]
    for item in items:
        lines.append(
            ",".join(
                [
                    _quote(format_ledger_date(item.transaction.post_date_epoch_second)),
                    _quote(model.full_account_name(item.account.id)),
                    _quote(format_currency(item.split.amount)),
                ]
            )
        )
    logger.info("Exported %d splits as CSV.", len(items))
    return lines
