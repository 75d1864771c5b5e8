"""Importer for ``description<TAB>account`` mapping files.

Each line becomes a zero-valued transaction whose only split points at the
account. The result is not a ledger; it seeds the matcher with known payees.
"""

import logging
import time
from typing import Iterable

from ledgerlink.domain.entities import Account, Split, Transaction
from ledgerlink.domain.model import Model

logger = logging.getLogger(__name__)

MAPPING_TRANSACTION_ID_PREFIX = "mapping-"


def parse_tsv_mapping(lines: Iterable[str]) -> Model:
    """Parse TSV mapping lines.

    Lines that do not hold exactly two tab-separated values are logged and
    skipped.

    Returns:
        Model with one account per distinct account name and one transaction
        and zero-valued split per line
    """
    accounts_by_id: dict[str, Account] = {}
    transactions = []
    splits = []
    imported_at = int(time.time())

    for line in lines:
        line = line.rstrip("\r\n")
        pieces = line.split("\t")
        if len(pieces) != 2:
            logger.warning(
                "Mappings file has a bad line. Skipping it. Expected a 2-value TSV line but saw: '%s'",
                line,
            )
            continue
        description, account_name = pieces
        account = Account.named(account_name)
        if not account.id:
            logger.warning("Mapping line has no account name. Skipping it: '%s'", line)
            continue
        accounts_by_id.setdefault(account.id, account)

        transaction = Transaction(
            id=f"{MAPPING_TRANSACTION_ID_PREFIX}{len(transactions)}",
            post_date_epoch_second=imported_at,
            description=description,
        )
        transactions.append(transaction)
        splits.append(
            Split(
                account_id=account.id,
                transaction_id=transaction.id,
                value_numerator=0,
                value_denominator=1,
            )
        )

    logger.info(
        "Imported %d description mappings to %d accounts.", len(transactions), len(accounts_by_id)
    )
    return Model.create(accounts_by_id.values(), transactions, splits)
