"""Importer for ledger account listings (the output of ``ledger accounts``)."""

import logging
from typing import Iterable

from ledgerlink.domain.entities import Account, AccountType
from ledgerlink.domain.model import Model
from ledgerlink.importers.ledger_file import ACCOUNT_DECLARATION

logger = logging.getLogger(__name__)

ACCOUNT_PREFIX = ACCOUNT_DECLARATION + " "


def parse_account_listing(lines: Iterable[str]) -> Model:
    """Parse ``account <name>`` lines into a Model holding only accounts.

    Account types are not part of the listing, so every account is UNKNOWN.
    Other lines are logged and skipped.
    """
    accounts_by_id: dict[str, Account] = {}
    for line in lines:
        line = line.rstrip("\r\n")
        if not line.startswith(ACCOUNT_PREFIX) or not line[len(ACCOUNT_PREFIX) :].strip():
            logger.warning("Skipping improperly formatted account listing line: '%s'", line)
            continue
        account = Account.named(line[len(ACCOUNT_PREFIX) :], type=AccountType.UNKNOWN)
        accounts_by_id.setdefault(account.id, account)

    logger.info("Imported %d accounts from account listing.", len(accounts_by_id))
    return Model.create(accounts=accounts_by_id.values())
