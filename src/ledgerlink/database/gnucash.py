"""Read a GnuCash SQLite book into a Model."""

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from ledgerlink.database.factories import create_sqlite_session_factory
from ledgerlink.database.mappers import account_to_domain, split_to_domain, transaction_to_domain
from ledgerlink.database.models import (
    Account as ORMAccount,
    Split as ORMSplit,
    Transaction as ORMTransaction,
)
from ledgerlink.domain.model import Model
from ledgerlink.domain.validation import bad_references

logger = logging.getLogger(__name__)


class GnuCashSqliteConnector:
    """Extracts accounts, transactions and splits from a GnuCash SQLite file."""

    def __init__(self, database_path: str | Path):
        self.database_path = Path(database_path)

    def extract(self) -> Model:
        """Read the whole book.

        Rows that cannot be converted and splits with dangling references are
        logged and skipped. A database error is logged and yields the empty
        Model.
        """
        session_factory = create_sqlite_session_factory(self.database_path)
        try:
            with session_factory() as session:
                accounts = [account_to_domain(row) for row in session.query(ORMAccount)]
                transactions = []
                for row in session.query(ORMTransaction):
                    try:
                        transactions.append(transaction_to_domain(row))
                    except ValueError as e:
                        logger.warning("Skipping GnuCash transaction %s: %s", row.guid, e)
                splits = []
                for row in session.query(ORMSplit):
                    try:
                        splits.append(split_to_domain(row))
                    except ValueError as e:
                        logger.warning("Skipping GnuCash split %s: %s", row.guid, e)
        except SQLAlchemyError as e:
            logger.error("Could not read GnuCash database %s: %s", self.database_path, e)
            return Model.empty()

        model = Model.create(accounts, transactions)
        valid_splits = []
        for split in splits:
            bad = bad_references(split, model.accounts_by_id, model.transactions_by_id)
            if bad:
                logger.warning(
                    "Dropping GnuCash split with bad %s reference(s): %s", " and ".join(bad), split
                )
                continue
            valid_splits.append(split)

        model = Model.create(accounts, transactions, valid_splits)
        logger.info("Extracted %s from %s.", model, self.database_path)
        return model
