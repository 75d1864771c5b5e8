"""GnuCash database access for ledgerlink."""

from ledgerlink.database.factories import create_sqlite_session_factory
from ledgerlink.database.gnucash import GnuCashSqliteConnector

__all__ = ["GnuCashSqliteConnector", "create_sqlite_session_factory"]
