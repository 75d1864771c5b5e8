"""Database factory functions."""

from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from ledgerlink.database.models import create_session_factory


def create_sqlite_session_factory(
    database_path: str | Path, create_schema: bool = False
) -> sessionmaker[Session]:
    """Create a session factory for a GnuCash SQLite file.

    Args:
        database_path: Path to the SQLite file
        create_schema: Create the GnuCash tables if they are missing

    Returns:
        Session factory bound to the file
    """
    return create_session_factory(f"sqlite:///{database_path}", create_schema=create_schema)
