"""SQLAlchemy models for the tables of a GnuCash SQLite book.

Only the columns ledgerlink reads are mapped.
"""

from sqlalchemy import BigInteger, Column, String, Text, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class Account(Base):
    """GnuCash account row."""

    __tablename__ = "accounts"

    guid = Column(String(32), primary_key=True)
    name = Column(Text, nullable=False)
    account_type = Column(Text, nullable=False)
    parent_guid = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)


class Transaction(Base):
    """GnuCash transaction row. Post dates are stored as text."""

    __tablename__ = "transactions"

    guid = Column(String(32), primary_key=True)
    currency_guid = Column(String(32), nullable=True)
    post_date = Column(Text, nullable=True)
    description = Column(Text, nullable=True)


class Split(Base):
    """GnuCash split row."""

    __tablename__ = "splits"

    guid = Column(String(32), primary_key=True)
    tx_guid = Column(String(32), nullable=False)
    account_guid = Column(String(32), nullable=False)
    value_num = Column(BigInteger, nullable=False)
    value_denom = Column(BigInteger, nullable=False)


def create_session_factory(database_url: str, create_schema: bool = False) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        create_schema: Create missing tables (used to build books in tests)
    """
    engine = create_engine(database_url, echo=False)
    if create_schema:
        Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
