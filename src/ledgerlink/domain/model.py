"""Immutable ledger model snapshot."""

from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction

ACCOUNT_NAME_DELIMITER = ":"


@dataclass(frozen=True)
class Model:
    """A set of accounts, transactions and splits.

    The model keeps its entities in the order they were supplied. Indexed
    views are built lazily and are read-only; when two entities share an id,
    the later one is the one the index returns.
    """

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    splits: tuple[Split, ...] = ()

    @classmethod
    def create(
        cls,
        accounts: Iterable[Account] = (),
        transactions: Iterable[Transaction] = (),
        splits: Iterable[Split] = (),
    ) -> "Model":
        """Create a model from any iterables of entities."""
        return cls(tuple(accounts), tuple(transactions), tuple(splits))

    @classmethod
    def empty(cls) -> "Model":
        """Return a model with no entities."""
        return cls()

    def is_empty(self) -> bool:
        return not (self.accounts or self.transactions or self.splits)

    @cached_property
    def accounts_by_id(self) -> Mapping[str, Account]:
        return MappingProxyType({account.id: account for account in self.accounts})

    @cached_property
    def transactions_by_id(self) -> Mapping[str, Transaction]:
        return MappingProxyType(
            {transaction.id: transaction for transaction in self.transactions}
        )

    @cached_property
    def splits_by_transaction_id(self) -> Mapping[str, tuple[Split, ...]]:
        grouped: dict[str, list[Split]] = {}
        for split in self.splits:
            grouped.setdefault(split.transaction_id, []).append(split)
        return MappingProxyType({key: tuple(value) for key, value in grouped.items()})

    def splits_for(self, transaction_id: str) -> tuple[Split, ...]:
        """Return the splits of a transaction (empty if it has none)."""
        return self.splits_by_transaction_id.get(transaction_id, ())

    def account(self, account_id: str) -> Optional[Account]:
        return self.accounts_by_id.get(account_id)

    def transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions_by_id.get(transaction_id)

    def full_account_name(self, account_id: str) -> str:
        """Get the colon-joined path from a root ancestor to an account.

        Accounts are not guaranteed to be acyclic, so the walk stops at the
        first repeated account and never takes more steps than there are
        accounts. ROOT accounts and unnamed ancestors end the path.

        Args:
            account_id: Account ID

        Returns:
            Full account name (e.g., "Assets:Bank:Checking"), or "" if the
            account is unknown
        """
        account = self.accounts_by_id.get(account_id)
        if account is None:
            return ""

        names = [account.name]
        visited = {account.id}
        parent_id = account.parent_id
        for _ in range(len(self.accounts_by_id)):
            if not parent_id or parent_id in visited:
                break
            parent = self.accounts_by_id.get(parent_id)
            if parent is None or parent.type is AccountType.ROOT or not parent.name:
                break
            names.append(parent.name)
            visited.add(parent.id)
            parent_id = parent.parent_id

        return ACCOUNT_NAME_DELIMITER.join(reversed(names))

    def __str__(self) -> str:
        return (
            f"Model with {len(self.accounts)} accounts, "
            f"{len(self.transactions)} transactions, {len(self.splits)} splits"
        )
