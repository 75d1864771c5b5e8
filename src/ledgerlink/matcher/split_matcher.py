"""Fuzzy matching of new transactions to the accounts of historical splits."""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional

from ledgerlink.domain.entities import Account, Split, Transaction
from ledgerlink.domain.errors import InvariantViolation, unknown_split_account
from ledgerlink.domain.model import Model

logger = logging.getLogger(__name__)

DOT_COM = re.compile(r"\.com", re.IGNORECASE)
NON_ALPHANUMERIC_RUN = re.compile(r"[^0-9A-Za-z]+")
REPEATED_DIGITS = re.compile(r"[0-9]{4,25}")

# Post dates of probable duplicates differ by strictly less than this.
DUPLICATE_WINDOW_SECONDS = 7 * 24 * 60 * 60

AccountExclusion = Callable[[Account], bool]


def sanitize(description: str) -> str:
    """Remove junk from a transaction description.

    Drops ".com", collapses punctuation to spaces and blanks out long digit
    runs such as order or reference numbers.

    Example: "AMAZON.COM*MK1234567 AMZN" -> "AMAZON MK AMZN"
    """
    sanitized = DOT_COM.sub("", description)
    sanitized = NON_ALPHANUMERIC_RUN.sub(" ", sanitized)
    sanitized = REPEATED_DIGITS.sub(" ", sanitized)
    return " ".join(sanitized.split())


def tokenize(sanitized_description: str) -> list[str]:
    return sanitized_description.split()


class MatchResult(Enum):
    PARTIAL_CONFIDENCE = "PARTIAL_CONFIDENCE"
    PROBABLE_DUPLICATE = "PROBABLE_DUPLICATE"


@dataclass(frozen=True)
class MatchedSplit:
    """A historical split together with the entities it refers to."""

    account: Account
    transaction: Transaction
    split: Split


@dataclass(frozen=True)
class Match:
    """One candidate answer for a transaction being reconciled.

    ``account`` is the suggested counter-account of a partial match and is
    None for a probable duplicate. ``matches`` holds the historical splits
    behind the suggestion. Confidence is comparable between the matches of
    one lookup only.
    """

    result: MatchResult
    confidence: float
    account: Optional[Account] = None
    matches: tuple[MatchedSplit, ...] = ()


class SplitMatcher:
    """Inverted index from sanitized description tokens to historical splits.

    The index only grows. ``link`` must not run concurrently with
    ``get_top_matches``.
    """

    def __init__(
        self,
        accounts_by_id: Mapping[str, Account],
        transactions_by_id: Mapping[str, Transaction],
    ):
        self._accounts_by_id = dict(accounts_by_id)
        self._known_transactions_by_id = dict(transactions_by_id)
        self._discovered_transactions_by_id: dict[str, Transaction] = {}
        self._index: dict[str, set[Split]] = {}
        self._indexed_splits: set[Split] = set()

    @classmethod
    def create(cls, model: Model) -> "SplitMatcher":
        """Build a matcher that has linked every split of a model.

        Raises:
            InvariantViolation: If a split refers to an account missing from the model
        """
        matcher = cls(model.accounts_by_id, model.transactions_by_id)
        for transaction in model.transactions:
            for split in model.splits_for(transaction.id):
                matcher.link(transaction, split)
        logger.info(
            "Indexed %d splits of %d transactions for matching.",
            len(matcher._indexed_splits),
            len(model.transactions),
        )
        return matcher

    @property
    def indexed_split_count(self) -> int:
        return len(self._indexed_splits)

    def account(self, account_id: str) -> Optional[Account]:
        return self._accounts_by_id.get(account_id)

    def link(self, transaction: Transaction, split: Split) -> None:
        """Index a split under the description of its transaction.

        Linking the same pair twice has no further effect. Transactions that
        were not known when the matcher was built are remembered so that
        their splits can be reported later.

        Raises:
            InvariantViolation: If the split's account is unknown to the matcher
        """
        if split.account_id not in self._accounts_by_id:
            raise InvariantViolation(
                unknown_split_account(split.account_id, split.transaction_id)
            )
        if transaction.id not in self._known_transactions_by_id:
            self._discovered_transactions_by_id[transaction.id] = transaction

        sanitized = sanitize(transaction.description)
        self._index.setdefault(sanitized, set()).add(split)
        for token in tokenize(sanitized):
            self._index.setdefault(token, set()).add(split)
        self._indexed_splits.add(split)

    def get_top_matches(
        self,
        transaction: Transaction,
        splits_for_transaction: Iterable[Split],
        exclude: Optional[AccountExclusion] = None,
        limit: Optional[int] = None,
    ) -> list[Match]:
        """Suggest counter-accounts for a transaction.

        Args:
            transaction: Transaction being reconciled
            splits_for_transaction: Splits already attached to it
            exclude: Predicate for accounts that must not be suggested
            limit: Maximum number of partial matches to return

        Returns:
            Matches from most to least confident. A PROBABLE_DUPLICATE match,
            if any, comes first and aggregates every historical split that
            looks like a re-import of one of the given splits.
        """
        matches = []
        duplicate = self._find_probable_duplicate(transaction, list(splits_for_transaction))
        if duplicate is not None:
            matches.append(duplicate)
        matches.extend(self._find_partial_matches(transaction, exclude, limit))
        return matches

    def _find_probable_duplicate(
        self, transaction: Transaction, splits: list[Split]
    ) -> Optional[Match]:
        duplicates = []
        for indexed_split in sorted(self._indexed_splits, key=_split_sort_key):
            historical = self._transaction(indexed_split.transaction_id)
            if historical is None:
                continue
            seconds_apart = abs(
                historical.post_date_epoch_second - transaction.post_date_epoch_second
            )
            if seconds_apart >= DUPLICATE_WINDOW_SECONDS:
                continue
            for split in splits:
                if (
                    split.account_id == indexed_split.account_id
                    and split.amount == indexed_split.amount
                ):
                    duplicates.append(
                        MatchedSplit(
                            account=self._accounts_by_id[indexed_split.account_id],
                            transaction=historical,
                            split=indexed_split,
                        )
                    )
                    break

        if not duplicates:
            return None
        logger.debug(
            "Transaction '%s' looks like a duplicate of %d indexed split(s).",
            transaction.description,
            len(duplicates),
        )
        return Match(
            result=MatchResult.PROBABLE_DUPLICATE,
            confidence=1.0,
            matches=tuple(duplicates),
        )

    def _find_partial_matches(
        self,
        transaction: Transaction,
        exclude: Optional[AccountExclusion],
        limit: Optional[int],
    ) -> list[Match]:
        hits: Counter[str] = Counter()
        splits_by_account_id: dict[str, list[Split]] = {}
        for token in tokenize(sanitize(transaction.description)):
            for split in self._index.get(token, ()):
                hits[split.account_id] += 1
                splits_by_account_id.setdefault(split.account_id, []).append(split)

        total = len(self._indexed_splits)
        matches = []
        for account_id, count in hits.items():
            account = self._accounts_by_id[account_id]
            if exclude is not None and exclude(account):
                continue
            matched_splits = []
            for split in sorted(set(splits_by_account_id[account_id]), key=_split_sort_key):
                historical = self._transaction(split.transaction_id)
                if historical is not None:
                    matched_splits.append(MatchedSplit(account, historical, split))
            matches.append(
                Match(
                    result=MatchResult.PARTIAL_CONFIDENCE,
                    confidence=count / total,
                    account=account,
                    matches=tuple(matched_splits),
                )
            )

        matches.sort(key=lambda match: (-match.confidence, match.account.id))
        if limit is not None:
            matches = matches[: max(limit, 0)]
        return matches

    def _transaction(self, transaction_id: str) -> Optional[Transaction]:
        transaction = self._known_transactions_by_id.get(transaction_id)
        if transaction is None:
            transaction = self._discovered_transactions_by_id.get(transaction_id)
        return transaction


def _split_sort_key(split: Split) -> tuple:
    return (split.transaction_id, split.account_id, split.amount)
