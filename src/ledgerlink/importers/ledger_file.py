"""Ledger CLI format file importer.

Reads the subset of the ledger-cli text format that ledgerlink writes:

    account Assets:Bank:Checking

    2020-10-31 * (1042) Halloween superstore
      Liabilities:Credit Cards:Chase  $-99
      Expenses:Misc

Ledger files are edited by hand, so nothing here raises on malformed input.
Every dropped or suspect construct is logged and parsing carries on.
"""

import hashlib
import logging
import re
from enum import Enum
from typing import Iterable, Optional

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction, guess_account_type
from ledgerlink.domain.model import Model
from ledgerlink.domain.validation import are_balanced, balance_of
from ledgerlink.utils.amount_parser import format_ledger_currency, parse_ledger_amount
from ledgerlink.utils.date_parser import (
    format_ledger_date,
    is_probable_ledger_date,
    parse_ledger_date,
    to_epoch_second,
)

logger = logging.getLogger(__name__)

ACCOUNT_DECLARATION = "account"
CODE_TOKEN = re.compile(r"\(\S*\)")
# DATE [*|!] [(CODE)] DESCRIPTION. Whitespace inside the description is kept.
TRANSACTION_HEADER = re.compile(
    r"(?P<date>\S+)(?:\s+[*!](?=\s|$))?(?:\s+\(\S*\)(?=\s|$))?\s*(?P<description>.*?)\s*"
)
CURRENCY_AT_END_OF_LINE = re.compile(r"\$-?[0-9,]+(?:\.\d+)?\s*$")


class _State(Enum):
    IDLE = "idle"
    IN_TRANSACTION = "in_transaction"


def ledger_transaction_id(post_date_epoch_second: int, description: str, occurrence: int = 0) -> str:
    """Deterministic id for a ledger transaction.

    The same (date, description) pair always hashes to the same id, so
    ``occurrence`` distinguishes repeats of an identical transaction.
    """
    digest = hashlib.sha256(f"{post_date_epoch_second}\x1f{description}".encode("utf-8"))
    base = digest.hexdigest()[:16]
    return base if occurrence == 0 else f"{base}-{occurrence}"


class LedgerFileImporter:
    """Parses ledger-format lines into a Model."""

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self._accounts_by_id: dict[str, Account] = {}
        self._declared_account_ids: set[str] = set()
        self._transactions: list[Transaction] = []
        self._splits: list[Split] = []
        self._occurrences: dict[str, int] = {}
        self._state = _State.IDLE
        self._current: Optional[Transaction] = None
        self._current_splits: list[Split] = []
        self._current_has_implicit_split = False

    def parse(self, lines: Iterable[str]) -> Model:
        """Parse ledger lines.

        Args:
            lines: Lines of a ledger file, without trailing newlines

        Returns:
            Model with every account, transaction and split that could be recovered
        """
        self._reset()
        lines = list(lines)
        # A trailing empty line flushes a transaction left open at end of input.
        for line in [*lines, ""]:
            line = line.rstrip("\r\n")
            if self._state is _State.IN_TRANSACTION:
                self._handle_in_transaction(line)
            else:
                self._handle_idle(line)

        model = Model.create(
            self._accounts_by_id.values(), self._transactions, self._splits
        )
        logger.info(
            "Imported %d accounts, %d transactions, and %d splits from %d lines of a ledger file.",
            len(model.accounts),
            len(model.transactions),
            len(model.splits),
            len(lines),
        )
        return model

    def _handle_idle(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return

        if tokens[0] == ACCOUNT_DECLARATION and len(tokens) > 1:
            self._declare_account(" ".join(tokens[1:]))
        elif is_probable_ledger_date(tokens[0]):
            self._open_transaction(line)
        else:
            logger.warning("Ignoring unrecognized line from ledger file: '%s'", line)

    def _declare_account(self, name: str) -> None:
        account = Account.named(name, type=guess_account_type(name))
        if account.id in self._declared_account_ids:
            logger.warning("Account '%s' is declared more than once.", account.name)
            return
        # A declaration replaces an account auto-created from an earlier split line.
        self._declared_account_ids.add(account.id)
        self._accounts_by_id[account.id] = account
        logger.debug("Adding account from explicit declaration: %s", account.name)

    def _open_transaction(self, line: str) -> None:
        # Neither the clear status nor the code is kept in the model.
        header = TRANSACTION_HEADER.fullmatch(line.strip())
        date_token = header.group("date")
        try:
            post_date = parse_ledger_date(date_token)
        except ValueError:
            logger.warning("Thought this was a date but could not parse it: %s", date_token)
            return

        description = header.group("description")
        if not description:
            logger.warning("Transaction occurring on date %s had no description!", date_token)

        epoch_second = to_epoch_second(post_date)
        base_id = ledger_transaction_id(epoch_second, description)
        occurrence = self._occurrences.get(base_id, 0)
        self._occurrences[base_id] = occurrence + 1

        self._current = Transaction(
            id=ledger_transaction_id(epoch_second, description, occurrence),
            post_date_epoch_second=epoch_second,
            description=description,
        )
        self._current_splits = []
        self._current_has_implicit_split = False
        self._state = _State.IN_TRANSACTION

    def _handle_in_transaction(self, line: str) -> None:
        if not line.strip():
            self._close_transaction()
            return

        match = CURRENCY_AT_END_OF_LINE.search(line)
        if match is not None:
            account_name = line[: match.start()].strip()
            try:
                amount = parse_ledger_amount(match.group())
            except ValueError as e:
                logger.warning("Skipping split line '%s': %s", line, e)
                return
        elif not self._current_splits:
            logger.warning(
                "Expected to but could not find a currency-like amount on line '%s'. Skipping it.",
                line,
            )
            return
        elif self._current_has_implicit_split:
            logger.warning(
                "Transaction '%s' already has a split without an amount. Skipping line '%s'.",
                self._current.description,
                line,
            )
            return
        else:
            account_name = line.strip()
            amount = -balance_of(self._current_splits)
            self._current_has_implicit_split = True

        if not account_name:
            logger.warning("Split line has no account name. Skipping it: '%s'", line)
            return

        account = self._accounts_by_id.get(account_name)
        if account is None:
            account = Account.named(account_name, type=AccountType.UNKNOWN)
            logger.debug("Creating new account: %s", account.name)
            self._accounts_by_id[account.id] = account

        self._current_splits.append(
            Split.with_amount(amount, account_id=account.id, transaction_id=self._current.id)
        )

    def _close_transaction(self) -> None:
        transaction = self._current
        if not self._current_splits:
            logger.warning(
                "The transaction %s %s has no splits.",
                format_ledger_date(transaction.post_date_epoch_second),
                transaction.description,
            )
        elif not are_balanced(self._current_splits):
            logger.warning(
                "The transaction '%s' is not balanced (off by %s). Splits are: %s",
                transaction.description,
                format_ledger_currency(balance_of(self._current_splits)),
                self._current_splits,
            )
        self._transactions.append(transaction)
        self._splits.extend(self._current_splits)
        self._current = None
        self._current_splits = []
        self._current_has_implicit_split = False
        self._state = _State.IDLE


def parse_ledger(lines: Iterable[str]) -> Model:
    """Parse ledger-format lines into a Model."""
    return LedgerFileImporter().parse(lines)
