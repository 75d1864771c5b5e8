"""CSV transaction listing importer.

Turns the rows of a single-account bank export into one single-sided
transaction each. The counter-account of every transaction is left for the
matcher to find.
"""

import hashlib
import logging
import time
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional, Protocol

from ledgerlink.domain.entities import Account, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.utils.amount_parser import MINOR_UNITS_PER_WHOLE, parse_currency_minor_units
from ledgerlink.utils.date_parser import parse_date, to_epoch_second

logger = logging.getLogger(__name__)

PLACEHOLDER_ACCOUNT_IDENTIFIER = "Imported"


class DataField(Enum):
    """Role of a CSV column."""

    DATE = "date"
    DESCRIPTION = "desc"
    AMOUNT = "amt"
    NEGATED_AMOUNT = "negamt"
    CREDIT = "credit"
    DEBIT = "debit"
    ACCOUNT_IDENTIFIER = "acct"


ACCEPTED_FIELD_COMBINATIONS = (
    frozenset({DataField.DATE, DataField.DESCRIPTION, DataField.AMOUNT}),
    frozenset({DataField.DATE, DataField.DESCRIPTION, DataField.NEGATED_AMOUNT}),
    frozenset({DataField.DATE, DataField.DESCRIPTION, DataField.CREDIT, DataField.DEBIT}),
)

AccountGenerator = Callable[[str], Account]


class ModelImporter(Protocol):
    """Anything that turns input lines into a Model."""

    def parse(self, lines: Iterable[str]) -> Model: ...


def is_accepted_field_combination(fields: Iterable[DataField]) -> bool:
    """Return True if the mapped fields form one of the accepted combinations.

    ACCOUNT_IDENTIFIER is optional and ignored for this check.
    """
    required = frozenset(fields) - {DataField.ACCOUNT_IDENTIFIER}
    return required in ACCEPTED_FIELD_COMBINATIONS


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas.

    A field starting with a double quote extends to the next double quote, so
    it may contain commas. Doubled quotes are not treated as escapes. Adjacent
    commas produce empty fields.

    Examples:
    - 'a,,b' -> ['a', '', 'b']
    - '"Smith, J",5' -> ['Smith, J', '5']
    - 'a,b,' -> ['a', 'b', '']
    """
    fields = []
    start = 0
    while True:
        if line.startswith('"', start):
            close = line.find('"', start + 1)
            if close != -1:
                fields.append(line[start + 1 : close])
                comma = line.find(",", close + 1)
                if comma == -1:
                    return fields
                start = comma + 1
                continue
        comma = line.find(",", start)
        if comma == -1:
            fields.append(line[start:])
            return fields
        fields.append(line[start:comma])
        start = comma + 1


def csv_transaction_id(row_index: int, description: str) -> str:
    """Opaque transaction id; not stable across imports of the same file."""
    seed = f"{time.time_ns()}:{row_index}:{description}".encode("utf-8")
    return hashlib.blake2b(seed, digest_size=8).hexdigest()


class CsvTransactionListingImporter:
    """Importer for CSV files listing the transactions of one account."""

    def __init__(
        self,
        field_positions: Mapping[DataField, int],
        date_format: Optional[str],
        account_generator: AccountGenerator,
    ):
        """Initialize CSV importer.

        Args:
            field_positions: Zero-based column index for each mapped field
            date_format: strptime format of the DATE column, or None to infer it
            account_generator: Builds the source account from the
                ACCOUNT_IDENTIFIER value (or a placeholder when unmapped)
        """
        self.field_positions = dict(field_positions)
        self.date_format = date_format
        self.account_generator = account_generator

    def parse(self, lines: Iterable[str]) -> Model:
        """Parse CSV lines into a Model.

        The first line is the header and is skipped, as are empty lines. Rows
        that cannot be read are logged and skipped.

        Returns:
            Model with one transaction and one split per accepted row
        """
        accounts_by_id: dict[str, Account] = {}
        transactions = []
        splits = []

        for row_index, line in enumerate(lines):
            if row_index == 0 or not line.strip():
                continue
            row_num = row_index + 1
            values = split_csv_line(line.rstrip("\r\n"))

            date_str = self._value(values, DataField.DATE)
            description = self._value(values, DataField.DESCRIPTION)
            if not date_str:
                logger.warning("Row %d: Missing date. Skipping it: '%s'", row_num, line)
                continue
            if not description:
                logger.warning("Row %d: Missing description. Skipping it: '%s'", row_num, line)
                continue

            try:
                post_date = parse_date(date_str, self.date_format)
            except ValueError as e:
                logger.warning("Row %d: %s. Skipping it.", row_num, e)
                continue

            try:
                minor_units = self._minor_units(values)
            except ValueError as e:
                logger.warning("Row %d: %s. Skipping it.", row_num, e)
                continue

            identifier = (
                self._value(values, DataField.ACCOUNT_IDENTIFIER)
                or PLACEHOLDER_ACCOUNT_IDENTIFIER
            )
            account = self.account_generator(identifier)
            accounts_by_id.setdefault(account.id, account)

            transaction = Transaction(
                id=csv_transaction_id(row_index, description),
                post_date_epoch_second=to_epoch_second(post_date),
                description=description,
            )
            transactions.append(transaction)
            splits.append(
                Split(
                    account_id=account.id,
                    transaction_id=transaction.id,
                    value_numerator=minor_units,
                    value_denominator=MINOR_UNITS_PER_WHOLE,
                )
            )

        logger.info(
            "Imported %d transactions from CSV for %d account(s).",
            len(transactions),
            len(accounts_by_id),
        )
        return Model.create(accounts_by_id.values(), transactions, splits)

    def _value(self, values: list[str], field: DataField) -> str:
        """Return the trimmed value of a mapped field, or "" if unmapped or absent."""
        position = self.field_positions.get(field)
        if position is None or position < 0 or position >= len(values):
            return ""
        return values[position].strip()

    def _minor_units(self, values: list[str]) -> int:
        """Derive the signed amount of a row in minor units.

        Precedence: AMOUNT, then negated NEGATED_AMOUNT, then CREDIT, then
        negated DEBIT.

        Raises:
            ValueError: If no amount field has a usable value
        """
        amount = self._value(values, DataField.AMOUNT)
        if amount:
            return parse_currency_minor_units(amount)
        negated_amount = self._value(values, DataField.NEGATED_AMOUNT)
        if negated_amount:
            return -parse_currency_minor_units(negated_amount)
        credit = self._value(values, DataField.CREDIT)
        if credit:
            return parse_currency_minor_units(credit)
        debit = self._value(values, DataField.DEBIT)
        if debit:
            return -parse_currency_minor_units(debit)
        raise ValueError("Missing amount")


class NoOpImporter:
    """Importer that always produces the empty Model."""

    def parse(self, lines: Iterable[str]) -> Model:
        return Model.empty()


def create_csv_importer(
    field_positions: Mapping[DataField, int],
    date_format: Optional[str],
    account_generator: Optional[AccountGenerator],
) -> ModelImporter:
    """Create a CSV importer, or a no-op importer if the configuration is unusable.

    Args:
        field_positions: Zero-based column index for each mapped field
        date_format: strptime format of the DATE column, or None to infer it
        account_generator: Builds the source account for each row

    Returns:
        CsvTransactionListingImporter, or NoOpImporter when the mapped fields are
        not an accepted combination or no account generator is given
    """
    if not is_accepted_field_combination(field_positions.keys()):
        logger.error(
            "The CSV field mappings are not sufficient. Returning a no-op importer. "
            "Found: [%s]. Wanted one of: [%s].",
            ", ".join(sorted(field.name for field in field_positions)),
            "; ".join(
                ", ".join(sorted(field.name for field in combination))
                for combination in ACCEPTED_FIELD_COMBINATIONS
            ),
        )
        return NoOpImporter()
    if account_generator is None:
        logger.error("No CSV account declared. Returning a no-op importer.")
        return NoOpImporter()
    return CsvTransactionListingImporter(field_positions, date_format, account_generator)
