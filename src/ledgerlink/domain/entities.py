"""Domain model entities for ledgerlink.

These are pure, immutable data classes. A changed value is always a new
instance (see ``dataclasses.replace``), never an in-place update.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction


class AccountType(Enum):
    """Kind of ledger account."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    ROOT = "ROOT"
    UNKNOWN = "UNKNOWN"


# Keyed by the lowercased first segment of a colon-delimited account name.
ACCOUNT_TYPES_BY_TOP_LEVEL_NAME = {
    "assets": AccountType.ASSET,
    "liabilities": AccountType.LIABILITY,
    "income": AccountType.INCOME,
    "expenses": AccountType.EXPENSE,
    "equity": AccountType.EQUITY,
}


def guess_account_type(account_name: str) -> AccountType:
    """Guess an account type from the top-level segment of its name.

    Example: "Liabilities:Credit Cards:Chase" -> LIABILITY
    """
    top_level = account_name.split(":", 1)[0].strip().lower()
    return ACCOUNT_TYPES_BY_TOP_LEVEL_NAME.get(top_level, AccountType.UNKNOWN)


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: str
    name: str
    type: AccountType = AccountType.UNKNOWN
    parent_id: str = ""

    @classmethod
    def named(cls, name: str, type: AccountType = AccountType.UNKNOWN) -> "Account":
        """Create a parentless account whose id is its (trimmed) name."""
        name = name.strip()
        return cls(id=name, name=name, type=type)


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity. One economic event."""

    id: str
    post_date_epoch_second: int
    description: str


@dataclass(frozen=True)
class Split:
    """One account's signed rational share of a transaction."""

    account_id: str
    transaction_id: str
    value_numerator: int
    value_denominator: int

    def __post_init__(self):
        if self.value_denominator <= 0:
            raise ValueError(
                f"Split denominator must be positive, got {self.value_denominator}"
            )

    @property
    def amount(self) -> Fraction:
        """Exact amount of this split."""
        return Fraction(self.value_numerator, self.value_denominator)

    @classmethod
    def with_amount(
        cls,
        amount: Decimal | Fraction | int,
        account_id: str,
        transaction_id: str,
    ) -> "Split":
        """Create a split for an amount, reduced to lowest terms.

        Args:
            amount: Exact amount (Decimal, Fraction or int)
            account_id: Account the split belongs to
            transaction_id: Transaction the split belongs to

        Returns:
            Split whose numerator/denominator are gcd-normalized
        """
        value = Fraction(amount)
        return cls(
            account_id=account_id,
            transaction_id=transaction_id,
            value_numerator=value.numerator,
            value_denominator=value.denominator,
        )
