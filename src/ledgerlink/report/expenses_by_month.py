"""Tab-separated report of per-account totals for each calendar month."""

from datetime import date
from fractions import Fraction

from ledgerlink.domain.model import Model
from ledgerlink.utils.amount_parser import format_currency
from ledgerlink.utils.date_parser import from_epoch_second


def _months_between(first: date, last: date) -> list[tuple[int, int]]:
    months = []
    year, month = first.year, first.month
    while (year, month) <= (last.year, last.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def expenses_by_month(model: Model) -> str:
    """Build the monthly report.

    The first column is the month (YYYY-MM), followed by one column per
    account that has splits, ordered by full account name. Rows run from the
    newest month to the oldest, including months without transactions in
    between.

    Returns:
        Report text, or just the header when the model has no usable splits
    """
    totals: dict[tuple[int, int], dict[str, Fraction]] = {}
    account_ids = set()
    for split in model.splits:
        transaction = model.transaction(split.transaction_id)
        if transaction is None or model.account(split.account_id) is None:
            continue
        day = from_epoch_second(transaction.post_date_epoch_second)
        month_totals = totals.setdefault((day.year, day.month), {})
        month_totals[split.account_id] = month_totals.get(split.account_id, Fraction(0)) + split.amount
        account_ids.add(split.account_id)

    columns = sorted(account_ids, key=lambda account_id: (model.full_account_name(account_id), account_id))
    lines = ["\t".join(["Month", *(model.full_account_name(account_id) for account_id in columns)])]
    if not totals:
        return lines[0]

    first, last = min(totals), max(totals)
    for year, month in reversed(_months_between(date(*first, 1), date(*last, 1))):
        month_totals = totals.get((year, month), {})
        lines.append(
            "\t".join(
                [
                    f"{year:04d}-{month:02d}",
                    *(format_currency(month_totals.get(account_id, 0)) for account_id in columns),
                ]
            )
        )
    return "\n".join(lines)
