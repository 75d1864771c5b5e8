"""Tests for the ledger and CSV exporters."""

from datetime import date

import pytest

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.export.csv_exporter import export_csv
from ledgerlink.export.ledger_exporter import export_ledger
from ledgerlink.importers.ledger_file import ledger_transaction_id, parse_ledger
from ledgerlink.utils.date_parser import to_epoch_second


class TestLedgerExporter:
    """Tests for export_ledger."""

    def test_export_layout(self):
        model = Model.create(
            [
                Account.named("Liabilities:Credit Cards:Chase"),
                Account.named("Expenses:Misc"),
            ],
            [Transaction("t", to_epoch_second(date(2020, 10, 31)), "Halloween superstore")],
            [
                Split.with_amount(-99, "Liabilities:Credit Cards:Chase", "t"),
                Split.with_amount(99, "Expenses:Misc", "t"),
            ],
        )

        assert export_ledger(model) == [
            "account Expenses:Misc",
            "account Liabilities:Credit Cards:Chase",
            "",
            "2020-10-31 * Halloween superstore",
            "  Expenses:Misc                   $99.00",
            "  Liabilities:Credit Cards:Chase  $-99.00",
            "",
        ]

    def test_full_names_and_imbalance(self):
        model = Model.create(
            [
                Account("root", "Root Account", AccountType.ROOT),
                Account("e", "Expenses", AccountType.EXPENSE, parent_id="root"),
                Account("f", "Food", AccountType.EXPENSE, parent_id="e"),
            ],
            [Transaction("t", 0, "Lunch")],
            [Split.with_amount(5, "f", "t"), Split.with_amount(-5, "gone", "t")],
        )

        lines = export_ledger(model)

        assert "account Expenses:Food" in lines
        assert "account Root Account" not in lines
        assert "  Expenses:Food  $5.00" in lines
        assert "  Imbalance      $-5.00" in lines

    def test_transactions_sorted_by_date_then_description(self):
        model = Model.create(
            transactions=[
                Transaction("b", 100, "B"),
                Transaction("a", 100, "A"),
                Transaction("c", 0, "C"),
            ]
        )
        headers = [line for line in export_ledger(model) if line]
        assert headers == ["1970-01-01 * C", "1970-01-01 * A", "1970-01-01 * B"]

    def test_round_trip_is_stable(self, fixtures_dir):
        parsed = parse_ledger((fixtures_dir / "sample.ledger").read_text().splitlines())
        exported = export_ledger(parsed)

        reparsed = parse_ledger(exported)

        assert export_ledger(reparsed) == exported
        assert reparsed.transactions == parsed.transactions
        assert set(reparsed.splits) == set(parsed.splits)
        assert reparsed.accounts_by_id == parsed.accounts_by_id

    @pytest.mark.parametrize(
        "description",
        ["(ATM) Withdrawal", "(1042)", "* Star Market", "! Pending refund", "Two  spaces"],
    )
    def test_description_survives_round_trip(self, description):
        model = Model.create(
            [Account.named("Assets:Cash"), Account.named("Expenses:Misc")],
            [Transaction("t", to_epoch_second(date(2020, 10, 31)), description)],
            [
                Split.with_amount(-20, "Assets:Cash", "t"),
                Split.with_amount(20, "Expenses:Misc", "t"),
            ],
        )

        reparsed = parse_ledger(export_ledger(model))

        (transaction,) = reparsed.transactions
        assert transaction.description == description
        assert transaction.id == ledger_transaction_id(transaction.post_date_epoch_second, description)
        assert export_ledger(reparsed) == export_ledger(model)

    def test_code_like_description_gets_empty_code(self):
        model = Model.create(
            [Account.named("Assets:Cash")],
            [Transaction("t", to_epoch_second(date(2020, 10, 31)), "(ATM) Withdrawal")],
            [Split.with_amount(0, "Assets:Cash", "t")],
        )

        assert "2020-10-31 * () (ATM) Withdrawal" in export_ledger(model)


class TestCsvExporter:
    """Tests for export_csv."""

    def test_rows_sorted_by_date(self, historical_model):
        lines = export_csv(historical_model)

        assert lines[0] == '"date","account","amount"'
        assert len(lines) == 7
        assert lines[1:3] == [
            '"2020-10-01","Expenses:Groceries","$54.00"',
            '"2020-10-01","Assets:Bank:Checking","-$54.00"',
        ]
        assert lines[-1] == '"2020-11-02","Assets:Bank:Checking","-$80.00"'

    def test_filters_exclude_items(self, historical_model):
        lines = export_csv(
            historical_model,
            filters=[lambda item: item.account.type is not AccountType.EXPENSE],
        )
        assert len(lines) == 4
        assert all("Checking" not in line for line in lines)

    def test_quotes_are_stripped(self):
        model = Model.create(
            [Account.named('The "Best" Account')],
            [Transaction("t", 0, "x")],
            [Split.with_amount(1, 'The "Best" Account', "t")],
        )
        assert export_csv(model)[1] == '"1970-01-01","The Best Account","$1.00"'

    def test_unresolved_splits_are_not_exported(self):
        model = Model.create(splits=[Split.with_amount(1, "a", "t")])
        assert export_csv(model) == ['"date","account","amount"']
