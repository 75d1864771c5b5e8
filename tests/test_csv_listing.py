"""Tests for the CSV transaction listing importer."""

import logging
from fractions import Fraction

import pytest

from ledgerlink.domain.entities import Account
from ledgerlink.importers.csv_listing import (
    PLACEHOLDER_ACCOUNT_IDENTIFIER,
    CsvTransactionListingImporter,
    DataField,
    NoOpImporter,
    create_csv_importer,
    is_accepted_field_combination,
    split_csv_line,
)
from ledgerlink.utils.date_parser import format_ledger_date

DATE_DESC_AMT = {DataField.DATE: 0, DataField.DESCRIPTION: 1, DataField.AMOUNT: 2}


def checking_account(identifier):
    return Account.named("Assets:Bank:Checking")


def parse(lines, field_positions=DATE_DESC_AMT, date_format="%m/%d/%Y", generator=checking_account):
    return CsvTransactionListingImporter(field_positions, date_format, generator).parse(lines)


@pytest.mark.parametrize(
    "line,expected",
    [
        ("a,,b", ["a", "", "b"]),
        ('"Smith, J",5', ["Smith, J", "5"]),
        ("a,b,", ["a", "b", ""]),
        ('1,"x",2', ["1", "x", "2"]),
        ("single", ["single"]),
    ],
)
def test_split_csv_line(line, expected):
    assert split_csv_line(line) == expected


def test_parse_rows():
    model = parse(
        [
            "Date,Description,Amount",
            "10/31/2020,Halloween superstore,$56.91",
            "11/01/2020,Refund,-1,234",
        ]
    )

    assert len(model.transactions) == 2
    assert [account.id for account in model.accounts] == ["Assets:Bank:Checking"]
    first, second = model.transactions
    assert format_ledger_date(first.post_date_epoch_second) == "2020-10-31"
    assert first.description == "Halloween superstore"
    (split,) = model.splits_for(first.id)
    assert split.account_id == "Assets:Bank:Checking"
    assert split.value_denominator == 100
    assert split.amount == Fraction("56.91")
    # Unquoted thousands separator: only "-1" lands in the amount column.
    assert model.splits_for(second.id)[0].amount == Fraction(-1)


def test_quoted_amount_with_thousands_separator():
    model = parse(["header", '11/01/2020,Refund,"-1,234"'])
    assert model.splits[0].value_numerator == -123400
    assert model.splits[0].amount == Fraction(-1234)


def test_header_and_blank_lines_are_skipped():
    model = parse(["10/31/2020,Looks like data,1.00", "", "11/01/2020,Real,2.00", "   "])
    assert [transaction.description for transaction in model.transactions] == ["Real"]


def test_negated_amount():
    fields = {DataField.DATE: 0, DataField.DESCRIPTION: 1, DataField.NEGATED_AMOUNT: 2}
    model = parse(["h", "10/31/2020,Purchase,12.00"], field_positions=fields)
    assert model.splits[0].amount == Fraction(-12)


def test_credit_and_debit_columns():
    fields = {
        DataField.DATE: 0,
        DataField.DESCRIPTION: 1,
        DataField.CREDIT: 2,
        DataField.DEBIT: 3,
    }
    model = parse(
        ["h", "10/31/2020,Paycheck,1000.00,", "11/01/2020,Rent,,750.00"], field_positions=fields
    )
    assert [split.amount for split in model.splits] == [Fraction(1000), Fraction(-750)]


@pytest.mark.parametrize(
    "row,message",
    [
        (",No date,1.00", "Missing date"),
        ("10/31/2020,,1.00", "Missing description"),
        ("10/31/2020,No amount,", "Missing amount"),
        ("2020-10-31,Wrong date format,1.00", "Could not parse date"),
        ("10/31/2020,Bad amount,1-2", "not leading"),
    ],
)
def test_bad_rows_are_skipped(caplog, row, message):
    with caplog.at_level(logging.WARNING):
        model = parse(["h", row, "10/31/2020,Good,1.00"])
    assert [transaction.description for transaction in model.transactions] == ["Good"]
    assert message in caplog.text


def test_inferred_date_format():
    model = parse(["h", "Oct 31 2020,Inferred,1.00"], date_format=None)
    assert format_ledger_date(model.transactions[0].post_date_epoch_second) == "2020-10-31"


def test_account_identifier_column():
    fields = {**DATE_DESC_AMT, DataField.ACCOUNT_IDENTIFIER: 3}
    model = parse(
        ["h", "10/31/2020,A,1.00,Assets:Savings", "10/31/2020,B,2.00,"],
        field_positions=fields,
        generator=Account.named,
    )
    assert {account.id for account in model.accounts} == {
        "Assets:Savings",
        PLACEHOLDER_ACCOUNT_IDENTIFIER,
    }


def test_placeholder_identifier_when_unmapped():
    seen = []

    def generator(identifier):
        seen.append(identifier)
        return Account.named("Assets:Cash")

    parse(["h", "10/31/2020,A,1.00"], generator=generator)
    assert seen == [PLACEHOLDER_ACCOUNT_IDENTIFIER]


def test_transaction_ids_are_distinct():
    model = parse(["h", "10/31/2020,Same,1.00", "10/31/2020,Same,1.00"])
    assert len({transaction.id for transaction in model.transactions}) == 2


class TestCreateCsvImporter:
    """Tests for the importer factory."""

    @pytest.mark.parametrize(
        "fields,accepted",
        [
            ({DataField.DATE, DataField.DESCRIPTION, DataField.AMOUNT}, True),
            ({DataField.DATE, DataField.DESCRIPTION, DataField.NEGATED_AMOUNT}, True),
            ({DataField.DATE, DataField.DESCRIPTION, DataField.CREDIT, DataField.DEBIT}, True),
            (
                {
                    DataField.DATE,
                    DataField.DESCRIPTION,
                    DataField.AMOUNT,
                    DataField.ACCOUNT_IDENTIFIER,
                },
                True,
            ),
            ({DataField.DATE, DataField.DESCRIPTION, DataField.CREDIT}, False),
            ({DataField.DATE, DataField.AMOUNT}, False),
            ({DataField.DATE, DataField.DESCRIPTION, DataField.AMOUNT, DataField.DEBIT}, False),
        ],
    )
    def test_accepted_field_combinations(self, fields, accepted):
        assert is_accepted_field_combination(fields) is accepted

    def test_valid_configuration(self):
        importer = create_csv_importer(DATE_DESC_AMT, "%m/%d/%Y", checking_account)
        assert isinstance(importer, CsvTransactionListingImporter)

    def test_insufficient_fields_give_no_op(self, caplog):
        with caplog.at_level(logging.ERROR):
            importer = create_csv_importer(
                {DataField.DATE: 0, DataField.AMOUNT: 1}, None, checking_account
            )
        assert isinstance(importer, NoOpImporter)
        assert "not sufficient" in caplog.text
        assert importer.parse(["h", "10/31/2020,1.00"]).is_empty()

    def test_missing_account_generator_gives_no_op(self, caplog):
        with caplog.at_level(logging.ERROR):
            importer = create_csv_importer(DATE_DESC_AMT, None, None)
        assert isinstance(importer, NoOpImporter)
        assert "No CSV account" in caplog.text
