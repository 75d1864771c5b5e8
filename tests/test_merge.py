"""Tests for merging models."""

import logging

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction
from ledgerlink.domain.merge import content_id, merge
from ledgerlink.domain.model import Model


def test_merge_unions_entities(historical_model):
    incoming = Model.create(
        [Account.named("Expenses:Rent", type=AccountType.EXPENSE)],
        [Transaction("t4", 0, "Rent")],
        [Split.with_amount(750, "Expenses:Rent", "t4")],
    )

    merged = merge(historical_model, incoming)

    assert len(merged.accounts) == 4
    assert len(merged.transactions) == 4
    assert len(merged.splits) == 7


def test_merge_with_empty_models(historical_model):
    assert merge(Model.empty(), Model.empty()).is_empty()
    assert merge(Model.empty(), historical_model) == historical_model


def test_dangling_splits_are_dropped(caplog, historical_model):
    incoming = Model.create(
        splits=[
            Split.with_amount(1, "Expenses:Groceries", "missing-transaction"),
            Split.with_amount(1, "Expenses:Missing", "t1"),
            Split.with_amount(1, "Expenses:Missing", "missing-transaction"),
        ]
    )

    with caplog.at_level(logging.WARNING):
        merged = merge(historical_model, incoming)

    assert len(merged.splits) == len(historical_model.splits)
    assert "bad transaction reference" in caplog.text
    assert "bad account reference" in caplog.text
    assert "bad transaction and account reference" in caplog.text


def test_incoming_wins_on_id_collision(caplog):
    base = Model.create(accounts=[Account("a", "Old name")])
    incoming = Model.create(accounts=[Account("a", "New name")])

    with caplog.at_level(logging.WARNING):
        merged = merge(base, incoming)

    assert [account.name for account in merged.accounts] == ["New name"]
    assert "Overwriting account with id a" in caplog.text


def test_identical_entities_do_not_warn(caplog, historical_model):
    with caplog.at_level(logging.WARNING):
        merged = merge(historical_model, historical_model)
    assert merged == historical_model
    assert "Overwriting" not in caplog.text


def test_identical_splits_collapse():
    model = Model.create(
        [Account.named("a"), Account.named("b")],
        [Transaction("t", 0, "desc")],
        [Split.with_amount(1, "a", "t"), Split.with_amount(-1, "b", "t")],
    )
    merged = merge(model, model)
    assert len(merged.splits) == 2


def test_empty_ids_are_backfilled_from_content():
    account = Account("", "Expenses:Misc")
    transaction = Transaction("", 0, "Something")

    first = merge(Model.empty(), Model.create([account], [transaction]))
    second = merge(Model.empty(), Model.create([account], [transaction]))

    assert first.accounts[0].id == content_id(account)
    assert first.accounts[0].id != ""
    assert first.transactions[0].id == content_id(transaction)
    assert first == second


def test_distinct_unidentified_entities_get_distinct_ids():
    merged = merge(
        Model.create(accounts=[Account("", "One")]),
        Model.create(accounts=[Account("", "Two")]),
    )
    assert len({account.id for account in merged.accounts}) == 2


def test_unbalanced_transactions_are_kept_with_warning(caplog):
    model = Model.create(
        [Account.named("a")],
        [Transaction("t", 0, "Half a transaction")],
        [Split.with_amount(5, "a", "t")],
    )

    with caplog.at_level(logging.WARNING):
        merged = merge(Model.empty(), model)

    assert len(merged.splits) == 1
    assert "not balanced" in caplog.text
    assert "Half a transaction" in caplog.text
