"""Merge of two ledger models into one consistent model."""

import dataclasses
import hashlib
import json
import logging
from typing import Iterable, TypeVar

from ledgerlink.domain.entities import Account, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.domain.validation import are_balanced, bad_references, balance_of
from ledgerlink.utils.amount_parser import format_ledger_currency

logger = logging.getLogger(__name__)

Entity = TypeVar("Entity", Account, Transaction)


def content_id(entity: Account | Transaction) -> str:
    """Derive an id from the serialized content of an entity."""
    serialized = json.dumps(
        dataclasses.asdict(entity), default=lambda value: value.value, sort_keys=True
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def _union_by_id(kind: str, entities: Iterable[Entity]) -> dict[str, Entity]:
    """Index entities by id, later entities replacing earlier ones.

    Entities without an id get one derived from their content.
    """
    union: dict[str, Entity] = {}
    for entity in entities:
        if not entity.id:
            entity = dataclasses.replace(entity, id=content_id(entity))
            logger.info("Generated id %s for %s with no id: %s", entity.id, kind, entity)
        existing = union.get(entity.id)
        if existing is not None and existing != entity:
            logger.warning(
                "Overwriting %s with id %s. Old: %s New: %s", kind, entity.id, existing, entity
            )
        union[entity.id] = entity
    return union


def merge(base: Model, incoming: Model) -> Model:
    """Merge two models.

    Accounts and transactions are unioned by id. On an id collision the
    incoming entity wins. Splits are unioned and identical splits collapse;
    splits whose account or transaction does not resolve are dropped.
    Unbalanced transactions are kept but logged.

    Args:
        base: Model merged first
        incoming: Model merged second

    Returns:
        New merged model
    """
    accounts_by_id = _union_by_id("account", [*base.accounts, *incoming.accounts])
    transactions_by_id = _union_by_id(
        "transaction", [*base.transactions, *incoming.transactions]
    )

    splits: dict[Split, None] = {}
    dropped = 0
    for split in (*base.splits, *incoming.splits):
        bad = bad_references(split, accounts_by_id, transactions_by_id)
        if bad:
            logger.warning(
                "Dropping split because it has bad %s reference(s): %s",
                " and ".join(bad),
                split,
            )
            dropped += 1
            continue
        splits.setdefault(split, None)

    merged = Model.create(accounts_by_id.values(), transactions_by_id.values(), splits)
    for transaction_id, transaction_splits in merged.splits_by_transaction_id.items():
        if not are_balanced(transaction_splits):
            logger.warning(
                "Transaction %s is not balanced (off by %s): %s",
                transaction_id,
                format_ledger_currency(balance_of(transaction_splits)),
                merged.transactions_by_id[transaction_id].description,
            )

    logger.info("Merged into %s (dropped %d splits).", merged, dropped)
    return merged
