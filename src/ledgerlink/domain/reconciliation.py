"""Batch reconciliation of imported transactions against a matcher."""

import logging
from dataclasses import dataclass

from ledgerlink.domain.entities import Account, Split
from ledgerlink.domain.model import Model
from ledgerlink.domain.validation import balance_of
from ledgerlink.matcher.split_matcher import MatchResult, SplitMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationPolicy:
    """How ``reconcile`` acts on the matcher's suggestions."""

    min_confidence: float = 0.0
    skip_duplicates: bool = True


@dataclass(frozen=True)
class ReconciliationResult:
    model: Model
    matched: int = 0
    unmatched: int = 0
    duplicates: int = 0


def reconcile(
    matcher: SplitMatcher,
    incoming: Model,
    policy: ReconciliationPolicy = ReconciliationPolicy(),
) -> ReconciliationResult:
    """Give single-sided incoming transactions a counter-split.

    Transactions are visited in post date order. A transaction that already
    has two or more splits is kept unchanged. Otherwise the matcher is asked
    for suggestions: a probable duplicate is dropped if the policy says so,
    and the most confident partial match at or above the policy's minimum
    receives a split offsetting the existing ones. That split is linked into
    the matcher so later transactions can match against it.

    Args:
        matcher: Matcher built from the historical model
        incoming: Imported model to reconcile
        policy: Duplicate handling and confidence threshold

    Returns:
        ReconciliationResult with the reconciled model and per-outcome counts
    """
    accounts_by_id: dict[str, Account] = dict(incoming.accounts_by_id)
    transactions = []
    splits: list[Split] = []
    matched = unmatched = duplicates = 0

    ordered = sorted(
        incoming.transactions,
        key=lambda transaction: (transaction.post_date_epoch_second, transaction.id),
    )
    for transaction in ordered:
        existing = list(incoming.splits_for(transaction.id))
        if len(existing) >= 2:
            transactions.append(transaction)
            splits.extend(existing)
            continue

        own_account_ids = {split.account_id for split in existing}
        matches = matcher.get_top_matches(
            transaction,
            existing,
            exclude=lambda account: account.id in own_account_ids,
        )

        if any(match.result is MatchResult.PROBABLE_DUPLICATE for match in matches):
            duplicates += 1
            if policy.skip_duplicates:
                logger.info(
                    "Skipping probable duplicate transaction '%s'.", transaction.description
                )
                continue

        best = next(
            (
                match
                for match in matches
                if match.result is MatchResult.PARTIAL_CONFIDENCE
                and match.confidence >= policy.min_confidence
            ),
            None,
        )
        transactions.append(transaction)
        splits.extend(existing)
        if best is None:
            unmatched += 1
            logger.debug("No match for transaction '%s'.", transaction.description)
            continue

        offset = Split.with_amount(
            -balance_of(existing), account_id=best.account.id, transaction_id=transaction.id
        )
        accounts_by_id.setdefault(best.account.id, best.account)
        splits.append(offset)
        matcher.link(transaction, offset)
        matched += 1
        logger.debug(
            "Matched '%s' to %s (confidence %.3f).",
            transaction.description,
            best.account.name,
            best.confidence,
        )

    logger.info(
        "Reconciled %d transactions: %d matched, %d unmatched, %d probable duplicates.",
        len(ordered),
        matched,
        unmatched,
        duplicates,
    )
    return ReconciliationResult(
        model=Model.create(accounts_by_id.values(), transactions, splits),
        matched=matched,
        unmatched=unmatched,
        duplicates=duplicates,
    )
