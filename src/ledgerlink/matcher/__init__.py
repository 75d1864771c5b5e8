"""Reconciliation matcher for ledgerlink."""

from ledgerlink.matcher.split_matcher import Match, MatchedSplit, MatchResult, SplitMatcher

__all__ = ["Match", "MatchedSplit", "MatchResult", "SplitMatcher"]
