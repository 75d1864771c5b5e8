"""Reports over ledgerlink models."""

from ledgerlink.report.expenses_by_month import expenses_by_month

__all__ = ["expenses_by_month"]
