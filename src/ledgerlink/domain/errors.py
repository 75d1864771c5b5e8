"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvariantViolation(AssertionError):
    """An internal model invariant was broken.

    Raised for programming errors only, never for malformed external input.
    """


def unknown_split_account(account_id: str, transaction_id: str) -> str:
    """Return message for a split whose account is not known."""
    return (
        f"Split refers to an account that doesn't exist: "
        f"[accountId: {account_id}, transactionId: {transaction_id}]"
    )


def output_file_exists(path: str) -> str:
    """Return message when an output file would be overwritten."""
    return f"Output file '{path}' already exists. Not overwriting it."


def unknown_csv_fields(unknown: list[str], known: list[str]) -> str:
    """Return message for an unrecognized CSV field ordering."""
    return (
        f"Unknown CSV field name(s): {', '.join(unknown)}. "
        f"Field ordering may only contain: {', '.join(known)}"
    )
