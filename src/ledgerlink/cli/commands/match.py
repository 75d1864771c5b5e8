"""Match command: reconcile a bank CSV export against known ledgers."""

from typing import Optional

import click

from ledgerlink.cli.error_handling import ensure_new_output, handle_domain_error
from ledgerlink.cli.model_io import OUTPUT_FORMATS, load_ledgers, read_lines, write_model
from ledgerlink.domain.entities import Account, guess_account_type
from ledgerlink.domain.errors import DomainError, ValidationError, unknown_csv_fields
from ledgerlink.domain.merge import merge
from ledgerlink.domain.model import Model
from ledgerlink.domain.reconciliation import ReconciliationPolicy, reconcile
from ledgerlink.importers.account_listing import parse_account_listing
from ledgerlink.importers.csv_listing import AccountGenerator, DataField, create_csv_importer
from ledgerlink.importers.tsv_mapping import parse_tsv_mapping
from ledgerlink.matcher.split_matcher import SplitMatcher

FIELDS_BY_NAME = {field.value: field for field in DataField}


def parse_field_ordering(ordering: str) -> dict[DataField, int]:
    """Parse a comma-separated field ordering such as "date,,desc,amt".

    Empty entries are columns to skip.

    Raises:
        ValidationError: If an entry is not a known field name
    """
    names = [name.strip().lower() for name in ordering.split(",")]
    unknown = [name for name in names if name and name not in FIELDS_BY_NAME]
    if unknown:
        raise ValidationError(unknown_csv_fields(unknown, list(FIELDS_BY_NAME)))
    return {FIELDS_BY_NAME[name]: position for position, name in enumerate(names) if name}


def account_generator_for(
    csv_account_name: Optional[str],
    known: Model,
    field_positions: dict[DataField, int],
) -> Optional[AccountGenerator]:
    """Choose how CSV rows are attributed to an account.

    A named CSV account applies to every row. Otherwise rows are attributed
    by their ACCOUNT_IDENTIFIER column. Known accounts are reused so that
    re-imported rows are recognized as duplicates.
    """

    def resolve(name: str) -> Account:
        named = Account.named(name, type=guess_account_type(name))
        return known.account(named.id) or named

    if csv_account_name:
        account = resolve(csv_account_name)
        return lambda identifier: account
    if DataField.ACCOUNT_IDENTIFIER in field_positions:
        return resolve
    return None


def add_seed_entries(known: Model, seed: Model) -> Model:
    """Add the entries of an account listing or mapping to the known model.

    Entities already known are kept as they are, so untyped listing accounts
    never replace typed ledger accounts.
    """
    new_accounts = [account for account in seed.accounts if account.id not in known.accounts_by_id]
    return merge(Model.create(new_accounts, seed.transactions, seed.splits), known)


@click.command("match")
@click.option(
    "--transaction-csv",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Bank CSV export to reconcile",
)
@click.option("--output", required=True, type=click.Path(dir_okay=False), help="File to write")
@click.option(
    "--master-ledger",
    "master_ledgers",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Ledger file with historical transactions (repeatable)",
)
@click.option(
    "--ledger-account-listing",
    type=click.Path(exists=True, dir_okay=False),
    help="File of 'account <name>' lines",
)
@click.option(
    "--tsv-desc-account-mapping",
    type=click.Path(exists=True, dir_okay=False),
    help="File of 'description<TAB>account' lines",
)
@click.option(
    "--csv-field-ordering",
    default="date,desc,amt",
    show_default=True,
    help=f"Comma-separated CSV columns, from: {', '.join(FIELDS_BY_NAME)}",
)
@click.option("--csv-date-format", help="strptime format of the date column (inferred if omitted)")
@click.option("--csv-account-name", help="Account the CSV transactions belong to")
@click.option(
    "--min-confidence",
    type=click.FloatRange(min=0.0),
    default=0.0,
    show_default=True,
    help="Minimum confidence for an automatic match",
)
@click.option("--keep-duplicates", is_flag=True, help="Keep probable duplicate transactions")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="ledger",
    show_default=True,
    help="Output format",
)
@click.pass_context
def match(
    ctx,
    transaction_csv: str,
    output: str,
    master_ledgers: tuple[str, ...],
    ledger_account_listing: Optional[str],
    tsv_desc_account_mapping: Optional[str],
    csv_field_ordering: str,
    csv_date_format: Optional[str],
    csv_account_name: Optional[str],
    min_confidence: float,
    keep_duplicates: bool,
    output_format: str,
):
    """Find counter-accounts for the transactions of a bank CSV export.

    The reconciled transactions are merged into the master ledgers and the
    result is written to the output file.
    """
    try:
        output_path = ensure_new_output(output)
        field_positions = parse_field_ordering(csv_field_ordering)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    master = load_ledgers(master_ledgers)
    known = master
    if ledger_account_listing:
        known = add_seed_entries(known, parse_account_listing(read_lines(ledger_account_listing)))
    if tsv_desc_account_mapping:
        known = add_seed_entries(known, parse_tsv_mapping(read_lines(tsv_desc_account_mapping)))

    importer = create_csv_importer(
        field_positions,
        csv_date_format,
        account_generator_for(csv_account_name, known, field_positions),
    )
    incoming = importer.parse(read_lines(transaction_csv))
    if incoming.is_empty():
        click.echo("No transactions were imported from the CSV file.", err=True)
        ctx.exit(1)

    policy = ReconciliationPolicy(min_confidence=min_confidence, skip_duplicates=not keep_duplicates)
    result = reconcile(SplitMatcher.create(known), incoming, policy)

    click.echo(f"Matched: {result.matched} transactions")
    click.echo(f"Unmatched: {result.unmatched} transactions")
    click.echo(f"Probable duplicates: {result.duplicates} transactions")
    write_model(merge(master, result.model), output_path, output_format)


def register_commands(cli):
    """Register match command with main CLI."""
    cli.add_command(match)
