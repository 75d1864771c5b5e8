"""GnuCash conversion command."""

import click

from ledgerlink.cli.error_handling import ensure_new_output, handle_domain_error
from ledgerlink.cli.model_io import OUTPUT_FORMATS, write_model
from ledgerlink.database.gnucash import GnuCashSqliteConnector
from ledgerlink.domain.errors import DomainError


@click.command("gnucash")
@click.argument("database", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", required=True, type=click.Path(dir_okay=False), help="File to write")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="ledger",
    show_default=True,
    help="Output format",
)
@click.pass_context
def convert_gnucash(ctx, database: str, output: str, output_format: str):
    """Convert a GnuCash SQLite book to a ledger or CSV file."""
    try:
        output_path = ensure_new_output(output)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    model = GnuCashSqliteConnector(database).extract()
    write_model(model, output_path, output_format)


def register_commands(cli):
    """Register gnucash command with main CLI."""
    cli.add_command(convert_gnucash)
