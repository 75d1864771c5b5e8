"""Report command."""

import click

from ledgerlink.cli.model_io import load_ledgers
from ledgerlink.report.expenses_by_month import expenses_by_month


@click.command("report")
@click.argument("ledgers", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def report(ledgers: tuple[str, ...]):
    """Print per-account totals by month as TSV."""
    click.echo(expenses_by_month(load_ledgers(ledgers)))


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
