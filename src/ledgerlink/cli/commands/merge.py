"""Merge command."""

import click

from ledgerlink.cli.error_handling import ensure_new_output, handle_domain_error
from ledgerlink.cli.model_io import OUTPUT_FORMATS, load_ledgers, write_model
from ledgerlink.domain.errors import DomainError


@click.command("merge")
@click.argument("ledgers", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
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
def merge_ledgers(ctx, ledgers: tuple[str, ...], output: str, output_format: str):
    """Merge ledger files into one.

    Files are merged in the order given; later files win when two entities
    share an id.
    """
    try:
        output_path = ensure_new_output(output)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    model = load_ledgers(ledgers)
    write_model(model, output_path, output_format)


def register_commands(cli):
    """Register merge command with main CLI."""
    cli.add_command(merge_ledgers)
