"""Main CLI entry point."""

import click

from ledgerlink.logging_config import LOG_LEVELS, configure_logging

# Import and register all commands at module level
from ledgerlink.cli.commands import gnucash, match, merge, report


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level (overrides LEDGERLINK_LOG_LEVEL environment variable)",
    envvar="LEDGERLINK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, log_level: str):
    """Ledgerlink - Import, reconcile and merge ledgers.

    Match bank CSV exports against ledger files, merge ledgers and convert
    GnuCash books.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)


# Register all commands
merge.register_commands(cli)
match.register_commands(cli)
gnucash.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
