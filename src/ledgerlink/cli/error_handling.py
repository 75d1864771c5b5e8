"""CLI error handling helpers."""

from pathlib import Path

import click

from ledgerlink.domain.errors import DomainError, ValidationError, output_file_exists


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def ensure_new_output(path: str) -> Path:
    """Return the output path, refusing to overwrite an existing file.

    Raises:
        ValidationError: If the file already exists
    """
    output = Path(path)
    if output.exists():
        raise ValidationError(output_file_exists(path))
    return output
