"""Reading and writing model files for CLI commands."""

import logging
from pathlib import Path
from typing import Iterable

import click

from ledgerlink.domain.merge import merge
from ledgerlink.domain.model import Model
from ledgerlink.export.csv_exporter import export_csv
from ledgerlink.export.ledger_exporter import export_ledger
from ledgerlink.importers.ledger_file import parse_ledger

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["ledger", "csv"]


def read_lines(path: str | Path) -> list[str]:
    """Read a text file as a list of lines without line endings."""
    return Path(path).read_text(encoding="utf-8").splitlines()


def load_ledgers(paths: Iterable[str]) -> Model:
    """Parse ledger files and merge them in order into one model."""
    model = Model.empty()
    for path in paths:
        model = merge(model, parse_ledger(read_lines(path)))
    return model


def write_model(model: Model, output: Path, output_format: str) -> None:
    """Write a model in the given format. Empty models are not written."""
    if model.is_empty():
        logger.warning("Model to export is empty. Not writing a file to: %s", output)
        click.echo("Nothing to write.", err=True)
        return
    lines = export_ledger(model) if output_format == "ledger" else export_csv(model)
    output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    click.echo(f"Wrote {model} to {output}")
