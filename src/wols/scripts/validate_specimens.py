#!/usr/bin/env python3
"""Validate WOLS specimen documents.

Checks JSON specimen files against the WOLS schema and reports errors and
warnings per document.

Usage:
    wols-validate specimen.json
    wols-validate data/labels/*.json --lenient --verbose
    wols-validate --dir data/labels --id-mode ulid -o report.json
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from wols.validation import (
    ID_PATTERNS,
    ValidationOptions,
    export_validation_report,
    print_validation_report,
    validate_directory,
    validate_specimen_files,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

load_dotenv()


@click.command()
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--dir",
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Validate every *.json file in a directory",
)
@click.option(
    "--id-mode",
    type=click.Choice(sorted(ID_PATTERNS)),
    default=lambda: os.environ.get("WOLS_ID_MODE", "strict"),
    show_default="strict, or $WOLS_ID_MODE",
    help="Id suffix format to accept",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Downgrade unknown stages and malformed timestamps to warnings",
)
@click.option(
    "--allow-unknown-fields",
    is_flag=True,
    help="Do not warn about fields outside the standard",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Export report to JSON file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show suggestions and a per-code summary",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
def main(
    files: tuple[Path, ...],
    directory: Path | None,
    id_mode: str,
    lenient: bool,
    allow_unknown_fields: bool,
    output: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """Validate WOLS specimen JSON files.

    Exits with status 1 if any document has errors.

    \b
    Checks:
    - JSON-LD markers, id format and semver version
    - Specimen type, species, growth stage and timestamps
    - Strain sub-record fields
    - Unknown top-level fields (warnings)
    """
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if not files and directory is None:
        raise click.UsageError("Specify one or more FILES or --dir. Use --help for options.")

    options = ValidationOptions(
        allow_unknown_fields=allow_unknown_fields,
        level="lenient" if lenient else "strict",
        id_mode=id_mode,  # type: ignore[arg-type]
    )

    report = validate_specimen_files(files, options)
    if directory is not None:
        click.echo(f"Validating all specimens in {directory}...")
        report.merge(validate_directory(directory, options))

    print_validation_report(report, verbose=verbose)

    if output is not None:
        export_validation_report(report, output)
        click.echo(f"\nExported report to {output}")

    if report.error_count:
        sys.exit(1)


if __name__ == "__main__":
    main()
