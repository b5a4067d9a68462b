"""Command-line interface for catalogdedupe.

Exit codes: 0 on success, 1 on input or configuration errors, 2 when the
engine aborts on an internal invariant violation.
"""

import importlib.metadata
import sys
from pathlib import Path

import click
import jsonschema

from catalogdedupe.candidates.factory import BucketingStrategy

__all__ = ["cli", "EXIT_INPUT_ERROR", "EXIT_INVARIANT_VIOLATION"]

EXIT_INPUT_ERROR = 1
EXIT_INVARIANT_VIOLATION = 2

try:
    __version__ = importlib.metadata.version("catalogdedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"  # Fallback for development


@click.group()
@click.version_option(version=__version__, prog_name="catalogdedupe")
def cli() -> None:
    """Fuzzy duplicate detection for catalog entries.

    Use 'catalogdedupe COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output report JSON path",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON configuration file",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in BucketingStrategy]),
    default=None,
    help="Bucketing strategy (default: phonetic_first_word)",
)
@click.option(
    "--review-threshold",
    type=float,
    default=None,
    help="Minimum score for Review (default: 0.75)",
)
@click.option(
    "--high-threshold",
    type=float,
    default=None,
    help="Minimum score for HighConfidence (default: 0.92)",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker processes for scoring (default: 1, sequential)",
)
@click.option(
    "--clusters-jsonl",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write one cluster per line to this path",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write JSONL audit events to this path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def detect(
    input_path: str,
    output: str,
    config_path: str | None,
    strategy: str | None,
    review_threshold: float | None,
    high_threshold: float | None,
    workers: int | None,
    clusters_jsonl: str | None,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Detect likely duplicates in the catalog at INPUT_PATH.

    INPUT_PATH is a .jsonl, .json or .csv catalog file. Items need an id
    and a title; author, description, category and source_ref are used
    when present.

    Examples
    --------
        catalogdedupe detect catalog.jsonl -o report.json
        catalogdedupe detect catalog.csv -o report.json --strategy minhash --workers 4
        catalogdedupe detect catalog.json -o report.json --config tuned.json --log run.jsonl
    """
    from catalogdedupe.api import CatalogLoadError, load_catalog
    from catalogdedupe.audit import AuditLogger, generate_run_id
    from catalogdedupe.engine import DetectionConfig, detect_duplicates, load_config
    from catalogdedupe.models import InvariantViolationError
    from catalogdedupe.report import format_summary, write_clusters_jsonl, write_report
    from catalogdedupe.utils import calculate_file_sha256

    logger: AuditLogger | None = None
    try:
        config = load_config(Path(config_path)) if config_path else DetectionConfig()
        config = config.with_overrides(
            bucketing_strategy=strategy,
            review_threshold=review_threshold,
            high_confidence_threshold=high_threshold,
            max_workers=workers,
        )

        if verbose:
            click.echo(f"Loading: {input_path}", err=True)
        items = load_catalog(input_path)
        if verbose:
            click.echo(f"Loaded {len(items)} items", err=True)
            click.echo(f"  Strategy: {config.bucketing_strategy.value}", err=True)
            click.echo(
                f"  Thresholds: review={config.review_threshold} "
                f"high={config.high_confidence_threshold}",
                err=True,
            )

        if log_path:
            logger = AuditLogger(run_id=generate_run_id(), log_path=Path(log_path))

        report = detect_duplicates(items, config, logger=logger)

        report_path = write_report(report, Path(output))
        if logger:
            logger.artifact_written(
                path=str(report_path),
                sha256=calculate_file_sha256(report_path),
                bytes_written=report_path.stat().st_size,
                record_count=len(report.clusters),
            )

        if clusters_jsonl:
            written = write_clusters_jsonl(report, Path(clusters_jsonl))
            if verbose:
                click.echo(f"Wrote {written} clusters to {clusters_jsonl}", err=True)

        if verbose:
            click.echo(format_summary(report), err=True)
            for warning in report.warnings:
                click.echo(f"  skipped {warning.item_id}: {warning.code.value}", err=True)

        click.secho(
            f"✓ Found {len(report.clusters)} duplicate clusters in {len(items)} items; "
            f"report written to {output}",
            fg="green",
        )

    except InvariantViolationError as e:
        click.secho(f"✗ Internal error: {e}", fg="red", err=True)
        sys.exit(EXIT_INVARIANT_VIOLATION)
    except jsonschema.ValidationError as e:
        click.secho(f"✗ Invalid configuration: {e.message}", fg="red", err=True)
        sys.exit(EXIT_INPUT_ERROR)
    except (CatalogLoadError, ValueError, OSError) as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(EXIT_INPUT_ERROR)
    finally:
        if logger:
            logger.close()


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def normalize(input_path: str, output: str, verbose: bool) -> None:
    """Write the normalized form of every usable item in INPUT_PATH.

    Useful to inspect how titles, authors and volume markers are read.
    Items that cannot be normalized are reported and left out.

    Examples
    --------
        catalogdedupe normalize catalog.jsonl -o normalized.jsonl
    """
    from catalogdedupe.api import CatalogLoadError, load_catalog, write_jsonl
    from catalogdedupe.engine import normalize_catalog

    try:
        items = load_catalog(input_path)
        normalized, warnings = normalize_catalog(items)
        count = write_jsonl(normalized, output)

        for warning in warnings:
            click.echo(f"skipped {warning.item_id}: {warning.message}", err=True)
        if verbose:
            click.echo(f"{len(items)} items read, {len(warnings)} skipped", err=True)

        click.secho(f"✓ Wrote {count} normalized items to {output}", fg="green")

    except (CatalogLoadError, ValueError, OSError) as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(EXIT_INPUT_ERROR)


if __name__ == "__main__":
    cli()
