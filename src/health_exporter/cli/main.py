"""
Health Data Exporter CLI — Export health records into one or more targets.

Usage:
    health-exporter export --input-dir ./dump --format json --format sqlite --output-dir ./out
    health-exporter export --url https://health.example.com/api --type added --app-source-id com.example.app
    health-exporter categories
"""

import asyncio
import logging
import sys

import click

EXPORT_TYPES = {
    "all": "ALL",
    "added": "ADDED_BY_THIS_APP",
    "generated": "GENERATED_BY_THIS_APP",
}


@click.group()
@click.version_option(package_name="health-data-exporter")
def cli():
    """Health Data Exporter — Staged export of health records."""
    pass


@cli.command()
@click.option(
    "--input-dir",
    "-i",
    type=click.Path(file_okay=False),
    default=None,
    help="Local directory holding a JSON dump of the records.",
)
@click.option("--url", "-u", type=str, default=None, help="Base URL of a remote record API.")
@click.option("--token", "-t", type=str, default=None, help="API token (defaults to $HEALTH_EXPORT_TOKEN).")
@click.option(
    "--format",
    "-f",
    "formats",
    multiple=True,
    default=["json"],
    type=click.Choice(["json", "jsonl", "sqlite"]),
    help="Export format; repeat to write several targets in one run.",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(),
    default="./health_export",
    help="Output directory for exported data.",
)
@click.option(
    "--type",
    "export_type",
    type=click.Choice(list(EXPORT_TYPES)),
    default="all",
    help="Which records to export.",
)
@click.option("--app-source-id", type=str, default=None, help="Source id of records written by this app.")
@click.option("--profile-name", type=str, default=None, help="Profile name stored in the metadata.")
@click.option(
    "--since",
    type=click.DateTime(),
    default=None,
    help="Only export records starting on or after this date.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def export(
    input_dir, url, token, formats, output_dir, export_type, app_source_id, profile_name, since, verbose
):
    """Export health records from a dump directory or a remote API."""
    from health_exporter.models.config import ExportType, RunConfiguration
    from health_exporter.targets import get_target

    # Configure logging
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if bool(input_dir) == bool(url):
        raise click.UsageError("Pass exactly one of --input-dir or --url.")

    config = RunConfiguration(
        export_type=ExportType[EXPORT_TYPES[export_type]],
        app_source_id=app_source_id,
        profile_name=profile_name,
        start_date=since,
    )
    targets = [get_target(fmt, output_dir) for fmt in dict.fromkeys(formats)]

    result = asyncio.run(_run_export(config, targets, input_dir, url, token))
    if not result.ok:
        click.echo(f"Export failed ({result.phase}): {result.error}", err=True)
        sys.exit(1)


def progress_callback(progress, task_id):
    """Adapt export progress updates to a rich progress task."""

    def on_progress(message: str, percent: float | None) -> None:
        # An absent percent keeps the bar where it is and only updates the label.
        if percent is None:
            progress.update(task_id, description=f"[green]{message}[/green]")
        else:
            progress.update(task_id, description=f"[green]{message}[/green]", completed=percent * 100)

    return on_progress


async def _run_export(config, targets, input_dir, url, token):
    from pathlib import Path

    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from health_exporter.core.exporter import HealthDataExporter
    from health_exporter.sources.directory import DirectorySource
    from health_exporter.sources.http import HttpSource

    console = Console()
    source = DirectorySource(Path(input_dir)) if input_dir else HttpSource(url, token=token)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task_id = progress.add_task("[green]Exporting...[/green]", total=100)

            exporter = HealthDataExporter(source)
            result = await exporter.export(targets, config, on_progress=progress_callback(progress, task_id))
    finally:
        if isinstance(source, HttpSource):
            await source.aclose()

    if result.ok:
        console.print("\n[bold green][DONE] Export Complete[/bold green]")
        console.print(f"Stages: {len(result.stages_run)} | Targets: {', '.join(result.targets_closed)}")
    return result


@cli.command()
def categories():
    """List every record type the exporter knows about."""
    from health_exporter.models.catalog import (
        CATEGORY_TYPES,
        CHARACTERISTIC_TYPES,
        CORRELATION_TYPES,
        QUANTITY_TYPES,
        WORKOUT_TYPE,
    )

    groups = [
        ("Characteristics", CHARACTERISTIC_TYPES),
        ("Quantities", QUANTITY_TYPES),
        ("Categories", CATEGORY_TYPES),
        ("Correlations", CORRELATION_TYPES),
        ("Workouts", {WORKOUT_TYPE}),
    ]
    for title, identifiers in groups:
        click.echo(f"{title} ({len(identifiers)}):")
        for identifier in sorted(identifiers):
            click.echo(f"  {identifier}")


if __name__ == "__main__":
    cli()
