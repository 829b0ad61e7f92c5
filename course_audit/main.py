#!/usr/bin/env python3
"""
Unpublished Course Audit

Finds courses of an upcoming term that are still unpublished in the LMS and
reports what content they have and who teaches them.

Usage:
    course-audit audit               # Probe unpublished courses and write the report
    course-audit audit --term 6253-  # Audit a different term prefix
    course-audit courses             # List candidate courses without probing
"""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn

from . import __version__
from .config import AuditorConfig, config
from .client import RateGovernor, HttpFetcher, Paginator
from .auditor import CourseAuditor
from .models.report import ReportRow
from .storage import ReportExporter, report_filename
from .utils.exceptions import AuditException, ConfigurationError
from .utils.logging_config import setup_logging, get_logger

console = Console()


def setup_environment():
    """Initialize directories and logging."""
    config.ensure_directories()
    setup_logging(level=config.log_level, log_file=config.log_file)
    return get_logger()


def build_auditor(cfg: AuditorConfig) -> Tuple[CourseAuditor, RateGovernor]:
    """Wire one governor, fetcher and paginator into an auditor."""
    governor = RateGovernor(cfg.rate_limit)
    fetcher = HttpFetcher(cfg.canvas, governor, rate_config=cfg.rate_limit)
    paginator = Paginator(fetcher, per_page=cfg.audit.per_page)
    return CourseAuditor(fetcher, paginator, cfg), governor


def _prepare(term: Optional[str], state: Optional[str]):
    """Apply command-line overrides and check the configuration."""
    logger = setup_environment()

    if term:
        config.audit.term_prefix = term
    if state:
        config.audit.target_state = state

    try:
        config.validate()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        console.print("Set CANVAS_API_URL and CANVAS_API_TOKEN in your environment or .env file.")
        sys.exit(1)

    return logger


@click.group()
@click.version_option(version=__version__)
def cli():
    """Unpublished Course Audit for LMS accounts."""
    pass


@cli.command()
@click.option("--term", "-t", help="SIS id prefix of the term to audit, e.g. 6253-")
@click.option("--state", help="Workflow state to report (default: unpublished)")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the report (default: data/reports)",
)
@click.option("--jsonl", is_flag=True, help="Also write the report as JSONL")
def audit(term: Optional[str], state: Optional[str], output_dir: Optional[Path], jsonl: bool):
    """Probe unpublished courses and write the report."""
    logger = _prepare(term, state)
    prefix = config.audit.term_prefix

    console.print(f"\n[bold blue]Unpublished Course Audit[/bold blue] (term prefix {prefix})\n")

    auditor, governor = build_auditor(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Listing courses...", total=None)

        def on_start(total: int):
            progress.update(task, total=total, description="Auditing...")

        def on_row(row: ReportRow):
            progress.update(task, description=f"Audited: {row.course_name[:40]}")
            progress.advance(task)

        try:
            result = auditor.run(on_start=on_start, on_row=on_row)
        except AuditException as e:
            logger.error(f"Audit aborted: {e}")
            console.print(f"[bold red]Failed to list courses:[/bold red] {e}")
            sys.exit(1)

    exporter = ReportExporter(output_dir or config.reports_dir)
    csv_path = exporter.export_csv(result.rows, report_filename(prefix))
    console.print(f"\n[green]Written report to {csv_path} with {len(result.rows)} entries[/green]")
    if jsonl:
        jsonl_path = exporter.export_jsonl(result.rows, report_filename(prefix, "jsonl"))
        console.print(f"[green]Written JSONL copy to {jsonl_path}[/green]")

    rate = governor.state
    table = Table(title="Audit Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Courses Listed", str(result.courses_seen))
    table.add_row("Courses Audited", str(result.courses_selected))
    table.add_row("Rows With Probe Errors", str(result.rows_with_errors))
    table.add_row("Requests Made", str(rate.request_count))
    table.add_row("Failed Requests", str(rate.transport_failures))
    table.add_row("Average Request Cost", f"{rate.average_cost:.2f}")
    table.add_row("Remaining Quota", f"{rate.remaining:.1f} / {rate.max_quota}")

    console.print(table)


@cli.command()
@click.option("--term", "-t", help="SIS id prefix of the term to list, e.g. 6253-")
@click.option("--state", help="Workflow state to list (default: unpublished)")
def courses(term: Optional[str], state: Optional[str]):
    """List candidate courses without probing them."""
    _prepare(term, state)

    auditor, _ = build_auditor(config)

    try:
        selected = auditor.select_courses(auditor.list_courses())
    except AuditException as e:
        console.print(f"[bold red]Failed to list courses:[/bold red] {e}")
        sys.exit(1)

    if not selected:
        console.print("No matching courses found.")
        return

    table = Table(title=f"{config.audit.target_state.title()} courses ({config.audit.term_prefix})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("SIS ID")
    table.add_column("Default View", style="green")

    for course in selected:
        table.add_row(
            str(course.id),
            course.name,
            course.sis_course_id or "",
            course.default_view or "",
        )

    console.print(table)


if __name__ == "__main__":
    cli()
