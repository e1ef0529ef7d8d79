#!/usr/bin/env python3
"""Schedule-Forge CLI - documents and change requests in, CPM activity networks out.

Usage:
    # Inspect how documents would be triaged
    python main.py triage ./specs/contract.pdf ./specs/scope.txt

    # Create a schedule from a description and documents
    python main.py generate -d "Two-storey school demolition" -r "45 working days" \\
        -f ./specs/contract.pdf --mode standard -o schedule.json

    # Revise an existing schedule
    python main.py generate --type update -r "Delay abatement by a week" -a schedule.json

    # Suggest updates from meeting notes
    python main.py impacts --notes ./meeting.txt -a schedule.json
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from agents import ImpactAgent
from config import settings
from contracts import (
    Activity,
    DocumentAnalysis,
    ProcessingMode,
    ProcessingOptions,
    ScheduleRequest,
    TaskType,
)
from logging_config import setup_logging
from orchestrator import GenerationOrchestrator
from recovery import normalize_activities
from storage import LocalContentStore
from triage import DocumentAnalyzer


console = Console()


def load_activities(path: Optional[str]) -> List[Activity]:
    """Load activities from a JSON file holding a list or a ScheduleResult payload."""
    if not path:
        return []
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    records = data.get("activities", []) if isinstance(data, dict) else data
    activities, _ = normalize_activities(records)
    return activities


def build_options(mode: str, select: tuple, max_tokens: Optional[int]) -> ProcessingOptions:
    return ProcessingOptions(
        mode=ProcessingMode(mode),
        selected_section_ids=list(select) or None,
        max_tokens=max_tokens,
    )


def print_analysis(analysis: DocumentAnalysis) -> None:
    """Render one document analysis as rich tables."""
    if analysis.failed:
        console.print(f"[red]✗ {analysis.file_name}:[/red] {analysis.failure_note}")
        return

    console.print(Panel.fit(
        f"[bold]{analysis.file_name}[/bold]\n"
        f"[dim]{analysis.total_size:,} characters, ~{analysis.total_tokens:,} tokens, "
        f"{len(analysis.sections)} sections[/dim]",
        border_style="blue",
    ))

    sections = Table(title="Sections (by relevance)")
    sections.add_column("ID", style="cyan")
    sections.add_column("Title")
    sections.add_column("Category")
    sections.add_column("Score", justify="right")
    sections.add_column("Tokens", justify="right")
    sections.add_column("Selected", justify="center")
    for section in analysis.sections:
        sections.add_row(
            section.id,
            section.title,
            section.category.value,
            str(section.relevance_score),
            f"{section.token_estimate:,}",
            "[green]✓[/green]" if section.is_selected else "",
        )
    console.print(sections)

    info = analysis.key_information
    console.print("\n[bold]Key information:[/bold]")
    console.print(f"  [green]Contract duration:[/green] {info.contract_duration or 'Not specified'}")
    console.print(f"  [green]Project type:[/green] {info.project_type or 'Not specified'}")
    console.print(f"  [green]Start date:[/green] {info.start_date or 'Not found'}")
    console.print(f"  [green]End date:[/green] {info.end_date or 'Not found'}")
    for milestone in info.milestones:
        console.print(f"  [green]Milestone:[/green] {milestone}")
    for constraint in info.constraints:
        console.print(f"  [green]Constraint:[/green] {constraint}")

    budgets = Table(title="Processing budgets")
    budgets.add_column("Mode", style="cyan")
    budgets.add_column("Sections", justify="right")
    budgets.add_column("Tokens", justify="right")
    budgets.add_column("Est. cost", justify="right")
    budgets.add_column("Description")
    for mode in ProcessingMode:
        budget = analysis.budgets.get(mode)
        if budget is None:
            continue
        budgets.add_row(
            mode.value,
            str(budget.section_count),
            f"{budget.tokens:,}",
            f"${budget.cost_usd:.4f}",
            budget.description,
        )
    console.print(budgets)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose (DEBUG) logging")
@click.option("--log-dir", default=None, help="Also write rotating log files to this directory")
def cli(verbose: bool, log_dir: Optional[str]):
    """Schedule-Forge: document-driven CPM schedule synthesis."""
    setup_logging(level="DEBUG" if verbose else settings.log_level, log_dir=log_dir)


@cli.command()
@click.argument("files", nargs=-1, required=True)
@click.option("--select", "-s", multiple=True, help="Section id to include in custom mode (repeatable)")
@click.option("--model", default=None, help="Model used to price budgets")
@click.option("--documents-dir", default=None, help="Root directory for relative paths")
def triage(files: tuple, select: tuple, model: Optional[str], documents_dir: Optional[str]):
    """Show how FILES would be segmented, scored and budgeted."""
    analyzer = DocumentAnalyzer(store=LocalContentStore(documents_dir or settings.documents_dir), model=model)
    for analysis in analyzer.analyze_documents(list(files), list(select) or None):
        print_analysis(analysis)
        console.print()


@cli.command()
@click.option(
    "--type", "task_type",
    type=click.Choice([t.value for t in TaskType]),
    default=TaskType.CREATE.value,
    help="Kind of request (default: create)",
)
@click.option("--description", "-d", default="", help="Project description")
@click.option("--request", "-r", "user_request", default="", help="Natural-language change request")
@click.option("--start-date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Project start (YYYY-MM-DD)")
@click.option("--constraint", "-c", multiple=True, help="Scheduling constraint (repeatable)")
@click.option("--activities", "-a", "activities_path", default=None, help="JSON file with current activities")
@click.option("--file", "-f", "files", multiple=True, help="Project document to triage (repeatable)")
@click.option(
    "--mode", "-m",
    type=click.Choice([m.value for m in ProcessingMode]),
    default=ProcessingMode.STANDARD.value,
    help="Document processing mode (default: standard)",
)
@click.option("--select", "-s", multiple=True, help="Section id for custom mode (repeatable)")
@click.option("--max-tokens", type=int, default=None, help="Ceiling on document tokens sent to the model")
@click.option("--model", default=None, help="Model name (e.g. Claude-Sonnet-4, gpt-4o)")
@click.option("--timeout", type=float, default=None, help=f"Generator timeout in seconds (default: {settings.generation_timeout_seconds:g})")
@click.option("--documents-dir", default=None, help="Root directory for relative document paths")
@click.option("--output", "-o", default=None, help="Write the ScheduleResult JSON here instead of stdout")
def generate(
    task_type: str,
    description: str,
    user_request: str,
    start_date,
    constraint: tuple,
    activities_path: Optional[str],
    files: tuple,
    mode: str,
    select: tuple,
    max_tokens: Optional[int],
    model: Optional[str],
    timeout: Optional[float],
    documents_dir: Optional[str],
    output: Optional[str],
):
    """Generate, update, look ahead on, or analyze a schedule."""
    request = ScheduleRequest(
        type=TaskType(task_type),
        project_description=description,
        user_request=user_request,
        current_activities=load_activities(activities_path),
        start_date=start_date.date() if start_date else None,
        constraints=list(constraint),
        uploaded_files=list(files),
        processing=build_options(mode, select, max_tokens),
        model=model,
    )
    orchestrator = GenerationOrchestrator(
        store=LocalContentStore(documents_dir or settings.documents_dir),
        timeout_seconds=timeout,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Running {request.type.value} request...", total=None)
        outcome = orchestrator.generate(request)

    result = outcome.result
    payload = json.dumps(result.to_payload(), indent=2)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
        console.print(f"[bold]Schedule saved to:[/bold] {output}")
    else:
        click.echo(payload)

    status = "[yellow]degraded (fallback)[/yellow]" if outcome.degraded else "[green]ok[/green]"
    console.print(f"\n[green]Status:[/green] {status}")
    console.print(f"[green]Activities:[/green] {len(result.activities)}")
    console.print(f"[green]Critical path:[/green] {' -> '.join(result.critical_path) or 'none'}")
    if outcome.strategy:
        console.print(f"[green]Recovered via:[/green] {outcome.strategy.value}")
    if outcome.report and outcome.report.dropped_references:
        console.print(f"[yellow]Dropped references:[/yellow] {outcome.report.dropped_references}")
    if outcome.usage:
        console.print(f"[green]Tokens:[/green] {outcome.usage.input_tokens:,} in / {outcome.usage.output_tokens:,} out")
        console.print(f"[green]Estimated cost:[/green] ${outcome.cost_usd:.4f}")
    console.print(f"[green]Duration:[/green] {outcome.state.elapsed_seconds:.1f}s")

    if not result.activities:
        console.print(f"[red]{result.summary}[/red]")
        sys.exit(1)


@cli.command()
@click.option("--notes", "-n", "notes_path", required=True, help="Meeting notes file")
@click.option("--activities", "-a", "activities_path", required=True, help="JSON file with current activities")
@click.option("--model", default=None, help="Model name (e.g. Claude-Sonnet-4, gpt-4o)")
def impacts(notes_path: str, activities_path: str, model: Optional[str]):
    """Identify activities affected by meeting notes."""
    notes = Path(notes_path).read_text(encoding="utf-8", errors="replace")
    activities = load_activities(activities_path)

    report = ImpactAgent(model=model).analyze(notes, activities)

    if not report.impacted_activities and not report.suggested_updates:
        console.print("[dim]No schedule impacts identified.[/dim]")
        return

    console.print(f"[bold]Impacted activities:[/bold] {', '.join(report.impacted_activities) or 'none'}")
    table = Table(title="Suggested updates")
    table.add_column("Activity", style="cyan")
    table.add_column("Field")
    table.add_column("New value")
    table.add_column("Reason")
    for update in report.suggested_updates:
        table.add_row(update.activity_id, update.field, str(update.new_value), update.reason)
    console.print(table)


if __name__ == "__main__":
    cli()
