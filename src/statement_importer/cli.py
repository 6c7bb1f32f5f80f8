import logging
import typer
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel

from statement_importer.categorization import PatternCatalogue
from statement_importer.config.settings import ConfigLoader
from statement_importer.domain.enums import Sphere
from statement_importer.domain.models import RawEntryParseError
from statement_importer.prompting.terminal import RichPrompter
from statement_importer.repositories.yaml_catalogue_repository import YamlCatalogueRepository
from statement_importer.services.models import ActivityReport, CategorisedActivityReport
from statement_importer.services.session_service import (
    ClassificationSession,
    collect_entries,
    month_boundaries,
    parse_start_date,
)

app = typer.Typer(
    name="statement-importer",
    help="Classify bank statement entries into a personal/work ledger",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on the CLI console"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def main(
    input_directory: Path = typer.Argument(
        ...,
        help="Directory containing CSV statements",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    start_date: str = typer.Argument(
        ...,
        help="First day to process (YYYYMMDD); the run covers the rest of that month",
    ),
    catalogue_path: Optional[Path] = typer.Option(
        None,
        "--catalogue", "-c",
        help="Catalogue file (defaults to ~/.bank_statement_importer.yml)",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
):
    """
    Classify one month of statement entries, learning patterns as you go.

    Examples:
        statement-importer statements/ 20191101
        statement-importer statements/ 20191101 --catalogue my_catalogue.yml
    """
    configure_logging(verbose)

    try:
        start = parse_start_date(start_date)
    except RawEntryParseError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid start date: {escape(str(e))}")
        raise typer.Exit(code=2)

    try:
        start, end_exclusive = month_boundaries(start)
        repository = YamlCatalogueRepository(ConfigLoader.resolve_catalogue_path(catalogue_path))

        if repository.exists():
            console.print(f"Catalogue exists at {escape(str(repository.path))}")
        catalogue = repository.load_or_initialise()

        entries = collect_entries(input_directory, start)

        console.print(Panel.fit(
            f"[bold cyan]Import Configuration[/bold cyan]\n"
            f"Directory: {escape(str(input_directory))}\n"
            f"Period: {start} to {end_exclusive} (exclusive)\n"
            f"Entries: {len(entries)}\n"
            f"Catalogue: {escape(str(repository.path))}",
            border_style="cyan"
        ))

        session = ClassificationSession(
            catalogue=catalogue,
            repository=repository,
            prompter=RichPrompter(console),
        )
        report = session.run(entries)

        render_report(report, catalogue)

    except (ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(code=1)


def render_report(report: ActivityReport, catalogue: PatternCatalogue) -> None:
    """Print the grouped ledger and the run totals"""
    if not report.entries:
        console.print(Panel(
            "[yellow]No entries were classified[/yellow]",
            title="Empty Report",
            border_style="yellow"
        ))
        return

    grouped = CategorisedActivityReport.build(report, catalogue.categories)

    for sphere in (Sphere.PERSONAL, Sphere.WORK):
        groups = grouped.for_sphere(sphere)
        if not groups:
            continue

        table = Table(title=f"{sphere.value.capitalize()} entries", show_header=True, padding=(0, 1))
        table.add_column("Category", style="cyan", no_wrap=True)
        table.add_column("Entries", justify="right")
        table.add_column("Expenses", justify="right", style="red")
        table.add_column("Income", justify="right", style="green")
        table.add_column("Transfers", justify="right", style="dim")

        for group in groups:
            table.add_row(
                escape(group.category),
                str(len(group.entries)),
                f"{group.total_expenses():,.2f}",
                f"{group.total_income():,.2f}",
                f"{group.total_transfers():,.2f}",
            )

        console.print(table)

    summary_text = (
        f"[bold]Entries:[/bold] {len(report)}\n\n"
        f"[red]Personal expenses:[/red] {report.total_personal():>12,.2f}\n"
        f"[red]Work expenses:[/red]     {report.total_work():>12,.2f}\n"
        f"[green]Income:[/green]            {report.total_income():>12,.2f}\n"
        f"[dim]Transfers:[/dim]         {report.total_transfers():>12,.2f}"
    )
    console.print(Panel(
        summary_text,
        title="[bold]Summary[/bold]",
        border_style="cyan",
        padding=(1, 2)
    ))


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
