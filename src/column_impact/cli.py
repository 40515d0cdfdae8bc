"""Command-line interface for the column impact analyzer."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from .analyzers import ColumnImpactAnalyzer, AnalysisResult
from .config import AnalysisConfiguration
from .exceptions import ColumnImpactError, ReportGenerationError

# Set up rich error handling
install()
console = Console()


def cli():
    """Column Impact - Find the code affected by renaming or removing a database column

    USAGE:
        column-impact /path/to/project user_email                 # Analyze and write an Excel report
        column-impact /path/to/project user_email report.xlsx     # Choose the report file
        column-impact /path/to/project user_email --no-report     # Console output only
        column-impact /path/to/project user_email --format json   # JSON output
    """
    analyze()


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@click.command()
@click.argument('project_path', type=click.Path(exists=True, file_okay=False))
@click.argument('column_name')
@click.argument('output_file', required=False, type=click.Path())
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Console output format')
@click.option('--report/--no-report', default=True, help='Write the Excel report (default: on)')
@click.option('--workers', '-w', type=click.IntRange(min=1), default=1,
              help='Threads used to parse and scan files')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def analyze(project_path, column_name, output_file, output_format, report, workers, verbose):
    """Trace which repositories, entities, services and controllers use COLUMN_NAME.

    Classes that reference the column directly are reported with every usage
    found. Services that use an impacted repository, and controllers that use
    an impacted service, are reported as indirectly impacted.
    """
    _configure_logging(verbose)
    analyzer = ColumnImpactAnalyzer(AnalysisConfiguration(max_workers=workers))
    report_failed = False

    try:
        if report:
            output_file = output_file or ColumnImpactAnalyzer.default_output_file_name(column_name)
            if output_format == 'json':
                result = analyzer.analyze_and_report(project_path, column_name, output_file)
            else:
                with console.status(f"[bold green]🔍 Analyzing column {column_name}...[/bold green]"):
                    result = analyzer.analyze_and_report(project_path, column_name, output_file)
        else:
            result = analyzer.analyze(project_path, column_name)
    except ReportGenerationError as e:
        console.print(f"[red]❌ Error:[/red] {str(e)}")
        if e.result is None:
            raise click.Abort()
        # Analysis finished; only the report write failed
        result = e.result
        report_failed = True
    except ColumnImpactError as e:
        console.print(f"[red]❌ Error:[/red] {str(e)}")
        raise click.Abort()

    if output_format == 'json':
        console.print_json(json.dumps(result.to_dict(), default=str))
    else:
        _display_text_results(result)
        if report and not report_failed:
            console.print(f"📄 Excel report generated: {Path(output_file)}")

    if report_failed:
        raise click.Abort()
    return result


def _unit_table(title: str, units, show_routes: bool = False) -> Table:
    table = Table(title=title)
    table.add_column("Class", style="cyan")
    table.add_column("Package", style="magenta")
    table.add_column("Impact Reason", style="yellow")
    table.add_column("Usages", justify="right")
    if show_routes:
        table.add_column("Endpoints", style="green")

    for unit in units:
        row = [unit.name, unit.package_path, unit.impact_reason or "", str(unit.usage_count)]
        if show_routes:
            row.append("\n".join(unit.routes) or "-")
        table.add_row(*row)
    return table


def _display_text_results(result: AnalysisResult):
    """Display results in text format using Rich."""
    console.print(f"\n🎯 [bold]Code Impact Analysis Complete[/bold]")
    console.print("=" * 60)
    console.print(f"• Column analyzed: {result.column_name}")
    console.print(f"• Project path: {result.project_path}")
    console.print(f"• Analysis time: {result.elapsed_millis} ms")

    console.print(f"\n📊 [bold]Impact Results[/bold]")
    console.print(f"• Repositories: {len(result.repositories)}")
    console.print(f"• Entities: {len(result.entities)}")
    console.print(f"• Services: {len(result.services)}")
    console.print(f"• Controllers: {len(result.controllers)}")
    console.print(f"• Total usages: {result.total_usages}")

    if result.repositories:
        console.print(_unit_table("📂 Impacted Repositories", result.repositories))
    if result.entities:
        console.print(_unit_table("📋 Impacted Entities", result.entities))
    if result.services:
        console.print(_unit_table("⚙️ Impacted Services", result.services))
    if result.controllers:
        console.print(_unit_table("🌐 Impacted Controllers (APIs)", result.controllers, show_routes=True))

    chains = [chain for chain in result.impact_chains() if len(chain) > 1]
    if chains:
        console.print(f"\n🔗 [bold]Propagation Paths[/bold]")
        for chain in chains:
            console.print(f"  - {' → '.join(chain)}")

    console.print(f"\n✅ Analysis complete!")


if __name__ == '__main__':
    cli()
