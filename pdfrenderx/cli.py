"""
Command-line interface for pdfrenderx.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, TextColumn, BarColumn, TaskProgressColumn, TimeElapsedColumn
from rich.table import Table

from pdfrenderx import __version__
from pdfrenderx.combiners import find_ghostscript
from pdfrenderx.converter import convert_document
from pdfrenderx.exceptions import PDFRenderXException
from pdfrenderx.paper import PAPER_SIZES
from pdfrenderx.settings import COMBINERS, RenderSettings
from pdfrenderx.types import ConversionRequest, Margins
from pdfrenderx.utils import format_file_size

console = Console()


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    pdfrenderx - Print HTML documents to PDF with headless Chromium.
    """
    pass


@cli.command(name="convert")
@click.argument('input_html', type=str)
@click.argument('output_pdf', type=click.Path(dir_okay=False))
@click.option('--page-size', '-s', default='a4', help='Named paper size (see paper-sizes)', type=str)
@click.option('--page-width', default=0.0, help='Page width in millimetres', type=float)
@click.option('--page-height', default=0.0, help='Page height in millimetres', type=float)
@click.option('--margin-top', default=0.0, help='Top margin in millimetres', type=float)
@click.option('--margin-bottom', default=0.0, help='Bottom margin in millimetres', type=float)
@click.option('--margin-left', default=0.0, help='Left margin in millimetres', type=float)
@click.option('--margin-right', default=0.0, help='Right margin in millimetres', type=float)
@click.option('--landscape', is_flag=True, help='Print in landscape orientation')
@click.option('--first-page', default=0, help='First page to print (1-indexed)', type=int)
@click.option('--last-page', default=None, help='Last page to print (1-indexed, inclusive)', type=int)
@click.option('--reduce-memory-use', is_flag=True, help='Render one page at a time and combine afterwards')
@click.option('--report-memory-usage', is_flag=True, help='Log timings and memory use')
@click.option(
    '--combiner',
    type=click.Choice(list(COMBINERS), case_sensitive=False),
    default=None,
    help='Tool used to combine pages in reduce-memory mode'
)
@click.option('--ghostscript', default=None, help='Path to the Ghostscript executable', type=click.Path())
@click.option('--debug', is_flag=True, help='Show browser console output and keep page files on failure')
@click.option('--quiet', '-q', is_flag=True, help='Do not show progress')
def convert(input_html, output_pdf, page_size, page_width, page_height, margin_top, margin_bottom,
            margin_left, margin_right, landscape, first_page, last_page, reduce_memory_use,
            report_memory_usage, combiner, ghostscript, debug, quiet):
    """
    Convert an HTML file or URL into a PDF.

    Examples:

        pdfrenderx convert book.html book.pdf

        pdfrenderx convert book.html book.pdf -s a5 --margin-top 10 --margin-bottom 10

        pdfrenderx convert big-book.html book.pdf --reduce-memory-use
    """
    _configure_logging(verbose=report_memory_usage, debug=debug)
    try:
        settings = RenderSettings.from_env(combiner=combiner, ghostscript_path=ghostscript)
        request = ConversionRequest(
            input_path=input_html,
            output_path=os.path.abspath(output_pdf),
            page_size=page_size,
            page_width_mm=page_width,
            page_height_mm=page_height,
            margins=Margins(top=margin_top, bottom=margin_bottom, left=margin_left, right=margin_right),
            landscape=landscape,
            first_page=first_page,
            last_page=last_page,
            reduce_memory_use=reduce_memory_use,
            report_memory_usage=report_memory_usage,
            debug=debug,
        )

        if quiet:
            outcome = convert_document(request, settings=settings)
        else:
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console
            ) as progress:
                task = progress.add_task("Loading Html...", total=100)

                def update_status(status):
                    progress.update(task, completed=status.percentage, description=status.status_label)

                outcome = convert_document(request, settings=settings, on_status=update_status)

        if not outcome.success:
            console.print(f"\n[bold red]✗ Error:[/bold red] {outcome.error}")
            sys.exit(1)

        if not quiet:
            size = os.path.getsize(outcome.output_path)
            console.print(f"\n[bold green]✓ Successfully created:[/bold green] {outcome.output_path}")
            console.print(f"[dim]Output size: {format_file_size(size)}[/dim]")
            if outcome.pages:
                console.print(f"[dim]Pages combined: {outcome.pages}[/dim]")
            console.print()

    except PDFRenderXException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


@cli.command(name="paper-sizes")
def paper_sizes():
    """
    List the named paper sizes understood by --page-size.

    Example:

        pdfrenderx paper-sizes
    """
    table = Table(title="Paper Sizes")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Width (mm)", style="green", justify="right")
    table.add_column("Height (mm)", style="green", justify="right")

    for size in PAPER_SIZES.values():
        table.add_row(size.name, f"{size.width_mm:g}", f"{size.height_mm:g}")

    console.print()
    console.print(table)
    console.print()


@cli.command(name="doctor")
def doctor():
    """
    Show which combiner executables are available.

    Example:

        pdfrenderx doctor
    """
    try:
        settings = RenderSettings.from_env()
    except PDFRenderXException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
    executable = settings.ghostscript_path or find_ghostscript()

    table = Table(title="pdfrenderx Environment", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Combiner", settings.combiner)
    table.add_row("Ghostscript", executable or "[red]not found[/red]")
    table.add_row("Combiner timeout", f"{settings.combiner_timeout:g}s")

    console.print()
    console.print(table)
    console.print()

    if settings.combiner == "ghostscript" and not executable:
        sys.exit(1)


if __name__ == '__main__':
    cli()
