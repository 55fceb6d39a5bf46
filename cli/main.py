# cli/main.py
# ============================================================
# pagezip — Command Line Interface
# ============================================================
# Typer-based CLI around the PdfConverter. Shows a live progress
# bar while pages are rendered and a summary table at the end.
#
# Usage:
#   pagezip convert report.pdf
#   pagezip convert report.pdf --output out/ --scale 3 --previews out/previews
#   pagezip info report.pdf
#   pagezip --verbose convert report.pdf
#
#   python -m cli.main convert report.pdf
# ============================================================

import asyncio
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from config.settings import settings
from pagezip.document.decoder import PdfDocument
from pagezip.errors import ConversionCancelled, ConversionError
from pagezip.pipeline.cancel import CancelToken
from pagezip.pipeline.orchestrator import (
    ConversionResult,
    PdfConverter,
    archive_name,
    base_name,
    page_entry_name,
)
from pagezip.utils.logger import set_level

# ============================================================
# CLI App Setup
# ============================================================

app = typer.Typer(
    name="pagezip",
    help=(
        "PDF → PNG pages → ZIP archive.\n\n"
        "Renders every page of a PDF at high resolution and packs the\n"
        "images into one archive, with thumbnail previews."
    ),
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

PAGE_ERROR_POLICIES = ("skip", "abort")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log every page at DEBUG level.",
    ),
):
    if verbose:
        set_level("DEBUG")


def _read_pdf(input_path: str) -> Path:
    """Validate the input path; exit with code 1 if it is unusable."""
    input_file = Path(input_path)
    if not input_file.is_file():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(code=1)
    if input_file.suffix.lower() != ".pdf":
        console.print(
            f"[red]Error:[/red] Unsupported file format: '{input_file.suffix}'. Only PDF is accepted."
        )
        raise typer.Exit(code=1)
    return input_file


def _check_scale(scale: Optional[float]) -> None:
    """Exit with code 1 unless `scale` is unset or positive."""
    if scale is not None and scale <= 0:
        console.print(f"[red]Error:[/red] Scale must be positive, got {scale}")
        raise typer.Exit(code=1)


@contextmanager
def _cancel_on_interrupt(token: CancelToken):
    """
    Route Ctrl-C to `token` while the block runs.

    The first interrupt lets the current page finish and stops before
    the next one. A second interrupt raises KeyboardInterrupt as usual.
    """
    def handler(signum, frame):
        if token.cancelled:
            raise KeyboardInterrupt
        token.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


# ============================================================
# Commands
# ============================================================

@app.command()
def convert(
    input_path: str = typer.Argument(
        ...,
        help="Path to the input PDF.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output", "-o",
        help="Directory to write the archive into. Default: settings.output_dir.",
    ),
    scale: Optional[float] = typer.Option(
        None,
        "--scale", "-s",
        help="Render scale relative to the page size (default 2.0).",
    ),
    on_page_error: Optional[str] = typer.Option(
        None,
        "--on-page-error",
        help="What to do when a page encodes to no data: skip | abort.",
    ),
    previews: Optional[str] = typer.Option(
        None,
        "--previews", "-p",
        help="Also write the thumbnail previews into this directory.",
    ),
):
    """
    Convert a PDF into a ZIP of PNG page images.

    Examples:
        convert report.pdf
        convert report.pdf --output out/ --scale 3
        convert report.pdf --on-page-error abort --previews out/thumbs
    """
    input_file = _read_pdf(input_path)

    if on_page_error is not None and on_page_error not in PAGE_ERROR_POLICIES:
        console.print(
            f"[red]Error:[/red] Unknown policy '{on_page_error}'. "
            f"Available: {', '.join(PAGE_ERROR_POLICIES)}"
        )
        raise typer.Exit(code=1)
    _check_scale(scale)

    overrides = {}
    if scale is not None:
        overrides["render_scale"] = scale
    if on_page_error is not None:
        overrides["page_error_policy"] = on_page_error
    run_settings = settings.model_copy(update=overrides)

    output_dir = Path(output or run_settings.output_dir)

    console.print(Panel(
        f"[bold blue]PDF → PNG[/bold blue] — Page Archive\n"
        f"Input:  {input_path}\n"
        f"Scale:  {run_settings.render_scale}x\n"
        f"Output: {output_dir}",
        title="pagezip",
        border_style="blue",
    ))

    converter = PdfConverter(settings=run_settings)
    cancel_token = CancelToken()

    with Progress(
        TextColumn("[bold blue]Rendering"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("render", total=100)

        def on_progress(percent: int) -> None:
            progress.update(task, completed=percent)

        try:
            with _cancel_on_interrupt(cancel_token):
                result = asyncio.run(
                    converter.convert(
                        input_file.read_bytes(),
                        input_file.name,
                        on_progress=on_progress,
                        cancel_token=cancel_token,
                    )
                )
        except (ConversionCancelled, KeyboardInterrupt):
            console.print("\n[yellow]Conversion interrupted.[/yellow]")
            raise typer.Exit(code=130)
        except ConversionError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1)

    saved = result.save(output_dir)
    if previews:
        result.save_previews(previews)

    _print_results_table(result)
    console.print(f"\n[bold green]Archive written:[/bold green] {saved}")

    if result.page_count == 0:
        console.print("[yellow]The document has no pages; the archive is empty.[/yellow]")


@app.command()
def info(
    input_path: str = typer.Argument(
        ...,
        help="Path to the input PDF.",
    ),
    scale: Optional[float] = typer.Option(
        None,
        "--scale", "-s",
        help="Render scale used to compute pixel sizes (default 2.0).",
    ),
):
    """
    Show page count, page sizes and the archive name a conversion would produce.
    """
    input_file = _read_pdf(input_path)
    _check_scale(scale)
    render_scale = scale if scale is not None else settings.render_scale

    try:
        document = PdfDocument.from_bytes(
            input_file.read_bytes(), poppler_path=settings.poppler_path
        )
    except ConversionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    base = base_name(input_file.name)

    table = Table(title=f"{input_file.name} — {document.page_count} pages")
    table.add_column("Page", justify="center")
    table.add_column("Size (pt)", justify="right")
    table.add_column(f"Pixels @ {render_scale}x", justify="right")
    table.add_column("Archive entry")

    for number in range(1, document.page_count + 1):
        page = document.get_page(number)
        viewport = page.get_viewport(render_scale)
        table.add_row(
            str(number),
            f"{page.width:.0f} x {page.height:.0f}",
            f"{viewport.width} x {viewport.height}",
            page_entry_name(base, number),
        )

    console.print(table)
    console.print(f"Archive name: [bold]{archive_name(base, settings.archive_suffix)}[/bold]")


# ============================================================
# Helper Functions
# ============================================================

def _print_results_table(result: ConversionResult) -> None:
    """Print a summary table of the converted pages."""
    table = Table(title="Conversion Summary")
    table.add_column("Page", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Thumbnail", justify="right")

    previews = {p.page_number: p for p in result.previews}
    for number in range(1, result.page_count + 1):
        preview = previews.get(number)
        if preview is not None:
            table.add_row(str(number), "[green]ok[/green]", f"{len(preview.thumbnail)} B")
        else:
            table.add_row(str(number), "[yellow]skipped[/yellow]", "-")

    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{len(result.entry_names)}/{result.page_count}[/bold]",
        f"[bold]{len(result.archive)} B | {result.latency_ms:.0f}ms[/bold]",
    )

    console.print(table)


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    app()
