"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from handscribe.core import AnalysisReport
from handscribe.domain import RenderedDocument, StyleDescriptor

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Handscribe[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_image_info(image_path: str, width: int, height: int) -> None:
    """Print sample image information."""
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(image_path)
    console.print(line)
    console.print(f"  {width} x {height} px")


def print_style(style: StyleDescriptor, title: str = "Style") -> None:
    """Print a style descriptor as a table.

    Args:
        style: Descriptor to show
        title: Table title
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Parameter")
    table.add_column("Value", justify="right")

    for name, value in style.to_dict().items():
        if isinstance(value, float):
            value = f"{value:.3f}"
        table.add_row(name, str(value))
    console.print(table)


def print_analysis_details(report: AnalysisReport) -> None:
    """Print segmentation results and fallbacks."""
    console.print(
        f"  {len(report.lines)} lines {SYM_DOT} {len(report.boxes)} characters "
        f"{SYM_DOT} {report.edge_count:,} edge pixels"
    )
    if report.fallbacks:
        console.print(f"  [yellow]fallbacks:[/yellow] {', '.join(report.fallbacks)}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_generation_summary(document: RenderedDocument) -> None:
    """Print glyph count, status and seed of a generated document."""
    status_style = "yellow" if document.is_truncated else "green"
    console.print(
        f"  {len(document.glyphs)} glyphs {SYM_DOT} "
        f"[{status_style}]{document.status.value}[/{status_style}] {SYM_DOT} seed {document.seed}"
    )


def print_success(output_path: str, total_time_s: float) -> None:
    """Print success message.

    Args:
        output_path: Path to output file
        total_time_s: Total time in seconds
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")
    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)


def print_warning(message: str) -> None:
    """Print a non-fatal warning."""
    console.print(f"\n[bold yellow]{SYM_DOT} Warning:[/bold yellow] {message}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
