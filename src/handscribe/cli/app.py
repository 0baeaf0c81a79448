"""CLI application entry point for handscribe.

This module provides the main CLI interface using Typer.
"""

import time
import traceback
from pathlib import Path
from typing import Annotated

import typer

from handscribe import __version__
from handscribe.cli.output import (
    console,
    print_analysis_details,
    print_error,
    print_generation_summary,
    print_header,
    print_image_info,
    print_step,
    print_style,
    print_success,
    print_warning,
)
from handscribe.config import (
    AnalysisConfig,
    CanvasConfig,
    Fidelity,
    HandscribeSettings,
    LoggingConfig,
    SynthesisConfig,
)
from handscribe.core import LayoutEngine, StyleAnalyzer
from handscribe.domain import default_style
from handscribe.exceptions import (
    DocumentWriteError,
    HandscribeError,
    ImageLoadError,
    StyleLoadError,
)
from handscribe.io import SVGWriter, load_image, load_style, save_style
from handscribe.utils import PipelineLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="handscribe",
    help="Extract a handwriting style from a sample image and write text in it.",
    add_completion=False,
    no_args_is_help=True,
)

LogFileOption = Annotated[
    Path | None,
    typer.Option("--log-file", help="Write detailed logs to file"),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Minimal console output"),
]
BasicOption = Annotated[
    bool,
    typer.Option("--basic", help="Use the basic (non-robust) algorithm variants"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Handscribe[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Handscribe command-line interface."""


def _fidelity(basic: bool) -> Fidelity:
    return Fidelity.BASIC if basic else Fidelity.ENHANCED


def _pipeline_logger(settings: HandscribeSettings, quiet: bool) -> PipelineLogger:
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )
    return PipelineLogger(logger)


@app.command()
def analyze(
    image: Annotated[
        Path,
        typer.Argument(help="Path to the handwriting sample image", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the style as JSON to this path"),
    ] = None,
    text: Annotated[
        str | None,
        typer.Option("--text", "-t", help="Text written in the sample (refines glyph width)"),
    ] = None,
    basic: BasicOption = False,
    allow_default: Annotated[
        bool,
        typer.Option(
            "--allow-default",
            help="Use the default style when the image cannot be decoded",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show segmentation details"),
    ] = False,
    quiet: QuietOption = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Extract the style of a handwriting sample image.

    Example:
        handscribe analyze sample.png -o style.json
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    settings = HandscribeSettings(
        analysis=AnalysisConfig(fidelity=_fidelity(basic)),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    pipeline = _pipeline_logger(settings, quiet)
    pipeline.stats.start_time = time.time()

    if not quiet:
        print_header(__version__)
        print_step("Loading image")

    try:
        try:
            raster = load_image(image)
        except ImageLoadError as e:
            if not allow_default:
                raise
            pipeline.log_error(str(image), e)
            print_warning(f"{e.reason}; using the default style")
            style = default_style(settings.analysis.fidelity)
        else:
            if not quiet:
                print_image_info(str(image), raster.width, raster.height)
                print_step("Analyzing")

            report = StyleAnalyzer(settings.analysis).analyze_detailed(raster, text)
            pipeline.log_analysis(str(image), report)
            style = report.descriptor
            if verbose:
                print_analysis_details(report)

        if not quiet:
            print_style(style)

        if output is not None:
            save_style(style, output)
            if not quiet:
                pipeline.stats.end_time = time.time()
                print_success(str(output), pipeline.stats.duration_seconds)

    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except HandscribeError as e:
        pipeline.log_error(str(image), e, traceback.format_exc())
        print_error(str(e))
        raise typer.Exit(code=1)
    except OSError as e:
        print_error(f"Could not write style: {e}")
        raise typer.Exit(code=1)


@app.command()
def generate(
    text: Annotated[
        str,
        typer.Argument(help="Text to write", show_default=False),
    ],
    style_path: Annotated[
        Path | None,
        typer.Option("--style", "-s", help="Style JSON produced by 'analyze'"),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output SVG path"),
    ] = Path("handwriting.svg"),
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for reproducible output"),
    ] = None,
    width: Annotated[
        float,
        typer.Option("--width", help="Canvas width", min=1.0),
    ] = 1200.0,
    height: Annotated[
        float,
        typer.Option("--height", help="Canvas height", min=1.0),
    ] = 1600.0,
    margin: Annotated[
        float,
        typer.Option("--margin", help="Margin on every side", min=0.0),
    ] = 80.0,
    line_height: Annotated[
        float | None,
        typer.Option("--line-height", help="Base line height (default: 80)", min=1.0),
    ] = 80.0,
    basic: BasicOption = False,
    quiet: QuietOption = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Write text in a handwriting style and save it as SVG.

    Example:
        handscribe generate "Dear diary" --style style.json --seed 7 -o diary.svg
    """
    fidelity = _fidelity(basic)
    try:
        canvas = CanvasConfig(
            width=width,
            height=height,
            margin_left=margin,
            margin_top=margin,
            margin_right=margin,
            margin_bottom=margin,
            line_height=line_height,
        )
    except ValueError as e:
        print_error("Invalid canvas", details=str(e))
        raise typer.Exit(code=1)

    settings = HandscribeSettings(
        synthesis=SynthesisConfig(fidelity=fidelity, seed=seed, canvas=canvas),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    pipeline = _pipeline_logger(settings, quiet)
    pipeline.stats.start_time = time.time()

    if not quiet:
        print_header(__version__)

    try:
        if style_path is not None:
            style = load_style(style_path)
        else:
            style = default_style(fidelity)

        if not quiet:
            print_step("Generating")

        document = LayoutEngine(settings.synthesis).render(style, text)
        pipeline.log_generation(document)

        if document.is_skipped:
            if not quiet:
                print_warning("Nothing to write")
            raise typer.Exit(code=0)

        if not quiet:
            print_generation_summary(document)
        if document.is_truncated and not quiet:
            print_warning("Text did not fit on the page and was truncated")

        SVGWriter().write(document, output)

        pipeline.stats.end_time = time.time()
        if not quiet:
            print_success(str(output), pipeline.stats.duration_seconds)

    except StyleLoadError as e:
        print_error(f"Could not load style: {e.reason}")
        raise typer.Exit(code=1)
    except DocumentWriteError as e:
        print_error(f"Could not write document: {e.reason}")
        raise typer.Exit(code=1)
    except HandscribeError as e:
        pipeline.log_error(text, e, traceback.format_exc())
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("default-style")
def default_style_command(
    basic: BasicOption = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the style as JSON to this path"),
    ] = None,
) -> None:
    """Show the style used when no valid sample is available."""
    style = default_style(_fidelity(basic))
    print_style(style, title="Basic default style" if basic else "Enhanced default style")
    if output is not None:
        try:
            save_style(style, output)
        except OSError as e:
            print_error(f"Could not write style: {e}")
            raise typer.Exit(code=1)
        console.print(f"  {output}")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
