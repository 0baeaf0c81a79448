"""Logging utilities for Handscribe."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from handscribe.core.analyzer import AnalysisReport
from handscribe.domain import RenderedDocument

# Handlers installed by configure_logging, replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


@dataclass
class RunStats:
    """Statistics from a CLI run."""

    analyzed_count: int = 0
    generated_count: int = 0
    glyph_count: int = 0
    truncated_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    fallbacks: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate run duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("handscribe")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class PipelineLogger:
    """Logger for tracking analysis/generation runs and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = RunStats()

    def log_analysis(self, source: str, report: AnalysisReport) -> None:
        """Log a completed analysis."""
        self._logger.info(
            "Sample analyzed",
            source=source,
            lines=len(report.lines),
            characters=len(report.boxes),
            fallbacks=list(report.fallbacks),
            duration_ms=round(report.duration_ms, 2),
        )
        self._stats.analyzed_count += 1
        self._stats.fallbacks.extend(report.fallbacks)

    def log_generation(self, document: RenderedDocument) -> None:
        """Log a completed generation."""
        self._logger.info(
            "Document generated",
            glyphs=len(document.glyphs),
            status=document.status.value,
            seed=document.seed,
        )
        if document.is_skipped:
            self._stats.skipped_count += 1
            return
        self._stats.generated_count += 1
        self._stats.glyph_count += len(document.glyphs)
        if document.is_truncated:
            self._stats.truncated_count += 1

    def log_error(
        self,
        source: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a failed step."""
        self._logger.error(
            "Processing failed",
            source=source,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((source, str(error)))

    @property
    def stats(self) -> RunStats:
        """Get current run statistics."""
        return self._stats
