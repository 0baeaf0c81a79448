"""Utility functions for handscribe.

This module provides:

- Logging setup and configuration
- Run statistics for the CLI
"""

from handscribe.utils.logging import (
    PipelineLogger,
    RunStats,
    configure_logging,
)

__all__ = [
    "PipelineLogger",
    "RunStats",
    "configure_logging",
]
