"""Command-line interface for handscribe.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Analyze a sample image into a style JSON file
- Generate SVG handwriting from text and a style
- Print the built-in default styles
"""

from handscribe.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
