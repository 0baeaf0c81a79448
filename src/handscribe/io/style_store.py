"""JSON persistence for style descriptors."""

import json
from pathlib import Path

from handscribe.domain import StyleDescriptor
from handscribe.exceptions import StyleError, StyleLoadError


def save_style(style: StyleDescriptor, path: Path | str) -> Path:
    """Write a style descriptor as JSON.

    Args:
        style: Descriptor to save
        path: Destination file

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(style.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


def load_style(path: Path | str) -> StyleDescriptor:
    """Read a style descriptor from JSON.

    Args:
        path: File produced by save_style()

    Returns:
        StyleDescriptor

    Raises:
        StyleLoadError: If the file is missing, not JSON or holds invalid values
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise StyleLoadError(str(path), "file not found") from e
    except (OSError, json.JSONDecodeError) as e:
        raise StyleLoadError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise StyleLoadError(str(path), "expected a JSON object")

    try:
        return StyleDescriptor.from_dict(data)
    except (StyleError, TypeError) as e:
        raise StyleLoadError(str(path), str(e)) from e
