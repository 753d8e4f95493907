"""File scanner — discover schema files under an input directory."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

# Directories to always skip
SKIP_DIRS = {
    "__pycache__", "node_modules", "venv", "dist", "build", "target",
}

# Registry layout: schemas/<vendor>/<name>/jsonschema/<M-R-A>, no extension
SCHEMA_FORMAT_DIR = "jsonschema"


def scan_schema_files(root: Path) -> Iterator[Path]:
    """Lazily yield candidate schema files under *root*.

    Order is whatever the filesystem enumeration returns. Errors raised
    while walking (e.g. permission denied) propagate to the caller.
    """
    for item in root.rglob("*"):
        if item.is_file() and _should_include(item.relative_to(root)):
            yield item


def _should_include(relative: Path) -> bool:
    """Check if a path relative to the scan root is a schema candidate."""
    for part in relative.parts:
        if part.startswith(".") or part in SKIP_DIRS:
            return False

    return is_schema_file(relative)


def is_schema_file(path: Path) -> bool:
    """Return True for ``*.json`` files and files inside a ``jsonschema`` directory."""
    return path.suffix == ".json" or path.parent.name == SCHEMA_FORMAT_DIR
