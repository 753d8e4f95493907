"""Schema loader — stream parsed schema files from an input directory."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterator
from pathlib import Path
from typing import Union

from schemapush.envelope.validator import validate_envelope
from schemapush.errors import FatalDiscoveryError
from schemapush.registry.models import ParseError, SchemaFile
from schemapush.utils.file_scanner import scan_schema_files

logger = logging.getLogger(__name__)

SchemaItem = Union[SchemaFile, ParseError]


def stream_schemas(root: str | Path) -> Iterator[SchemaItem]:
    """Return a lazy stream of parsed schema files found under *root*.

    The directory is checked immediately so a missing input fails before
    anything else happens. A file that cannot be parsed yields a
    :class:`ParseError` and the stream carries on.

    Raises:
        FatalDiscoveryError: *root* is not a readable directory, or the
            traversal fails part-way through.
    """
    root = Path(root)
    if not root.exists():
        raise FatalDiscoveryError(f"Input directory does not exist: {root}")
    if not root.is_dir():
        raise FatalDiscoveryError(f"Input path is not a directory: {root}")
    return _iter_schemas(root)


def _iter_schemas(root: Path) -> Iterator[SchemaItem]:
    files = scan_schema_files(root)
    while True:
        try:
            path = next(files)
        except StopIteration:
            return
        except OSError as e:
            raise FatalDiscoveryError(f"Cannot read input directory {root}", cause=e) from e
        yield load_schema(path)


def load_schema(path: Path) -> SchemaItem:
    """Read and validate one file as a self-describing schema."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ParseError(path, f"cannot read file ({e})")

    try:
        data = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as e:
        return ParseError(path, f"invalid JSON ({e})")

    issues = validate_envelope(data)
    if issues:
        return ParseError(path, "not a self-describing schema: " + "; ".join(issues))

    logger.debug("Loaded schema %s", path)
    return SchemaFile(path=path, content=data)


def _reject_constant(name: str):
    # NaN and Infinity are accepted by the json module but are not JSON
    raise ValueError(f"{name} is not a valid JSON value")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"{literal} is out of range for a JSON number")
    return value
