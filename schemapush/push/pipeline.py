"""Discover, upload, report and total a directory of schemas.

Files are handled strictly one at a time: each is loaded, uploaded,
reported and counted before the next one is read, so output order
matches discovery order.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from pathlib import Path

import httpx

from schemapush.config import DEFAULT_TIMEOUT
from schemapush.envelope.loader import SchemaItem, stream_schemas
from schemapush.push.reporter import Reporter
from schemapush.registry.keys import temporary_keys
from schemapush.registry.models import ParseError, Result, Total
from schemapush.registry.request import build_push_request
from schemapush.registry.uploader import post_schema

logger = logging.getLogger(__name__)


def process(
    input_dir: str | Path,
    registry_root: str,
    api_key: uuid.UUID,
    is_public: bool,
    legacy: bool,
    *,
    client: httpx.Client | None = None,
    reporter: Reporter | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """Upload every schema under *input_dir* and return the exit code.

    Args:
        input_dir: Directory to search for schema files.
        registry_root: Registry base URL, without ``/api``.
        api_key: Key with write permissions, or the master key when
            *legacy* is set.
        is_public: Whether uploaded schemas are publicly readable.
        legacy: Issue temporary keys first, for servers that need them.
        client: HTTP client to use. A new one is created (and closed)
            when omitted.
        reporter: Output sink. Defaults to stdout.
        timeout: Per-request timeout in seconds for an owned client.

    Returns:
        0 when every file was created or updated, 1 otherwise.

    Raises:
        FatalDiscoveryError: *input_dir* cannot be read.
        FatalCredentialError: temporary keys could not be issued.
    """
    reporter = reporter or Reporter()
    schemas = stream_schemas(input_dir)
    total = Total()

    http = nullcontext(client) if client is not None else httpx.Client(timeout=timeout)
    with http as http_client:
        with _write_key(http_client, registry_root, api_key, legacy) as key:
            for item in schemas:
                result = push_schema(http_client, registry_root, is_public, key, item)
                reporter.report(result)
                total = total.add(result)

    logger.debug("Push finished: %s", total)
    reporter.summary(total)
    return total.exit_code


def push_schema(
    client: httpx.Client,
    registry_root: str,
    is_public: bool,
    api_key: uuid.UUID,
    item: SchemaItem,
) -> Result:
    """Upload a single loaded file, or report why it could not be loaded."""
    if isinstance(item, ParseError):
        return Result.failed(item.as_string())

    request = build_push_request(registry_root, is_public, item.content, api_key)
    return post_schema(client, request)


@contextmanager
def _write_key(
    client: httpx.Client,
    registry_root: str,
    api_key: uuid.UUID,
    legacy: bool,
) -> Iterator[uuid.UUID]:
    if not legacy:
        yield api_key
        return

    with temporary_keys(client, registry_root, api_key) as keys:
        yield keys.write
