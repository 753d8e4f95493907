"""Temporary API keys for legacy registry servers.

Older registry servers refuse writes made with the master key. A push
session against them first asks the server for a pair of temporary keys,
uploads with the write key, and revokes both keys when the session ends.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from schemapush.errors import FatalCredentialError
from schemapush.registry.models import TemporaryKeys
from schemapush.registry.request import auth_headers

logger = logging.getLogger(__name__)

# Keys valid for every vendor
ALL_VENDORS = "*"


@contextmanager
def temporary_keys(
    client: httpx.Client,
    registry_root: str,
    master_key: uuid.UUID,
) -> Iterator[TemporaryKeys]:
    """Issue temporary keys for the duration of the ``with`` block.

    The keys are revoked exactly once when the block exits, whether it
    finishes normally or raises. Revocation problems are logged and do
    not replace the block's own outcome.

    Raises:
        FatalCredentialError: the keys could not be issued.
    """
    keys = create_keys(client, registry_root, master_key)
    try:
        yield keys
    finally:
        revoke_keys(client, registry_root, master_key, keys)


def create_keys(
    client: httpx.Client,
    registry_root: str,
    master_key: uuid.UUID,
) -> TemporaryKeys:
    """Ask the registry for a read/write key pair."""
    url = f"{registry_root}/api/auth/keygen"
    try:
        response = client.post(
            url,
            headers=auth_headers(master_key),
            json={"vendorPrefix": ALL_VENDORS},
        )
    except httpx.RequestError as e:
        raise FatalCredentialError(f"Cannot reach {url} to issue temporary keys", cause=e) from e

    if not response.is_success:
        raise FatalCredentialError(
            f"Registry refused to issue temporary keys ({response.status_code}): {response.text}"
        )

    try:
        data = response.json()
        keys = TemporaryKeys(read=uuid.UUID(data["read"]), write=uuid.UUID(data["write"]))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise FatalCredentialError(
            f"Unexpected keygen response from registry: {response.text}", cause=e
        ) from e

    logger.info("Issued temporary write key %s", keys.write)
    return keys


def revoke_keys(
    client: httpx.Client,
    registry_root: str,
    master_key: uuid.UUID,
    keys: TemporaryKeys,
) -> None:
    """Revoke both temporary keys, logging rather than raising on failure."""
    url = f"{registry_root}/api/auth/keygen"
    for key in (keys.read, keys.write):
        try:
            response = client.delete(
                url,
                params={"key": str(key)},
                headers=auth_headers(master_key),
            )
        except httpx.RequestError as e:
            logger.warning("Could not revoke temporary key %s: %s", key, e)
            continue

        if response.is_success:
            logger.info("Revoked temporary key %s", key)
        else:
            logger.warning(
                "Could not revoke temporary key %s (%s): %s",
                key,
                response.status_code,
                response.text,
            )
