"""Upload request construction."""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from schemapush.envelope.validator import schema_path
from schemapush.registry.models import PushRequest


def build_push_request(
    registry_root: str,
    is_public: bool,
    content: dict[str, Any],
    api_key: uuid.UUID,
) -> PushRequest:
    """Bundle a schema with its destination, visibility and key."""
    return PushRequest(
        registry_root=registry_root,
        is_public=is_public,
        content=content,
        api_key=api_key,
    )


def schema_url(request: PushRequest) -> str:
    return f"{request.registry_root}/api/schemas/{schema_path(request.content)}"


def auth_headers(api_key: uuid.UUID) -> dict[str, str]:
    """Headers authenticating a call with *api_key*.

    Older registry servers only read the ``apikey`` header.
    """
    return {
        "Authorization": f"Bearer {api_key}",
        "apikey": str(api_key),
    }


def to_httpx(request: PushRequest) -> httpx.Request:
    """Render a :class:`PushRequest` as ``POST /api/schemas/<path>``."""
    return httpx.Request(
        "POST",
        schema_url(request),
        params={"isPublic": "true" if request.is_public else "false"},
        headers=auth_headers(request.api_key),
        json=request.content,
    )
