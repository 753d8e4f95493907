"""Uploader — send a schema to the registry and classify the response."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from schemapush.registry.models import PushRequest, Result, ServerMessage, Status
from schemapush.registry.request import to_httpx

logger = logging.getLogger(__name__)


def post_schema(client: httpx.Client, request: PushRequest) -> Result:
    """Upload one schema and return its :class:`Result`.

    Network failures are folded into a ``FAILED`` result rather than
    raised, so one bad upload never stops the session.
    """
    http_request = to_httpx(request)
    logger.debug("POST %s", http_request.url)

    try:
        response = client.send(http_request)
    except httpx.RequestError as e:
        logger.debug("Upload to %s failed: %r", http_request.url, e)
        return Result.failed(str(e) or type(e).__name__)

    return get_upload_status(response)


def get_upload_status(response: httpx.Response) -> Result:
    """Classify a registry response.

    - non-2xx: ``FAILED``, raw body kept as the message
    - 2xx with a body that is not a server message: ``UNKNOWN``
    - 2xx whose message mentions "updated": ``UPDATED``
    - any other 2xx message: ``CREATED``

    The created/updated split relies on the server's wording, not on
    its status field.
    """
    body = response.text
    if not response.is_success:
        return Result(message=body, status=Status.FAILED)

    try:
        server_message = ServerMessage.model_validate_json(body)
    except ValidationError:
        return Result(message=body, status=Status.UNKNOWN)

    if "updated" in server_message.message:
        return Result(message=server_message, status=Status.UPDATED)
    return Result(message=server_message, status=Status.CREATED)
