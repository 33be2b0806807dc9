"""Pinata pinning client used by the upload relay."""

import logging

import httpx
from pydantic import ValidationError

from ipfs_relay.config import Settings
from ipfs_relay.errors import INVALID_PROVIDER_RESPONSE, InternalRelayError, UpstreamError
from ipfs_relay.multipart import encode_file_field
from ipfs_relay.schemas import PinataPinResponse

logger = logging.getLogger(__name__)


def gateway_url(gateway: str, cid: str) -> str:
    return f"{gateway.rstrip('/')}/{cid}"


def pin_headers(settings: Settings) -> dict[str, str]:
    return {
        "pinata_api_key": settings.pinata_api_key,
        "pinata_secret_api_key": settings.pinata_secret_api_key,
    }


async def pin_file(
    settings: Settings,
    filename: str,
    content: bytes,
    content_type: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Pin one file and return its public gateway URL.

    The file is sent as a fresh multipart body under the ``file`` field with
    the caller's filename unchanged. A single attempt is made.

    Raises:
        UpstreamError: Pinata was unreachable or answered with a non-200 status.
        InternalRelayError: Pinata answered 200 with a body that is not a pin result.
    """
    body, body_type = encode_file_field("file", filename, content, content_type)
    try:
        async with httpx.AsyncClient(timeout=settings.pinata_timeout_s, transport=transport) as client:
            response = await client.post(
                settings.pinata_pin_url,
                content=body,
                headers={**pin_headers(settings), "Content-Type": body_type},
            )
    except httpx.HTTPError as exc:
        raise UpstreamError(f"pinata request failed: {exc}") from exc

    if response.status_code != 200:
        logger.warning(
            "pinata returned status %s",
            response.status_code,
            extra={"status_code": response.status_code, "upload_name": filename},
        )
        raise UpstreamError(f"pinata error: {response.text}")

    try:
        pinned = PinataPinResponse.model_validate_json(response.content)
    except ValidationError as exc:
        raise InternalRelayError(INVALID_PROVIDER_RESPONSE) from exc

    logger.info("file pinned", extra={"upload_name": filename, "cid": pinned.ipfs_hash})
    return gateway_url(settings.ipfs_gateway_url, pinned.ipfs_hash)
