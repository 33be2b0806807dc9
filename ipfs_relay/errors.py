import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ipfs_relay.schemas import ErrorResponse

logger = logging.getLogger(__name__)

FILE_MISSING = "File missing"
FILE_OPEN_FAILED = "File open failed"
INVALID_PROVIDER_RESPONSE = "Invalid response from pinning provider"


class RelayError(Exception):
    """Base class for errors that end a single upload request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class BadRequestError(RelayError):
    """The caller's form body has no usable file field."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalRelayError(RelayError):
    """Local I/O or parsing failed."""


class UpstreamError(RelayError):
    """The pinning provider failed or answered with a non-200 status."""


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(
            "upload_failed: %s",
            exc.detail,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.detail).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
