from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from ipfs_relay.errors import FILE_MISSING, FILE_OPEN_FAILED, BadRequestError, InternalRelayError
from ipfs_relay.pinata import pin_file
from ipfs_relay.schemas import ErrorResponse, HealthResponse, UploadResponse

router = APIRouter()


async def _read_upload(file: UploadFile) -> bytes:
    await file.seek(0)
    return await file.read()


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload(request: Request) -> UploadResponse:
    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        raise BadRequestError(FILE_MISSING) from exc

    try:
        candidates = form.getlist("file")
        file = candidates[0] if candidates else None
        if not isinstance(file, UploadFile) or not file.filename:
            raise BadRequestError(FILE_MISSING)

        try:
            content = await _read_upload(file)
        except (OSError, ValueError) as exc:
            raise InternalRelayError(FILE_OPEN_FAILED) from exc

        ipfs_url = await pin_file(
            request.app.state.settings,
            file.filename,
            content,
            file.content_type,
            transport=request.app.state.pinata_transport,
        )
    finally:
        await form.close()

    return UploadResponse(ipfs_url=ipfs_url)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", service="ipfs-relay")


@router.get("/metrics", include_in_schema=False)
def metrics(request: Request) -> PlainTextResponse:
    if not request.app.state.settings.enable_metrics:
        return PlainTextResponse("metrics disabled\n", status_code=404)
    return PlainTextResponse(request.app.state.metrics.render_prometheus())
