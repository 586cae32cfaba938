"""
Themes API: upload, public listing and moderation endpoints.
Every route requires the static bearer token.
"""
import logging
import shutil
from pathlib import Path
from typing import Annotated, BinaryIO

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile

from themebot.api.deps import GatewayDep, IngestorDep, SettingsDep, require_api_token
from themebot.core.ids import generate_time_based_id
from themebot.models.mapping import update_to_columns
from themebot.schemas.theme import ApprovalState, ThemeMetadata, ThemeUpdate
from themebot.services.errors import ThemeGatewayError

LOG = logging.getLogger(__name__)
THEMES = "[THEMES]"

router = APIRouter(
    prefix="/themes",
    tags=["themes"],
    dependencies=[Depends(require_api_token)],
)


def _store_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})


def _save_upload(source: BinaryIO, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    source.seek(0)
    with destination.open("wb") as out:
        shutil.copyfileobj(source, out)


@router.post("/upload")
async def upload_theme(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: SettingsDep,
    ingestor: IngestorDep,
):
    """
    Store a .zip theme under a time-ordered name and answer immediately.
    Ingestion runs afterwards as a background task; its outcome is only logged.
    The multipart form is read here so a `file` field without a file is a 400, not a 422.
    """
    async with request.form() as form:
        upload = form.get("file")
        if not isinstance(upload, UploadFile) or not upload.filename:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "No file uploaded"})

        original_name = upload.filename
        extension = Path(original_name).suffix
        if extension != ".zip":
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"message": "Only .zip files are allowed"},
            )

        stored_path = settings.upload_dir / f"{generate_time_based_id()}{extension}"
        await run_in_threadpool(_save_upload, upload.file, stored_path)
    LOG.info("%s upload stored original=%s as=%s", THEMES, original_name, stored_path.name)

    background_tasks.add_task(ingestor, stored_path, original_name)
    return {"message": "File uploaded successfully"}


@router.get("", response_model=list[ThemeMetadata])
async def list_accepted_themes(
    settings: SettingsDep,
    gateway: GatewayDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Accepted themes only, paginated with limit/offset (limit capped by configuration)."""
    page_size = min(limit or settings.page_limit, settings.max_page_limit)
    try:
        return await gateway.list_themes(page_size, offset, status=ApprovalState.ACCEPTED)
    except ThemeGatewayError:
        return _store_error("Could not list themes")


@router.get("/status/{file_id}")
async def theme_status(file_id: str, gateway: GatewayDep):
    try:
        state = await gateway.get_status(file_id)
    except ThemeGatewayError:
        return _store_error("Could not read theme status")
    if state is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Theme not found"})
    return {"status": state.value}


@router.get("/{file_id}", response_model=ThemeMetadata | None)
async def get_theme(file_id: str, gateway: GatewayDep):
    """Theme record, or null when the id is unknown."""
    try:
        return await gateway.get_by_file_id(file_id)
    except ThemeGatewayError:
        return _store_error("Could not read theme")


@router.delete("/{file_id}")
async def delete_theme(file_id: str, gateway: GatewayDep, message_id: str | None = None):
    """
    Delete a theme. With ?message_id=... the Discord announcement is removed too
    (in background). An unknown id still answers 200.
    """
    try:
        await gateway.delete_by_file_id(file_id, message_id=message_id)
    except ThemeGatewayError:
        return _store_error("Could not delete theme")
    return Response(status_code=status.HTTP_200_OK)


@router.put("/{file_id}")
async def update_theme(file_id: str, body: ThemeUpdate, gateway: GatewayDep):
    """Partial update: only the fields present in the body are written."""
    try:
        updated = await gateway.update_by_file_id(file_id, update_to_columns(body))
    except ThemeGatewayError as e:
        LOG.warning("%s PUT /themes/%s rejected: %s", THEMES, file_id, e)
        return _store_error("Could not update theme")
    if not updated:
        LOG.warning("%s PUT /themes/%s matched no theme", THEMES, file_id)
    return Response(status_code=status.HTTP_200_OK)
