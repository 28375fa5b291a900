"""Catalog search and archive export API routes."""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from vault.repositories.file_repository import FileRepository
from vault.schemas.common import ErrorResponse
from vault.schemas.files import FileRecordResponse
from vault.services.archive_service import ArchiveService
from vault.service_locator import get_archive_service, get_catalog
from vault.utils import validate_namespace

router = APIRouter(tags=["Files"])


@router.get("/search", response_model=List[FileRecordResponse])
async def search_files(
    username: Optional[str] = Query(None, description="Namespace to search"),
    q: str = Query("", description="Substring of the original filename"),
    type: str = Query("", description="Prefix of the detected MIME type, e.g. 'image/'"),
    catalog: FileRepository = Depends(get_catalog),
):
    """
    List a namespace's files in upload order.

    Returns:
        - List of file records (empty for a namespace with no uploads)

    Raises:
        - 400: Missing or invalid username
    """
    user = validate_namespace(username)
    loop = asyncio.get_running_loop()
    records = await loop.run_in_executor(None, catalog.query_by_user, user, q or None, type or None)
    return [FileRecordResponse.from_record(record) for record in records]


@router.get("/zip/{user}", responses={404: {"model": ErrorResponse}})
async def download_archive(
    user: str,
    archive: ArchiveService = Depends(get_archive_service),
):
    """
    Download a zip of everything stored under a namespace.

    Returns:
        - application/zip attachment named <user>.zip

    Raises:
        - 400: Invalid username
        - 404: Namespace has no storage directory
    """
    user = validate_namespace(user)
    loop = asyncio.get_running_loop()
    archive_path = await loop.run_in_executor(None, archive.build_archive, user)

    return FileResponse(
        archive_path,
        media_type="application/zip",
        filename=f"{user}.zip",
        background=BackgroundTask(archive_path.unlink, missing_ok=True),
    )
