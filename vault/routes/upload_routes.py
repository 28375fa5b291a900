"""Batch upload API route."""

import os
from typing import List

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from common.constants import NAMESPACE_FORM_FIELD
from common.logging_config import get_logger
from vault import config
from vault.exceptions import EmptyBatchError, FileTooLargeError
from vault.schemas.common import ErrorResponse
from vault.schemas.files import FileResultResponse, UploadResponse
from vault.services.content_classifier import DEFAULT_DECLARED_TYPE
from vault.services.ingestion_pipeline import IngestionPipeline
from vault.service_locator import get_pipeline
from vault.types import IncomingFile
from vault.utils import validate_namespace

logger = get_logger(__name__)

router = APIRouter(tags=["Upload"])


def _part_size(part: UploadFile) -> int:
    if part.size is not None:
        return part.size
    return part.file.seek(0, os.SEEK_END)


def _collect_parts(parts: List[UploadFile], max_bytes: int) -> List[IncomingFile]:
    """
    Wrap spooled parts without reading them into memory.

    Raises:
        FileTooLargeError: If any part exceeds max_bytes
    """
    incoming = []
    for part in parts:
        size = _part_size(part)
        if size > max_bytes:
            raise FileTooLargeError(
                f"{part.filename} exceeds the maximum upload size of {max_bytes} bytes"
            )
        incoming.append(
            IncomingFile(
                declared_name=part.filename or "",
                declared_mime_type=part.content_type or DEFAULT_DECLARED_TYPE,
                source=part.file,
                size_bytes=size,
            )
        )
    return incoming


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_files(
    request: Request,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """
    Upload a batch of files into a user namespace.

    Parameters (multipart/form-data):
        - username: Namespace to store the files under
        - any number of file parts; a part's filename may carry
          subfolders (e.g. "trip/day1/beach.jpg")

    Returns:
        - success: True once every file has been attempted
        - results: Per-file record or failure reason

    Raises:
        - 400: Missing/invalid username or no files
        - 413: A file exceeds the size ceiling
    """
    form = await request.form()
    try:
        raw_user = form.get(NAMESPACE_FORM_FIELD)
        user = validate_namespace(raw_user if isinstance(raw_user, str) else None)

        parts = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
        if not parts:
            raise EmptyBatchError("No files uploaded")

        batch = _collect_parts(parts, config.MAX_UPLOAD_FILE_BYTES)
        logger.info(
            f"Upload received [user={user}] [files={len(batch)}] "
            f"[bytes={sum(f.size_bytes for f in batch)}]"
        )

        outcomes = await pipeline.ingest(user, batch)
    finally:
        await form.close()

    results = [FileResultResponse.from_outcome(outcome) for outcome in outcomes]
    accepted = sum(1 for result in results if result.ok)

    return UploadResponse(
        success=True,
        accepted=accepted,
        rejected=len(results) - accepted,
        results=results,
    )
