import asyncio

from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, UploadFile, status

from cvservice.core.config import settings
from cvservice.core.rate_limit import rate_limit
from cvservice.core.security import check_api_key, require_user_id
from cvservice.parsing.models import UploadedDocument
from cvservice.parsing.validation import CvValidationError
from cvservice.profiles.db import SqliteProfileStore
from cvservice.schemas.cv import CvImportResult, CvReadabilityResult
from cvservice.services.cv_service import CvService

router = APIRouter()

UPLOAD_CHUNK_BYTES = 1024 * 64


def get_cv_service() -> CvService:
    return CvService(store=SqliteProfileStore())


async def _read_upload(file: UploadFile | None) -> UploadedDocument:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    max_bytes = settings.cv_max_upload_bytes
    if file.size is not None and file.size > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Max allowed size is {max_bytes // (1024 * 1024)} MB.",
        )

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Max allowed size is {max_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    if total == 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    return UploadedDocument(
        content=b"".join(chunks),
        filename=file.filename or "",
        content_type=file.content_type or "",
        length=total,
    )


@router.post("/cv/analyze", response_model=CvReadabilityResult)
@rate_limit()
async def cv_analyze(
    request: Request,
    file: UploadFile | None = File(default=None),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    accept_language: str | None = Header(default=None, alias="Accept-Language"),
    service: CvService = Depends(get_cv_service),
):
    _ = request
    check_api_key(x_api_key, accept_language)
    document = await _read_upload(file)
    try:
        return await asyncio.to_thread(service.analyze, document, locale=accept_language)
    except CvValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/cv/import", response_model=CvImportResult)
@rate_limit()
async def cv_import(
    request: Request,
    file: UploadFile | None = File(default=None),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    accept_language: str | None = Header(default=None, alias="Accept-Language"),
    service: CvService = Depends(get_cv_service),
):
    _ = request
    check_api_key(x_api_key, accept_language)
    user_id = require_user_id(x_user_id, accept_language)
    document = await _read_upload(file)
    try:
        return await asyncio.to_thread(service.import_to_profile, user_id, document, locale=accept_language)
    except CvValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
