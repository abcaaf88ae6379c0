import asyncio
import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, status

from cvservice.api.v1.cv import get_cv_service
from cvservice.services.cv_service import CvService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness Check", description="Check that the profile store can be queried.")
async def readiness_check(service: CvService = Depends(get_cv_service)):
    try:
        profiles = await asyncio.to_thread(service.store.ping)
    except (OSError, sqlite3.Error) as exc:
        logger.warning("profiles_db_unavailable error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Profile store is unavailable.",
        ) from exc
    return {"status": "ready", "profiles": profiles}
