"""Administrative endpoints that seed the public course catalog."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..dependencies import get_db
from ..schemas import SyncReportRead, SyncRequest, UrlSyncResponse
from ..services import PUBLIC_COURSES, CourseSyncError, ensure_public_courses, sync_public_lesson_urls

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/public-courses", tags=["admin"])


def _manifest_for(request: Optional[SyncRequest]):
    if request is None or request.courses is None:
        return PUBLIC_COURSES
    return [course.model_dump() for course in request.courses]


@router.post("/sync", response_model=SyncReportRead)
def sync_public_courses(
    request: Optional[SyncRequest] = Body(None),
    db: Session = Depends(get_db),
) -> SyncReportRead:
    try:
        report = ensure_public_courses(db, _manifest_for(request))
    except SQLAlchemyError as exc:
        LOGGER.exception("Public course sync failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Course store error: {exc.__class__.__name__}",
        ) from exc
    except CourseSyncError as exc:
        LOGGER.error("%s", exc)
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail=str(exc),
        ) from exc
    return SyncReportRead(**report.to_dict())


@router.post("/sync-urls", response_model=UrlSyncResponse)
def sync_lesson_urls(
    request: Optional[SyncRequest] = Body(None),
    db: Session = Depends(get_db),
) -> UrlSyncResponse:
    try:
        updated = sync_public_lesson_urls(db, _manifest_for(request))
    except SQLAlchemyError as exc:
        LOGGER.exception("Lesson URL backfill failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Course store error: {exc.__class__.__name__}",
        ) from exc
    return UrlSyncResponse(updated=updated)
