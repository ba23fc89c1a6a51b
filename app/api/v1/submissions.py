from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_submission_store
from app.core.config import settings
from app.schemas.submission import (
    AnalysisType,
    SubmissionListResponse,
    SubmissionRecord,
    SubmissionStatsResponse,
)
from app.storage.submission_store import SubmissionStore

router = APIRouter()


def submissions_admin_enabled() -> bool:
    return settings.submissions_admin_enabled


def _admin_store(
    enabled: bool = Depends(submissions_admin_enabled),
    store: SubmissionStore | None = Depends(get_submission_store),
) -> SubmissionStore:
    if not enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Submission storage is disabled.",
        )
    return store


@router.get(
    "/submissions",
    response_model=SubmissionListResponse,
    response_model_by_alias=True,
)
async def list_submissions(
    analysis_type: AnalysisType | None = Query(default=None, alias="analysisType"),
    limit: int = Query(default=20, ge=1, le=200),
    skip: int = Query(default=0, ge=0),
    store: SubmissionStore = Depends(_admin_store),
):
    items = await asyncio.to_thread(store.find, analysis_type, limit, skip)
    total = await asyncio.to_thread(store.count, analysis_type)
    return SubmissionListResponse(total=total, items=items)


@router.get(
    "/submissions/stats",
    response_model=SubmissionStatsResponse,
)
async def submission_stats(store: SubmissionStore = Depends(_admin_store)):
    analyzer = await asyncio.to_thread(store.count, "analyzer")
    matcher = await asyncio.to_thread(store.count, "matcher")
    return SubmissionStatsResponse(total=analyzer + matcher, analyzer=analyzer, matcher=matcher)


@router.get(
    "/submissions/{submission_id}",
    response_model=SubmissionRecord,
    response_model_by_alias=True,
)
async def get_submission(submission_id: str, store: SubmissionStore = Depends(_admin_store)):
    record = await asyncio.to_thread(store.get, submission_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")
    return record


@router.delete("/submissions/{submission_id}")
async def delete_submission(submission_id: str, store: SubmissionStore = Depends(_admin_store)):
    deleted = await asyncio.to_thread(store.delete, submission_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")
    return {"success": True, "id": submission_id}
