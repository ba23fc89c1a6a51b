from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any

from app.schemas.analysis import AnalysisRequest, RequestContext
from app.schemas.submission import SubmissionRecord
from app.storage.submission_store import SubmissionStore

logger = logging.getLogger("app.submissions")

DEFAULT_FILE_NAME = "unknown.pdf"
DEFAULT_FILE_TYPE = "pdf"
DEFAULT_FILE_SIZE = 0
UNKNOWN = "unknown"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_submission_record(
    request: AnalysisRequest,
    result: dict[str, Any],
    context: RequestContext,
) -> SubmissionRecord:
    created_at = _utc_now()
    return SubmissionRecord(
        file_name=request.file_name or DEFAULT_FILE_NAME,
        file_type=request.file_type or DEFAULT_FILE_TYPE,
        file_size=request.file_size if request.file_size is not None else DEFAULT_FILE_SIZE,
        analysis_type=request.kind,
        resume_text=request.document_text,
        resume_text_length=len(request.document_text),
        job_description_text=request.job_description_text,
        analyzer_results=result if request.kind == "analyzer" else None,
        matcher_results=result if request.kind == "matcher" else None,
        ip_address=context.ip_address or UNKNOWN,
        user_agent=context.user_agent or UNKNOWN,
        created_at=created_at,
        updated_at=created_at,
    )


class SubmissionRecorder:
    """Best-effort audit trail: a failed write is logged and dropped."""

    def __init__(self, store: SubmissionStore):
        self.store = store

    async def record(
        self,
        request: AnalysisRequest,
        result: dict[str, Any],
        context: RequestContext,
    ) -> str | None:
        try:
            record = build_submission_record(request, result, context)
            record_id = await asyncio.to_thread(self.store.create, record)
        except Exception as exc:  # noqa: BLE001 - persistence must not fail the request
            logger.warning(
                json.dumps(
                    {
                        "event": "submission_record_failed",
                        "analysis_type": request.kind,
                        "error": str(exc),
                    }
                )
            )
            return None

        logger.info(
            json.dumps(
                {
                    "event": "submission_recorded",
                    "analysis_type": request.kind,
                    "submission_id": record_id,
                }
            )
        )
        return record_id
