from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.ai.types import AIClient
from app.api.deps import get_ai_client, get_request_context, get_submission_recorder
from app.core.config import settings
from app.schemas.analysis import (
    AnalyzeResumeRequest,
    MatchJobRequest,
    RequestContext,
)
from app.services.analysis_service import AnalysisServiceError, run_job_match, run_resume_analysis
from app.services.submissions import SubmissionRecorder

router = APIRouter()


def _error_response(exc: AnalysisServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc)},
    )


@router.post(
    "/analyze-resume",
    summary="Analyze Resume",
)
async def analyze_resume(
    payload: AnalyzeResumeRequest,
    ai_client: AIClient | None = Depends(get_ai_client),
    recorder: SubmissionRecorder | None = Depends(get_submission_recorder),
    context: RequestContext = Depends(get_request_context),
):
    try:
        data = await run_resume_analysis(payload, ai_client=ai_client, recorder=recorder, context=context)
    except AnalysisServiceError as exc:
        return _error_response(exc)
    return {"success": True, "data": data}


@router.post(
    "/match-job",
    summary="Match Resume With Job",
)
async def match_job(
    payload: MatchJobRequest,
    ai_client: AIClient | None = Depends(get_ai_client),
    recorder: SubmissionRecorder | None = Depends(get_submission_recorder),
    context: RequestContext = Depends(get_request_context),
):
    try:
        data = await run_job_match(
            payload,
            ai_client=ai_client,
            recorder=recorder if settings.record_match_submissions else None,
            context=context,
        )
    except AnalysisServiceError as exc:
        return _error_response(exc)
    return {"success": True, "data": data}
