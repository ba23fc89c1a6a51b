from __future__ import annotations

import json
import logging
import time
from typing import Any

from app.ai.types import AIClient, ProviderError, ProviderErrorKind
from app.prompts.template import build_analyzer_prompt, build_matcher_prompt
from app.schemas.analysis import (
    AnalysisRequest,
    AnalyzeResumeRequest,
    MatchJobRequest,
    RequestContext,
)
from app.services.extraction import ExtractionError, ExtractionErrorKind, extract
from app.services.submissions import SubmissionRecorder

logger = logging.getLogger("app.analysis")

MIN_TEXT_CHARS = 50

ANALYZE_DEFAULT_ERROR = "Failed to analyze resume. Please try again."
MATCH_DEFAULT_ERROR = "Failed to match resume with job. Please try again."
INVALID_PROVIDER_MESSAGE = "Invalid AI provider specified"


class AnalysisServiceError(RuntimeError):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


def _client_fault(message: str) -> AnalysisServiceError:
    return AnalysisServiceError(message, status_code=400)


def _is_too_short(text: str) -> bool:
    return len(text.strip()) < MIN_TEXT_CHARS


def validate_analyze_request(payload: AnalyzeResumeRequest) -> AnalysisRequest:
    if not payload.resume_text or not payload.prompt:
        raise _client_fault("Missing resumeText or prompt in request body")
    if _is_too_short(payload.resume_text):
        raise _client_fault(f"Resume text is too short (minimum {MIN_TEXT_CHARS} characters)")
    return AnalysisRequest(
        kind="analyzer",
        document_text=payload.resume_text,
        prompt_template=payload.prompt,
        file_name=payload.file_name,
        file_type=payload.file_type,
        file_size=payload.file_size,
    )


def validate_match_request(payload: MatchJobRequest) -> AnalysisRequest:
    if not payload.resume_text or not payload.job_description or not payload.prompt:
        raise _client_fault("Missing required fields: resumeText, jobDescription, or prompt")
    if _is_too_short(payload.resume_text):
        raise _client_fault("Resume text is too short")
    if _is_too_short(payload.job_description):
        raise _client_fault("Job description is too short")
    return AnalysisRequest(
        kind="matcher",
        document_text=payload.resume_text,
        prompt_template=payload.prompt,
        job_description_text=payload.job_description,
        file_name=payload.file_name,
        file_type=payload.file_type,
        file_size=payload.file_size,
    )


async def _run_pipeline(
    request: AnalysisRequest,
    *,
    system_prompt: str,
    user_prompt: str,
    ai_client: AIClient | None,
    recorder: SubmissionRecorder | None,
    context: RequestContext,
    default_error: str,
) -> dict[str, Any]:
    started_at = time.perf_counter()
    try:
        if ai_client is None:
            raise ProviderError(ProviderErrorKind.INVALID_CONFIGURATION, INVALID_PROVIDER_MESSAGE)
        raw_text = await ai_client.complete(system_prompt, user_prompt)
        logger.info(
            json.dumps(
                {
                    "event": "ai_response_received",
                    "analysis_type": request.kind,
                    "provider": ai_client.provider,
                    "response_len": len(raw_text or ""),
                }
            )
        )
        result = extract(raw_text, request.kind)
    except ExtractionError as exc:
        if exc.kind is ExtractionErrorKind.UPSTREAM_REPORTED_ERROR:
            logger.info(
                json.dumps(
                    {"event": "analysis_declined", "analysis_type": request.kind, "error": str(exc)}
                )
            )
            raise _client_fault(str(exc)) from exc
        logger.error(
            json.dumps(
                {
                    "event": "analysis_error",
                    "analysis_type": request.kind,
                    "error_kind": exc.kind.value,
                    "error": str(exc),
                }
            )
        )
        raise AnalysisServiceError(str(exc) or default_error) from exc
    except ProviderError as exc:
        logger.error(
            json.dumps(
                {
                    "event": "analysis_error",
                    "analysis_type": request.kind,
                    "error_kind": exc.kind.value,
                    "error": str(exc),
                }
            )
        )
        raise AnalysisServiceError(str(exc) or default_error) from exc
    except Exception as exc:
        logger.exception(
            json.dumps(
                {
                    "event": "analysis_error",
                    "analysis_type": request.kind,
                    "error": str(exc),
                    "duration_ms": int((time.perf_counter() - started_at) * 1000),
                }
            )
        )
        raise AnalysisServiceError(str(exc) or default_error) from exc

    if recorder is not None:
        await recorder.record(request, result, context)

    logger.info(
        json.dumps(
            {
                "event": "analysis_complete",
                "analysis_type": request.kind,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return result


async def run_resume_analysis(
    payload: AnalyzeResumeRequest,
    *,
    ai_client: AIClient | None,
    recorder: SubmissionRecorder | None = None,
    context: RequestContext | None = None,
) -> dict[str, Any]:
    request = validate_analyze_request(payload)
    logger.info(
        json.dumps(
            {
                "event": "analysis_request",
                "analysis_type": request.kind,
                "resume_len": len(request.document_text),
            }
        )
    )
    system_prompt, user_prompt = build_analyzer_prompt(request.prompt_template, request.document_text)
    return await _run_pipeline(
        request,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        ai_client=ai_client,
        recorder=recorder,
        context=context or RequestContext(),
        default_error=ANALYZE_DEFAULT_ERROR,
    )


async def run_job_match(
    payload: MatchJobRequest,
    *,
    ai_client: AIClient | None,
    recorder: SubmissionRecorder | None = None,
    context: RequestContext | None = None,
) -> dict[str, Any]:
    request = validate_match_request(payload)
    logger.info(
        json.dumps(
            {
                "event": "analysis_request",
                "analysis_type": request.kind,
                "resume_len": len(request.document_text),
                "job_description_len": len(request.job_description_text or ""),
            }
        )
    )
    system_prompt, user_prompt = build_matcher_prompt(
        request.prompt_template,
        request.document_text,
        request.job_description_text or "",
    )
    return await _run_pipeline(
        request,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        ai_client=ai_client,
        recorder=recorder,
        context=context or RequestContext(),
        default_error=MATCH_DEFAULT_ERROR,
    )
