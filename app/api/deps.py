from __future__ import annotations

from fastapi import Depends, Request

from app.ai.types import AIClient
from app.core.config import settings
from app.schemas.analysis import RequestContext
from app.services.submissions import SubmissionRecorder
from app.storage.submission_store import SubmissionStore


def get_ai_client(request: Request) -> AIClient | None:
    return getattr(request.app.state, "ai_client", None)


def get_submission_store(request: Request) -> SubmissionStore | None:
    return getattr(request.app.state, "submission_store", None)


def get_submission_recorder(
    store: SubmissionStore | None = Depends(get_submission_store),
) -> SubmissionRecorder | None:
    if store is None:
        return None
    return SubmissionRecorder(store)


def _client_ip(request: Request) -> str | None:
    if settings.trust_x_forwarded_for:
        forwarded_for = request.headers.get("x-forwarded-for", "").strip()
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return None


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent") or None,
    )
