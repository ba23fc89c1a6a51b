import asyncio

from fastapi import APIRouter, Depends

from app.api.deps import get_ai_client, get_submission_store
from app.core.config import settings
from app.schemas.analysis import HealthResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Report the active AI provider and submission store state.",
)
async def health_check(
    ai_client=Depends(get_ai_client),
    store=Depends(get_submission_store),
):
    if store is None:
        database = "disabled"
    else:
        database = "connected" if await asyncio.to_thread(store.ping) else "disconnected"
    provider = ai_client.provider if ai_client is not None else settings.ai_provider
    return HealthResponse(
        status="ok",
        provider=provider,
        database=database,
        message="Resume Optimizer API is running",
    )
