from __future__ import annotations

from app.core.config import settings


def cors_allowed_origins() -> list[str]:
    origins = list(settings.cors_allowed_origins)
    if settings.frontend_url not in origins:
        origins.append(settings.frontend_url)
    return origins
