from __future__ import annotations

from app.ai.types import ProviderError, ProviderErrorKind

INVALID_CREDENTIAL_MESSAGE = "Invalid API key. Please check your .env file."

_CREDENTIAL_MARKERS = ("api key", "api_key", "apikey")


def is_credential_error(exc: BaseException) -> bool:
    if getattr(exc, "status_code", None) == 401:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _CREDENTIAL_MARKERS)


def classify_provider_error(exc: BaseException) -> ProviderError:
    """Map an SDK exception onto the provider error taxonomy."""
    if isinstance(exc, ProviderError):
        return exc
    if is_credential_error(exc):
        return ProviderError(ProviderErrorKind.INVALID_CREDENTIAL, INVALID_CREDENTIAL_MESSAGE)
    message = str(exc).strip() or exc.__class__.__name__
    return ProviderError(ProviderErrorKind.UPSTREAM, message)
