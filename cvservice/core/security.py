from __future__ import annotations

from fastapi import HTTPException, status

from cvservice.core.config import settings
from cvservice.core.messages import normalize_locale

_AUTH_ERROR_MESSAGES = {
    "en": "Please provide a valid API key.",
    "da": "Angiv venligst en gyldig API-nøgle.",
}
_USER_REQUIRED_MESSAGES = {
    "en": "Authentication is required to import a CV.",
    "da": "Du skal være logget ind for at importere et CV.",
}


def check_api_key(x_api_key: str | None, lang: str | None = None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_AUTH_ERROR_MESSAGES[normalize_locale(lang)],
        )


def require_user_id(x_user_id: str | None, lang: str | None = None) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_USER_REQUIRED_MESSAGES[normalize_locale(lang)],
        )
    return user_id
