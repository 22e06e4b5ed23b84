"""
Auth dependency – single-user password login with a signed session cookie.

Logging in with SITE_PASSWORD sets a cookie holding an HS256 JWT signed with
SESSION_SECRET. Every protected route verifies that token. When no
SITE_PASSWORD is configured the journal runs open (local use).
"""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from chess_journal.config import Settings, app_settings

COOKIE_NAME = "chess-journal-auth"
ALGORITHM = "HS256"
SUBJECT = "journal-owner"


def auth_enabled(settings: Settings) -> bool:
    return bool(settings.site_password)


def check_password(password: Optional[str], settings: Settings) -> bool:
    if not password or not settings.site_password:
        return False
    return hmac.compare_digest(password.encode(), settings.site_password.encode())


def create_session_token(settings: Settings, now: Optional[datetime] = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": SUBJECT,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(days=settings.session_max_age_days)).timestamp()),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=ALGORITHM)


def verify_session_token(token: Optional[str], settings: Settings) -> bool:
    if not token:
        return False
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except JWTError:
        return False
    return payload.get("sub") == SUBJECT


async def require_session(
    request: Request,
    settings: Settings = Depends(app_settings),
) -> None:
    """Dependency that raises 401 unless the session cookie is valid."""
    if not auth_enabled(settings):
        return
    if not verify_session_token(request.cookies.get(COOKIE_NAME), settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
