"""
Auth routes – Password login and logout for the journal owner.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chess_journal.auth import COOKIE_NAME, check_password, create_session_token
from chess_journal.config import Settings, app_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    password: Optional[str] = None


@router.post("/login")
async def login(body: LoginRequest, settings: Settings = Depends(app_settings)):
    """Exchange the site password for a session cookie."""
    if not check_password(body.password, settings):
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid password")

    response = JSONResponse({"success": True})
    response.set_cookie(
        COOKIE_NAME,
        create_session_token(settings),
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return response


@router.post("/logout")
async def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(COOKIE_NAME, path="/")
    return response
