"""
Admin Routes: 관리자 로그인/로그아웃/상태.

세션은 쿠키 하나로 표시:
    admin=true; HttpOnly; SameSite=Strict; Max-Age=<admin.cookie_max_age>

API:
- POST /api/admin/login   → 비밀번호 확인 후 쿠키 발급 (실패 401)
- POST /api/admin/logout  → 쿠키 삭제
- GET  /api/admin/status  → {isAdmin}
"""

import logging
import secrets
from typing import Any

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from src.app.routes.questionnaires import raise_http
from src.domain.constants import (
    ADMIN_COOKIE_MAX_AGE,
    ADMIN_COOKIE_NAME,
    ADMIN_COOKIE_VALUE,
)
from src.domain.errors import ErrorCodes, IntakeError

logger = logging.getLogger(__name__)

api_router = APIRouter()  # /api/admin


class LoginRequest(BaseModel):
    password: str | None = None


def is_admin(request: Request) -> bool:
    """요청 쿠키가 관리자 세션인지."""
    return request.cookies.get(ADMIN_COOKIE_NAME) == ADMIN_COOKIE_VALUE


def require_admin(request: Request) -> None:
    """
    관리자 전용 의존성.

    Raises:
        HTTPException: 403 (FORBIDDEN)
    """
    if not is_admin(request):
        raise_http(IntakeError(ErrorCodes.FORBIDDEN))


@api_router.post("/login")
async def login(request: Request, response: Response, body: LoginRequest) -> dict[str, Any]:
    expected: str = request.app.state.admin_password
    given = body.password or ""

    if not expected or not secrets.compare_digest(given.encode(), expected.encode()):
        logger.warning("Admin login failed")
        raise_http(IntakeError(ErrorCodes.INVALID_PASSWORD))

    config = getattr(request.app.state, "config", {}) or {}
    max_age = int(config.get("admin", {}).get("cookie_max_age", ADMIN_COOKIE_MAX_AGE))

    response.set_cookie(
        ADMIN_COOKIE_NAME,
        ADMIN_COOKIE_VALUE,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="strict",
    )
    logger.info("Admin logged in")
    return {"success": True}


@api_router.post("/logout")
async def logout(response: Response) -> dict[str, Any]:
    response.delete_cookie(ADMIN_COOKIE_NAME, path="/", httponly=True, samesite="strict")
    return {"success": True}


@api_router.get("/status")
async def status(request: Request) -> dict[str, Any]:
    return {"isAdmin": is_admin(request)}
