"""
Content Routes: 인라인 CMS 문구.

API:
- GET  /api/content → 현재 문구 (누구나)
- POST /api/content → 병합 갱신 (관리자 전용, 아니면 403)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from src.app.routes.admin import require_admin
from src.app.services.content import ContentStore

api_router = APIRouter()  # /api/content


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


@api_router.get("")
async def get_content(request: Request) -> dict[str, Any]:
    return get_content_store(request).read()


@api_router.post("", dependencies=[Depends(require_admin)])
async def update_content(
    request: Request,
    patch: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    content = get_content_store(request).update(patch)
    return {"success": True, "content": content}
