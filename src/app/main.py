"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.app.providers.telegram import TelegramNotifier
from src.app.routes import admin, content, questionnaires
from src.app.services.content import ContentStore
from src.app.services.definitions import DefinitionService
from src.app.services.submission import SubmissionService
from src.core.logging import configure_logging, mask_chat_id
from src.core.store import QuestionnaireStore

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def resolve_content_dir(config: dict) -> Path:
    """CONTENT_DIR 환경변수 > content.dir 설정 > data/."""
    value = os.environ.get("CONTENT_DIR") or config.get("content", {}).get("dir") or "data"
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


def resolve_admin_password() -> str:
    """ADMIN_PASSWORD 환경변수. 미설정이면 빈 문자열 (로그인 거부)."""
    value = os.environ.get("ADMIN_PASSWORD", "")
    if not value.strip():
        logger.warning("ADMIN_PASSWORD not set, admin login is disabled")
        return ""
    return value


def init_state(app: FastAPI, config: dict) -> None:
    """설정으로 서비스 구성 후 app.state에 등록."""
    definitions = DefinitionService(PROJECT_ROOT / "definition.yaml")
    store = QuestionnaireStore()
    notifier = TelegramNotifier.from_config(config)

    app.state.config = config
    app.state.definitions = definitions
    app.state.store = store
    app.state.submissions = SubmissionService(definitions, store, notifier)
    app.state.content_store = ContentStore(resolve_content_dir(config))
    app.state.admin_password = resolve_admin_password()

    if notifier.is_configured:
        logger.info(f"Telegram notifier configured (chat {mask_chat_id(notifier.chat_id)})")
    else:
        logger.warning("Telegram credentials missing, submissions will be stored only")


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: .env + 설정 로드, 서비스 초기화
    종료 시: 리소스 정리
    """
    # Startup
    load_dotenv()
    config = load_config()
    configure_logging(config)
    init_state(app, config)

    yield

    # Shutdown
    # 저장소는 메모리 전용 → 종료 시 소멸
    logger.info(f"Shutting down ({app.state.store.count()} questionnaires in memory)")


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Wellness Intake",
    description="건강 설문 접수 → 스태프 Telegram 채널 전송",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외 → 500 (스택은 로그에만)."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(questionnaires.router, prefix="", tags=["Questionnaires"])

# API 라우트
app.include_router(
    questionnaires.definitions_router, prefix="/api/definitions", tags=["Definitions API"]
)
app.include_router(
    questionnaires.api_router, prefix="/api/questionnaires", tags=["Questionnaires API"]
)
app.include_router(
    questionnaires.telegram_router, prefix="/api/telegram", tags=["Telegram API"]
)
app.include_router(admin.api_router, prefix="/api/admin", tags=["Admin API"])
app.include_router(content.api_router, prefix="/api/content", tags=["Content API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "Wellness Intake",
        "endpoints": {
            "definitions": "/api/definitions/{type}",
            "questionnaires": "/api/questionnaires",
            "content": "/api/content",
            "admin": "/api/admin/status",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=int(os.environ.get("PORT", "3001")),
        reload=True,
    )
