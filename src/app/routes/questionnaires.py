"""
Questionnaire Routes: 제출, 조회, 연락처 검색, 삭제.

API:
- GET    /api/definitions/{type}?lang=         → 현지화 폼 스키마
- POST   /api/questionnaires/validate          → {valid, errors}
- POST   /api/questionnaires                   → 제출 (검증 → 렌더 → 저장 → 전송)
- POST   /api/questionnaires/save              → 클라이언트 렌더링 결과 저장
- POST   /api/questionnaires/by-ids            → 요약 목록
- POST   /api/questionnaires/search            → 연락처 검색
- GET    /api/questionnaires/{id}              → 상세
- DELETE /api/questionnaires/{id}              → 삭제 (+ 채널 메시지)
- POST   /api/questionnaires/{id}/message-id   → 채널 메시지 ID 갱신
- POST   /api/telegram/delete-message          → 채널 메시지 직접 삭제

페이지:
- GET /questionnaire/{id} → 제출한 설문 보기 (Jinja2)
"""

from pathlib import Path
from typing import Any, NoReturn

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, Field

from src.app.services.render import escape_html
from src.app.services.submission import SubmissionService
from src.core.ids import is_questionnaire_id
from src.domain.errors import ErrorCodes, IntakeError, status_for
from src.domain.schemas import ContactData, FormData, QuestionnaireType

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = (
    Jinja2Templates(directory=_templates_dir) if _templates_dir.exists() else None
)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # /api/questionnaires
definitions_router = APIRouter()  # /api/definitions
telegram_router = APIRouter()  # /api/telegram


# =============================================================================
# Request Models
# =============================================================================


class ContactPayload(BaseModel):
    telegram: str | None = None
    instagram: str | None = None
    phone: str | None = None

    def to_contact(self) -> ContactData:
        return ContactData(
            telegram=self.telegram, instagram=self.instagram, phone=self.phone
        )


class SubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    form_data: dict[str, Any] = Field(default_factory=dict, alias="formData")
    additional_data: dict[str, Any] | None = Field(default=None, alias="additionalData")
    contact_data: ContactPayload = Field(default_factory=ContactPayload, alias="contactData")
    language: str | None = None


class SaveRequest(BaseModel):
    """클라이언트 렌더링 저장. 필수값 검사는 서비스에서 (400)."""
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    form_data: dict[str, Any] | None = Field(default=None, alias="formData")
    additional_data: dict[str, Any] | None = Field(default=None, alias="additionalData")
    contact_data: ContactPayload | None = Field(default=None, alias="contactData")
    markdown: str | None = None
    language: str | None = None
    telegram_message_id: Any = Field(default=None, alias="telegramMessageId")


class IdsRequest(BaseModel):
    ids: Any = None


class MessageIdRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    telegram_message_id: Any = Field(default=None, alias="telegramMessageId")


class DeleteMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: Any = Field(default=None, alias="messageId")


# =============================================================================
# Helpers
# =============================================================================


def get_submissions(request: Request) -> SubmissionService:
    """Request에서 SubmissionService 가져오기."""
    return request.app.state.submissions


def raise_http(error: IntakeError) -> NoReturn:
    """IntakeError → HTTPException."""
    raise HTTPException(
        status_code=status_for(error),
        detail={"message": str(error), **error.to_dict()},
    ) from error


def normalize_form_data(raw: dict[str, Any] | None) -> FormData:
    """
    답변 값 정규화: 목록은 list[str], 그 외는 str.

    None 값은 미응답으로 간주하여 제외.
    """
    form: FormData = {}
    for key, value in (raw or {}).items():
        if value is None:
            continue
        if isinstance(value, list):
            form[str(key)] = [str(v) for v in value if v is not None]
        else:
            form[str(key)] = str(value)
    return form


def normalize_additional(raw: dict[str, Any] | None) -> dict[str, str] | None:
    if raw is None:
        return None
    return {str(k): str(v) for k, v in raw.items() if v is not None}


# =============================================================================
# Definitions API
# =============================================================================


@definitions_router.get("/{questionnaire_type}")
async def get_definition(
    request: Request,
    questionnaire_type: str,
    lang: str | None = None,
) -> dict[str, Any]:
    """카테고리별 현지화 폼 스키마."""
    service = get_submissions(request)
    try:
        return service.definitions.describe(questionnaire_type, lang or "")
    except IntakeError as e:
        raise_http(e)


# =============================================================================
# Questionnaire API
# =============================================================================


@api_router.post("/validate")
async def validate_questionnaire(request: Request, body: SubmitRequest) -> dict[str, Any]:
    """저장 없이 검증만."""
    service = get_submissions(request)
    try:
        errors = service.validator.validate(
            body.type,
            normalize_form_data(body.form_data),
            body.contact_data.to_contact(),
            body.language or "",
            normalize_additional(body.additional_data),
        )
    except IntakeError as e:
        raise_http(e)
    return {"valid": not errors, "errors": errors}


@api_router.post("")
async def submit_questionnaire(request: Request, body: SubmitRequest) -> dict[str, Any]:
    """
    설문 제출.

    1. 검증 (실패 시 422 + errors)
    2. 메시지 렌더링
    3. 저장
    4. 채널 전송 (실패해도 저장은 유지)
    """
    service = get_submissions(request)
    try:
        result = await service.submit(
            body.type,
            normalize_form_data(body.form_data),
            normalize_additional(body.additional_data),
            body.contact_data.to_contact(),
            body.language,
        )
    except IntakeError as e:
        raise_http(e)

    return result.to_dict()


@api_router.post("/save")
async def save_questionnaire(request: Request, body: SaveRequest) -> dict[str, Any]:
    """클라이언트가 렌더링한 설문 저장."""
    service = get_submissions(request)
    message_id = body.telegram_message_id
    if not (isinstance(message_id, int) and not isinstance(message_id, bool)):
        message_id = None

    try:
        record = service.save_prerendered(
            body.type,
            normalize_form_data(body.form_data) if body.form_data else None,
            body.contact_data.to_contact() if body.contact_data else None,
            body.markdown,
            additional_data=normalize_additional(body.additional_data),
            language=body.language,
            telegram_message_id=message_id,
        )
    except IntakeError as e:
        raise_http(e)

    return {
        "success": True,
        "id": record.id,
        "telegramMessageId": record.telegram_message_id,
        "message": "Questionnaire saved successfully",
    }


@api_router.post("/by-ids")
async def questionnaires_by_ids(request: Request, body: IdsRequest) -> dict[str, Any]:
    """id 목록 → 요약 (최신순). 잘못된 입력은 빈 목록."""
    ids = body.ids if isinstance(body.ids, list) else []
    summaries = get_submissions(request).list_by_ids([str(i) for i in ids])
    return {"success": True, "count": len(summaries), "questionnaires": summaries}


@api_router.post("/search")
async def search_questionnaires(request: Request, body: ContactPayload) -> dict[str, Any]:
    """연락처로 본인 설문 검색."""
    try:
        summaries = get_submissions(request).search(body.to_contact())
    except IntakeError as e:
        raise_http(e)
    return {"success": True, "count": len(summaries), "questionnaires": summaries}


@api_router.get("/{questionnaire_id}")
async def get_questionnaire(request: Request, questionnaire_id: str) -> dict[str, Any]:
    try:
        record = get_submissions(request).get(questionnaire_id)
    except IntakeError as e:
        raise_http(e)
    return {"success": True, "data": record.to_dict()}


@api_router.delete("/{questionnaire_id}")
async def delete_questionnaire(request: Request, questionnaire_id: str) -> dict[str, Any]:
    """설문 삭제. 채널 메시지 삭제 실패는 응답에만 표시."""
    try:
        channel_result = await get_submissions(request).delete(questionnaire_id)
    except IntakeError as e:
        raise_http(e)

    return {
        "success": True,
        "message": "Questionnaire deleted successfully",
        "channelMessageDeleted": channel_result.success if channel_result else None,
    }


@api_router.post("/{questionnaire_id}/message-id")
async def update_message_id(
    request: Request,
    questionnaire_id: str,
    body: MessageIdRequest,
) -> dict[str, Any]:
    try:
        get_submissions(request).update_message_id(
            questionnaire_id, body.telegram_message_id
        )
    except IntakeError as e:
        raise_http(e)
    return {"success": True, "message": "Message ID updated successfully"}


# =============================================================================
# Telegram API
# =============================================================================


@telegram_router.post("/delete-message")
async def delete_channel_message(
    request: Request, body: DeleteMessageRequest
) -> dict[str, Any]:
    """
    채널 메시지 직접 삭제.

    채널 측 실패는 200 + success=false (원인 description 포함).
    """
    try:
        result = await get_submissions(request).delete_channel_message(body.message_id)
    except IntakeError as e:
        raise_http(e)

    if not result.success:
        return {"success": False, "error": result.error_message}
    return {"success": True, "message": "Telegram message deleted successfully"}


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/questionnaire/{questionnaire_id}", response_class=HTMLResponse)
async def questionnaire_page(
    request: Request,
    questionnaire_id: str,
    lang: str | None = None,
) -> HTMLResponse:
    """
    제출한 설문 보기.

    본문은 저장된 답변으로 서버에서 다시 렌더링 (escape 보장).
    알 수 없는 카테고리면 저장된 텍스트를 escape하여 표시.
    """
    if not is_questionnaire_id(questionnaire_id):
        raise_http(IntakeError(ErrorCodes.QUESTIONNAIRE_NOT_FOUND, id=questionnaire_id))

    service = get_submissions(request)
    try:
        record = service.get(questionnaire_id)
    except IntakeError as e:
        raise_http(e)

    view_lang = service.definitions.resolve_language(lang or record.language)
    try:
        QuestionnaireType(record.type)
        body_html = service.renderer.render(
            record.type,
            record.form_data,
            record.additional_data,
            record.contact_data,
            view_lang,
        )
    except (ValueError, IntakeError):
        body_html = escape_html(record.markdown)

    context = {
        "record": record,
        "lang": view_lang,
        "body_html": body_html.replace("\n", "<br>\n"),
    }

    if jinja_templates:
        return jinja_templates.TemplateResponse(
            request, "questionnaire_view.html", context
        )

    return HTMLResponse(content=f"<div class='questionnaire'>{context['body_html']}</div>")


