"""
Domain Constants: 서비스 전역 상수.

언어, 관리자 쿠키, 콘텐츠 파일 경로, 메시지 채널 설정 등
시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Language (언어)
# =============================================================================

DEFAULT_LANGUAGE = "ru"

# =============================================================================
# Admin Gate (관리자 쿠키)
# =============================================================================
# 로그인 성공 시: admin=true; HttpOnly; SameSite=Strict; Max-Age=3600

ADMIN_COOKIE_NAME = "admin"
ADMIN_COOKIE_VALUE = "true"
ADMIN_COOKIE_MAX_AGE = 60 * 60

# =============================================================================
# Content Store (인라인 CMS)
# =============================================================================
# data/
# ├── content.json
# ├── content.json.lock
# └── backup/content-<ms>.json

CONTENT_FILENAME = "content.json"
CONTENT_LOCK_SUFFIX = ".lock"
CONTENT_BACKUP_DIR = "backup"
CONTENT_BACKUP_PREFIX = "content-"

DEFAULT_CONTENT: dict[str, str] = {
    "welcomeTitle": "Добро пожаловать",
    "siteTitle": "Анкета по здоровью",
    "welcomeDescription": (
        "Это бесплатная анкета по здоровью. Заполните форму, "
        "и мы свяжемся с вами для консультации."
    ),
    "selectCategory": "Выберите категорию анкеты",
}

# =============================================================================
# Messaging Channel (Telegram)
# =============================================================================

TELEGRAM_API_BASE = "https://api.telegram.org"
TELEGRAM_PARSE_MODE = "HTML"
TELEGRAM_TIMEOUT_SECONDS = 30.0
TELEGRAM_MAX_RETRIES = 3

# Telegram 응답 상태 중 재시도 대상
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# =============================================================================
# Contact Links
# =============================================================================

TELEGRAM_LINK_BASE = "https://t.me/"
INSTAGRAM_LINK_BASE = "https://instagram.com/"
PHONE_LINK_PREFIX = "tel:"

# 후속 입력 필드 접미사: <question_id>_additional
ADDITIONAL_SUFFIX = "_additional"
