"""
App layer: HTTP 서버 (FastAPI).

역할:
- 설문 정의 제공, 제출 검증, Telegram 채널 전송
- 설문 조회/검색/삭제, 관리자 세션, 인라인 CMS 문구
- 저장소/연락처 규칙은 core에 위임

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (설문 보기 페이지)
- definition.yaml (루트) → 설문 구조 데이터
"""
