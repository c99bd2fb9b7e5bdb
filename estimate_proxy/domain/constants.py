"""
Domain Constants: 프록시 전역 상수.

벤더 엔드포인트, API 버전, 출력 토큰 상한 등.
벤더 wire 형식 호환을 위해 값 변경 시 주의.
"""

# =============================================================================
# Output Limits
# =============================================================================
# 세 벤더 모두 동일 상한 사용

MAX_OUTPUT_TOKENS = 4000

# =============================================================================
# Vendor Endpoints
# =============================================================================

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

GOOGLE_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GOOGLE_GENERATE_PATH = "/models/{model}:generateContent"

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"

# =============================================================================
# Content Blocks
# =============================================================================

BLOCK_TYPE_TEXT = "text"
BLOCK_TYPE_IMAGE = "image"
BLOCK_TYPE_DOCUMENT = "document"
SOURCE_TYPE_BASE64 = "base64"

PDF_MEDIA_TYPE = "application/pdf"
IMAGE_MEDIA_PREFIX = "image/"

# OpenAI vision 엔드포인트는 PDF 직접 입력 불가 → 바이너리 대신 이 문구 전달
OPENAI_PDF_PLACEHOLDER = "[PDF document attached - content extracted]"

# =============================================================================
# Selected Configuration
# =============================================================================

DEFAULT_PROVIDER = "anthropic"
DEFAULT_MODEL = "claude-sonnet-4-20250514"

CONFIG_STORE_KEY = "model_config"

ADMIN_PASSWORD_ENV = "ADMIN_PASSWORD"
REDIS_URL_ENV = "REDIS_URL"
CONFIG_PATH_ENV = "ESTIMATE_PROXY_CONFIG"
