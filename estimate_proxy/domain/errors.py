"""
Error definitions for the proxy.

규칙:
- 조용한 실패 금지 → ProxyError 하위 클래스로 명시적 실패
- 벤더 HTTP 실패는 번역하지 않음 → VendorHTTPError가 status + payload 원문 보존
- 재시도 없음 (이 계층에서는 어떤 에러도 재시도하지 않음)
"""

from typing import Any


class ProxyError(Exception):
    """
    프록시 계층 에러의 기본 클래스.

    status_code는 HTTP 응답으로 변환될 때 사용되는 기본값.
    라우트가 상황에 따라 덮어쓸 수 있음 (예: 저장된 설정의 provider 오류).

    Usage:
        raise MissingCredentialError("OPENAI_API_KEY", provider_name="OpenAI")
    """

    code = "PROXY_ERROR"
    status_code = 500

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class UnknownProviderError(ProxyError):
    """레지스트리에 없는 provider id."""

    code = "UNKNOWN_PROVIDER"
    status_code = 400

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown provider: {provider}", provider=provider)
        self.provider = provider


class UnknownModelError(ProxyError):
    """provider의 모델 목록에 없는 model id."""

    code = "UNKNOWN_MODEL"
    status_code = 400

    def __init__(self, provider: str, model: str) -> None:
        super().__init__(
            f"Unknown model: {model} for provider {provider}",
            provider=provider,
            model=model,
        )
        self.provider = provider
        self.model = model


class MissingCredentialError(ProxyError):
    """
    provider 자격증명 환경변수가 비어 있음.

    벤더 호출 전에 발생 (fail-fast). 메시지에 환경변수 이름 포함.
    """

    code = "MISSING_CREDENTIAL"
    status_code = 500

    def __init__(self, env_var: str, provider_name: str) -> None:
        super().__init__(
            f"API key not configured for {provider_name}. "
            f"Set {env_var} in environment.",
            env_var=env_var,
            provider_name=provider_name,
        )
        self.env_var = env_var


class MalformedRequestError(ProxyError):
    """요청 본문 형식 오류 (content 배열 누락/비정상 등)."""

    code = "MALFORMED_REQUEST"
    status_code = 400


class UnauthorizedError(ProxyError):
    """설정 변경 시 관리자 비밀번호 불일치."""

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class AdminPasswordNotConfiguredError(ProxyError):
    """ADMIN_PASSWORD 미설정 → 설정 변경 자체가 불가."""

    code = "ADMIN_PASSWORD_MISSING"
    status_code = 500

    def __init__(self) -> None:
        super().__init__(
            "Admin password not configured. Set ADMIN_PASSWORD env var."
        )


class VendorHTTPError(ProxyError):
    """
    벤더 API가 non-2xx 응답을 반환.

    status + payload를 원문 그대로 보존하여 호출자에게 전달.
    일반 메시지로 합성하지 않음.
    """

    code = "VENDOR_HTTP_ERROR"

    def __init__(self, status: int, payload: Any, provider: str | None = None) -> None:
        super().__init__(
            f"Vendor request failed with HTTP {status}",
            status=status,
            provider=provider,
        )
        self.status = status
        self.payload = payload
        self.provider = provider

    @property  # type: ignore[override]
    def status_code(self) -> int:
        return self.status


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 로그 검색/대시보드 필터용."""

    UNKNOWN_PROVIDER = UnknownProviderError.code
    UNKNOWN_MODEL = UnknownModelError.code
    MISSING_CREDENTIAL = MissingCredentialError.code
    MALFORMED_REQUEST = MalformedRequestError.code
    UNAUTHORIZED = UnauthorizedError.code
    ADMIN_PASSWORD_MISSING = AdminPasswordNotConfiguredError.code
    VENDOR_HTTP_ERROR = VendorHTTPError.code

    # === Estimate helper ===
    LINE_ITEM_PARSE_FAILED = "LINE_ITEM_PARSE_FAILED"
