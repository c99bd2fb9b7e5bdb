"""
Provider Registry.

지원 provider 목록, 표시 이름, 선택 가능한 모델, 자격증명 환경변수.

규칙:
- provider/model 추가는 이 테이블만 수정 (다른 코드에 분기 추가 금지)
- 모델 선택은 목록 멤버십으로만 검증 (자유 텍스트 허용 안 함)
- 정확한 문자열 비교 (대소문자 정규화 없음)
"""

from dataclasses import dataclass
from typing import Any

from estimate_proxy.domain.errors import UnknownModelError, UnknownProviderError
from estimate_proxy.domain.schemas import SelectedConfig


@dataclass(frozen=True)
class ModelOption:
    """선택 가능한 모델."""
    id: str
    display_name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.display_name}


@dataclass(frozen=True)
class ProviderDescriptor:
    """provider 메타데이터."""
    id: str
    display_name: str
    models: tuple[ModelOption, ...]
    credential_env_var: str

    @property
    def model_ids(self) -> tuple[str, ...]:
        return tuple(m.id for m in self.models)

    def to_dict(self) -> dict[str, Any]:
        """설정 API 응답용 (기존 클라이언트 호환 키 유지)."""
        return {
            "name": self.display_name,
            "models": [m.to_dict() for m in self.models],
            "envKey": self.credential_env_var,
        }


# =============================================================================
# Registry Table
# =============================================================================

PROVIDERS: dict[str, ProviderDescriptor] = {
    "anthropic": ProviderDescriptor(
        id="anthropic",
        display_name="Anthropic",
        models=(
            ModelOption("claude-sonnet-4-20250514", "Claude Sonnet 4"),
            ModelOption("claude-opus-4-20250514", "Claude Opus 4"),
            ModelOption("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
            ModelOption("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
        ),
        credential_env_var="ANTHROPIC_API_KEY",
    ),
    "google": ProviderDescriptor(
        id="google",
        display_name="Google",
        models=(
            ModelOption("gemini-2.0-flash-exp", "Gemini 2.0 Flash"),
            ModelOption("gemini-1.5-pro", "Gemini 1.5 Pro"),
            ModelOption("gemini-1.5-flash", "Gemini 1.5 Flash"),
        ),
        credential_env_var="GOOGLE_API_KEY",
    ),
    "openai": ProviderDescriptor(
        id="openai",
        display_name="OpenAI",
        models=(
            ModelOption("gpt-4o", "GPT-4o"),
            ModelOption("gpt-4o-mini", "GPT-4o Mini"),
            ModelOption("gpt-4-turbo", "GPT-4 Turbo"),
        ),
        credential_env_var="OPENAI_API_KEY",
    ),
}


def get_provider(provider_id: str) -> ProviderDescriptor | None:
    """provider id로 descriptor 조회. 없으면 None."""
    return PROVIDERS.get(provider_id)


def is_valid_model(provider_id: str, model_id: str) -> bool:
    """provider의 모델 목록에 model_id가 있는지 (정확히 일치)."""
    descriptor = PROVIDERS.get(provider_id)
    if descriptor is None:
        return False
    return model_id in descriptor.model_ids


def validate_selection(provider_id: str, model_id: str) -> SelectedConfig:
    """
    provider/model 조합 검증.

    Raises:
        UnknownProviderError: 레지스트리에 없는 provider
        UnknownModelError: provider 모델 목록에 없는 model
    """
    if get_provider(provider_id) is None:
        raise UnknownProviderError(provider_id)
    if not is_valid_model(provider_id, model_id):
        raise UnknownModelError(provider_id, model_id)
    return SelectedConfig(provider=provider_id, model=model_id)


def providers_table() -> dict[str, dict[str, Any]]:
    """설정 API의 providers 필드."""
    return {pid: descriptor.to_dict() for pid, descriptor in PROVIDERS.items()}
