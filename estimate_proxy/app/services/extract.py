"""
Extraction Service: content block 요청 → 선택된 provider 호출 → 외부 응답 envelope.

흐름:
1. content 검증 (벤더 호출 전)
2. 현재 Selected Configuration 조회
3. provider descriptor 해석
4. descriptor의 환경변수에서 자격증명 조회 (없으면 벤더 호출 전 실패)
5. Dispatcher 호출 → envelope 변환

자격증명은 environ 매핑으로 주입 (테스트에서 실제 키/네트워크 불필요).
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from estimate_proxy.app.providers.dispatcher import Dispatcher
from estimate_proxy.app.providers.registry import ProviderDescriptor, get_provider
from estimate_proxy.domain.errors import MissingCredentialError, UnknownProviderError
from estimate_proxy.domain.schemas import (
    ContentBlock,
    NormalizedResult,
    SelectedConfig,
    parse_content,
)

from .config_store import ConfigStore

logger = logging.getLogger(__name__)


def resolve_credential(
    descriptor: ProviderDescriptor,
    environ: Mapping[str, str],
) -> str:
    """
    descriptor가 지정한 환경변수에서 API 키 조회.

    Raises:
        MissingCredentialError: 미설정 또는 빈 값
    """
    api_key = environ.get(descriptor.credential_env_var)
    if not api_key:
        raise MissingCredentialError(
            descriptor.credential_env_var,
            provider_name=descriptor.display_name,
        )
    return api_key


def to_envelope(result: NormalizedResult, provider: str) -> dict[str, Any]:
    """
    정규화 결과 → 외부 응답 envelope.

    기존 클라이언트 호환을 위해 Anthropic 응답과 같은 모양 유지.
    """
    return {
        "content": [{"type": "text", "text": result.text}],
        "model": result.model,
        "usage": result.usage,
        "provider": provider,
    }


class ExtractionService:
    """
    추출 서비스.

    Usage:
        service = ExtractionService(store, Dispatcher())
        envelope = await service.extract(body["content"])
    """

    def __init__(
        self,
        store: ConfigStore,
        dispatcher: Dispatcher | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """
        Args:
            store: Selected Configuration 저장소
            dispatcher: provider dispatcher (None이면 기본 adapter)
            environ: 자격증명 조회용 매핑 (None이면 os.environ)
        """
        self.store = store
        self.dispatcher = dispatcher or Dispatcher()
        self.environ: Mapping[str, str] = environ if environ is not None else os.environ

    async def current_target(self) -> tuple[SelectedConfig, ProviderDescriptor]:
        """
        현재 설정과 provider descriptor.

        Raises:
            UnknownProviderError: 저장된 provider가 레지스트리에 없음
        """
        config = await self.store.get()
        descriptor = get_provider(config.provider)
        if descriptor is None:
            raise UnknownProviderError(config.provider)
        return config, descriptor

    async def run(self, blocks: list[ContentBlock]) -> tuple[NormalizedResult, str]:
        """
        파싱된 block으로 현재 provider 호출.

        Returns:
            (NormalizedResult, provider id)
        """
        config, descriptor = await self.current_target()
        api_key = resolve_credential(descriptor, self.environ)

        result = await self.dispatcher.dispatch(
            config.provider, api_key, config.model, blocks
        )
        logger.info(
            f"Extraction completed (provider={config.provider}, "
            f"model={result.model}, text_length={len(result.text)})"
        )
        return result, config.provider

    async def extract(self, content: Any) -> dict[str, Any]:
        """
        요청 content → 외부 응답 envelope.

        Raises:
            MalformedRequestError: content 형식 오류 (벤더 호출 없음)
            UnknownProviderError: 저장된 설정 오류
            MissingCredentialError: 자격증명 없음 (벤더 호출 없음)
            VendorHTTPError: 벤더 non-2xx 응답
        """
        blocks = parse_content(content)
        result, provider = await self.run(blocks)
        return to_envelope(result, provider)
