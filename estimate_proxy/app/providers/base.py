"""
LLM Provider 추상 인터페이스.

각 벤더 adapter = 순수 변환 + 단일 HTTP 호출 + 응답 정규화.

규칙:
- call() 한 번 = POST 한 번 (재시도/fallback 없음)
- non-2xx → VendorHTTPError(status, payload 원문)
- 텍스트 추출 실패 → "" (예외 없음)
- 타임아웃은 이 계층에서 강제하지 않음 (호출자 책임)

변환 훅 (벤더별 구현):
- build_request(): 요청 URL/헤더/쿼리/본문 구성 (순수 함수)
- convert_block(): ContentBlock → 벤더 part (모든 variant + fallback 1개)
- extract_text() / normalize(): 응답 → NormalizedResult
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from estimate_proxy.domain.errors import VendorHTTPError
from estimate_proxy.domain.schemas import ContentBlock, NormalizedResult

logger = logging.getLogger(__name__)


@dataclass
class VendorRequest:
    """벤더 HTTP 요청 구성요소."""
    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


def fallback_text(raw: dict[str, Any]) -> str:
    """인식하지 못한 block의 텍스트 표현."""
    return json.dumps(raw, ensure_ascii=False)


def dig(data: Any, *path: str | int) -> Any:
    """
    중첩 dict/list 안전 탐색.

    경로 중 하나라도 없거나 타입이 다르면 None.
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        try:
            current = current[key]
        except (KeyError, IndexError):
            return None
    return current


class LLMProvider(ABC):
    """
    LLM Provider 추상 인터페이스.

    Usage:
        provider = OpenAIProvider()
        result = await provider.call(api_key, "gpt-4o", blocks)

    테스트에서는 transport 주입으로 네트워크 없이 실행:
        provider = OpenAIProvider(transport=httpx.MockTransport(handler))
    """

    name: str = ""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """
        Args:
            transport: httpx transport (None이면 기본 네트워크 transport)
        """
        self._transport = transport

    async def call(
        self,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> NormalizedResult:
        """
        벤더 API 호출 후 정규화된 결과 반환.

        Args:
            api_key: 벤더 API 키
            model: 모델 ID
            content: 순서 있는 content block 목록

        Returns:
            NormalizedResult

        Raises:
            VendorHTTPError: 벤더가 non-2xx 응답을 반환
            httpx.HTTPError: 네트워크 오류 (래핑하지 않음)
        """
        request = self.build_request(api_key, model, content)
        logger.info(
            f"Calling {self.name} (model={model}, blocks={len(content)})"
        )

        # 타임아웃 없음: 벤더 연결 동작에만 의존
        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            response = await client.post(
                request.url,
                headers=request.headers,
                params=request.params or None,
                json=request.json,
            )

        data = self._decode_body(response)

        if not response.is_success:
            logger.warning(
                f"{self.name} returned HTTP {response.status_code} (model={model})"
            )
            raise VendorHTTPError(response.status_code, data, provider=self.name)

        return self.normalize(data, model)

    def _decode_body(self, response: httpx.Response) -> Any:
        """응답 본문 JSON 디코드. JSON이 아니면 텍스트를 error 필드로 감쌈."""
        try:
            return response.json()
        except ValueError:
            return {"error": response.text}

    def convert_content(self, content: list[ContentBlock]) -> list[dict[str, Any]]:
        """content 목록 변환 (순서 보존)."""
        return [self.convert_block(block) for block in content]

    @abstractmethod
    def convert_block(self, block: ContentBlock) -> dict[str, Any]:
        """ContentBlock 하나를 벤더 형식으로 변환."""
        ...

    @abstractmethod
    def build_request(
        self,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> VendorRequest:
        """벤더 HTTP 요청 구성."""
        ...

    @abstractmethod
    def extract_text(self, data: Any) -> str:
        """응답에서 표시 텍스트 추출. 없으면 ""."""
        ...

    @abstractmethod
    def normalize(self, data: Any, model: str) -> NormalizedResult:
        """응답 → NormalizedResult."""
        ...

    @staticmethod
    def _text_or_empty(value: Any) -> str:
        return value if isinstance(value, str) else ""
