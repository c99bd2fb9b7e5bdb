"""
OpenAI Chat Completions Provider.

변환 규칙:
- text → {type: "text", text}
- image → {type: "image_url", image_url: {url: data URI}}
- document → 고정 안내 문구 텍스트 (vision 엔드포인트는 PDF 입력 불가, 바이너리 전송 금지)
  base64가 아닌 document (UnknownBlock)도 동일
- 알 수 없는 block → JSON 문자열 텍스트
"""

from typing import Any

from estimate_proxy.domain.constants import (
    BLOCK_TYPE_DOCUMENT,
    MAX_OUTPUT_TOKENS,
    OPENAI_CHAT_COMPLETIONS_URL,
    OPENAI_PDF_PLACEHOLDER,
)
from estimate_proxy.domain.schemas import (
    ContentBlock,
    DocumentBlock,
    ImageBlock,
    NormalizedResult,
    TextBlock,
    UnknownBlock,
)

from .base import LLMProvider, VendorRequest, dig, fallback_text


def build_data_uri(media_type: str, data: str) -> str:
    """base64 데이터 → data URI."""
    return f"data:{media_type};base64,{data}"


class OpenAIProvider(LLMProvider):
    """
    OpenAI Chat Completions API Provider.

    Usage:
        provider = OpenAIProvider()
        result = await provider.call(api_key, "gpt-4o", blocks)
    """

    name = "openai"

    def convert_block(self, block: ContentBlock) -> dict[str, Any]:
        if isinstance(block, TextBlock):
            return {"type": "text", "text": block.text}
        if isinstance(block, ImageBlock):
            return {
                "type": "image_url",
                "image_url": {"url": build_data_uri(block.media_type, block.data)},
            }
        if isinstance(block, DocumentBlock) or (
            isinstance(block, UnknownBlock) and block.raw.get("type") == BLOCK_TYPE_DOCUMENT
        ):
            return {"type": "text", "text": OPENAI_PDF_PLACEHOLDER}
        return {"type": "text", "text": fallback_text(block.to_dict())}

    def build_request(
        self,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> VendorRequest:
        return VendorRequest(
            url=OPENAI_CHAT_COMPLETIONS_URL,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            json={
                "model": model,
                "max_tokens": MAX_OUTPUT_TOKENS,
                "messages": [
                    {"role": "user", "content": self.convert_content(content)}
                ],
            },
        )

    def extract_text(self, data: Any) -> str:
        """choices[0].message.content."""
        return self._text_or_empty(dig(data, "choices", 0, "message", "content"))

    def normalize(self, data: Any, model: str) -> NormalizedResult:
        return NormalizedResult(
            text=self.extract_text(data),
            usage=dig(data, "usage"),
            model=dig(data, "model") or model,
            raw=data,
        )
