"""
Google Gemini Provider.

변환 규칙:
- text → {text}
- image → {inline_data: {mime_type, data}}
- document (PDF) → {inline_data: {mime_type: "application/pdf", data}}
- 그 외 (알 수 없는 block, PDF 아닌 document) → JSON 문자열 텍스트

API 키는 쿼리 스트링(key=)으로 전달.
"""

from typing import Any

from estimate_proxy.domain.constants import (
    GOOGLE_API_BASE,
    GOOGLE_GENERATE_PATH,
    MAX_OUTPUT_TOKENS,
    PDF_MEDIA_TYPE,
)
from estimate_proxy.domain.schemas import (
    ContentBlock,
    DocumentBlock,
    ImageBlock,
    NormalizedResult,
    TextBlock,
)

from .base import LLMProvider, VendorRequest, dig, fallback_text


class GeminiProvider(LLMProvider):
    """
    Gemini generateContent API Provider.

    Usage:
        provider = GeminiProvider()
        result = await provider.call(api_key, "gemini-1.5-pro", blocks)
    """

    name = "google"

    def convert_block(self, block: ContentBlock) -> dict[str, Any]:
        if isinstance(block, TextBlock):
            return {"text": block.text}
        if isinstance(block, ImageBlock):
            return {
                "inline_data": {
                    "mime_type": block.media_type,
                    "data": block.data,
                }
            }
        if isinstance(block, DocumentBlock) and block.is_pdf:
            return {
                "inline_data": {
                    "mime_type": PDF_MEDIA_TYPE,
                    "data": block.data,
                }
            }
        return {"text": fallback_text(block.to_dict())}

    def build_request(
        self,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> VendorRequest:
        return VendorRequest(
            url=GOOGLE_API_BASE + GOOGLE_GENERATE_PATH.format(model=model),
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            json={
                "contents": [{"parts": self.convert_content(content)}],
                "generationConfig": {"maxOutputTokens": MAX_OUTPUT_TOKENS},
            },
        )

    def extract_text(self, data: Any) -> str:
        """candidates[0].content.parts[0].text."""
        return self._text_or_empty(
            dig(data, "candidates", 0, "content", "parts", 0, "text")
        )

    def normalize(self, data: Any, model: str) -> NormalizedResult:
        # Gemini 응답에는 모델명이 없으므로 요청 모델 사용
        return NormalizedResult(
            text=self.extract_text(data),
            usage=dig(data, "usageMetadata"),
            model=model,
            raw=data,
        )
