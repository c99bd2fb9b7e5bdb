"""
Anthropic (Claude) Provider.

content block은 거의 그대로 단일 user 턴으로 전달.
(내부 wire 형식이 Anthropic 호환이므로 변환이 필요 없음)
"""

from typing import Any

from estimate_proxy.domain.constants import (
    ANTHROPIC_MESSAGES_URL,
    ANTHROPIC_VERSION,
    MAX_OUTPUT_TOKENS,
)
from estimate_proxy.domain.schemas import ContentBlock, NormalizedResult

from .base import LLMProvider, VendorRequest, dig


class ClaudeProvider(LLMProvider):
    """
    Claude Messages API Provider.

    Usage:
        provider = ClaudeProvider()
        result = await provider.call(api_key, "claude-sonnet-4-20250514", blocks)
    """

    name = "anthropic"

    def convert_block(self, block: ContentBlock) -> dict[str, Any]:
        # UnknownBlock.to_dict()는 원본 dict 그대로
        return block.to_dict()

    def build_request(
        self,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> VendorRequest:
        return VendorRequest(
            url=ANTHROPIC_MESSAGES_URL,
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
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
        """content[0].text."""
        return self._text_or_empty(dig(data, "content", 0, "text"))

    def normalize(self, data: Any, model: str) -> NormalizedResult:
        return NormalizedResult(
            text=self.extract_text(data),
            usage=dig(data, "usage"),
            model=dig(data, "model") or model,
            raw=data,
        )
