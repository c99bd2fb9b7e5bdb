"""
Data schemas for the proxy.

규칙:
- 요청 = 순서 있는 content block 목록 (비어 있으면 안 됨)
- 변환 시 순서 보존
- 알 수 없는 block은 버리지 않고 UnknownBlock으로 보존 (벤더별 fallback 처리)
- 파싱한 block도 원본 wire dict를 보존 (Anthropic은 그대로 전달)

Wire 형식 (Anthropic 호환, 호출자가 보내는 형태):
    {"type": "text", "text": "..."}
    {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "..."}}
    {"type": "document", "source": {"type": "base64", "media_type": "application/pdf", "data": "..."}}
"""

from dataclasses import dataclass, field
from typing import Any

from .constants import (
    BLOCK_TYPE_DOCUMENT,
    BLOCK_TYPE_IMAGE,
    BLOCK_TYPE_TEXT,
    PDF_MEDIA_TYPE,
    SOURCE_TYPE_BASE64,
)
from .errors import MalformedRequestError

# =============================================================================
# Content Blocks
# =============================================================================


@dataclass(frozen=True)
class TextBlock:
    """텍스트 block."""
    text: str
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        if self.raw is not None:
            return self.raw
        return {"type": BLOCK_TYPE_TEXT, "text": self.text}


@dataclass(frozen=True)
class ImageBlock:
    """base64 이미지 block."""
    media_type: str
    data: str
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        if self.raw is not None:
            return self.raw
        return {
            "type": BLOCK_TYPE_IMAGE,
            "source": {
                "type": SOURCE_TYPE_BASE64,
                "media_type": self.media_type,
                "data": self.data,
            },
        }


@dataclass(frozen=True)
class DocumentBlock:
    """base64 문서 block (PDF)."""
    data: str
    media_type: str = PDF_MEDIA_TYPE
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    @property
    def is_pdf(self) -> bool:
        return self.media_type == PDF_MEDIA_TYPE

    def to_dict(self) -> dict[str, Any]:
        if self.raw is not None:
            return self.raw
        return {
            "type": BLOCK_TYPE_DOCUMENT,
            "source": {
                "type": SOURCE_TYPE_BASE64,
                "media_type": self.media_type,
                "data": self.data,
            },
        }


@dataclass(frozen=True)
class UnknownBlock:
    """
    인식하지 못한 block.

    원본 dict를 그대로 보존. 벤더 변환기가 JSON 문자열 텍스트로
    강등하거나 (Google, OpenAI) 원문 그대로 전달 (Anthropic).
    """
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return self.raw


ContentBlock = TextBlock | ImageBlock | DocumentBlock | UnknownBlock


def parse_content_block(item: dict[str, Any]) -> ContentBlock:
    """
    wire dict → ContentBlock.

    원본 dict는 raw로 보존 (cache_control, title 등 추가 키 포함).
    형식이 맞지 않거나 base64가 아닌 image/document도 에러 대신
    UnknownBlock으로 보존.
    """
    raw = dict(item)
    block_type = item.get("type")

    if block_type == BLOCK_TYPE_TEXT and isinstance(item.get("text"), str):
        return TextBlock(text=item["text"], raw=raw)

    if block_type in (BLOCK_TYPE_IMAGE, BLOCK_TYPE_DOCUMENT):
        source = item.get("source")
        if isinstance(source, dict) and source.get("type") == SOURCE_TYPE_BASE64:
            media_type = source.get("media_type")
            data = source.get("data")
            if isinstance(media_type, str) and isinstance(data, str):
                if block_type == BLOCK_TYPE_IMAGE:
                    return ImageBlock(media_type=media_type, data=data, raw=raw)
                return DocumentBlock(media_type=media_type, data=data, raw=raw)

    return UnknownBlock(raw=raw)


def parse_content(content: Any) -> list[ContentBlock]:
    """
    요청의 content 값 → ContentBlock 목록.

    Raises:
        MalformedRequestError: 배열이 아님, 빈 배열, 객체가 아닌 항목 포함
    """
    if not isinstance(content, list) or not content:
        raise MalformedRequestError("Invalid request: content array required")

    blocks: list[ContentBlock] = []
    for index, item in enumerate(content):
        if not isinstance(item, dict):
            raise MalformedRequestError(
                f"Invalid request: content[{index}] must be an object",
                index=index,
            )
        blocks.append(parse_content_block(item))
    return blocks


# =============================================================================
# Normalized Result
# =============================================================================


@dataclass
class NormalizedResult:
    """
    벤더 응답 정규화 결과.

    text는 추출 실패 시 항상 "" (None 금지).
    usage는 벤더 형식 그대로 (변환 없음).
    """
    text: str = ""
    usage: dict[str, Any] | None = None
    model: str = ""
    raw: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "usage": self.usage,
            "model": self.model,
            "raw": self.raw,
        }


# =============================================================================
# Selected Configuration
# =============================================================================


@dataclass(frozen=True)
class SelectedConfig:
    """현재 활성 provider/model 쌍."""
    provider: str
    model: str

    def to_dict(self) -> dict[str, str]:
        return {"provider": self.provider, "model": self.model}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectedConfig":
        return cls(provider=str(data["provider"]), model=str(data["model"]))
