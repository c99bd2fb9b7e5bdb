"""
Estimate Service: 견적서/인보이스 파일 → 품목 행(line item).

업로드 화면이 하던 처리를 서버에서 제공:
- 파일 block (PDF → document, 그 외 → image) + 고정 추출 프롬프트 구성
- 모델 응답 텍스트에서 JSON 배열 추출
- 스프레드시트 붙여넣기용 TSV 변환
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from estimate_proxy.domain.constants import IMAGE_MEDIA_PREFIX, PDF_MEDIA_TYPE
from estimate_proxy.domain.errors import ErrorCodes, MalformedRequestError, ProxyError
from estimate_proxy.domain.schemas import (
    ContentBlock,
    DocumentBlock,
    ImageBlock,
    TextBlock,
)

ESTIMATE_PROMPT = """Extract all line items from this estimate/invoice/quote and return ONLY a JSON array. Each item should have these exact fields:
- ln (line number, integer starting at 1)
- partNum (part number or identifier - use the description/product name if no part number exists)
- partDesc (description of the item/service)
- uom (unit of measure: "EA" for each/individual items, "LOT" for bulk/services/flat fees)
- unitPrice (price per unit as a number)
- qty (quantity as a number)
- lineType (always "Regular" unless specified otherwise)

Return ONLY the JSON array, no other text. Example format:
[{"ln":1,"partNum":"ABC-123","partDesc":"Machining services","uom":"EA","unitPrice":275,"qty":2,"lineType":"Regular"}]"""

# 첫 '[' 부터 마지막 ']' 까지 (greedy)
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

TSV_COLUMNS = ("ln", "partNum", "partDesc", "uom", "unitPrice", "qty", "lineType")


class LineItemParseError(ProxyError):
    """모델 응답에서 품목 배열을 찾거나 파싱하지 못함."""

    code = ErrorCodes.LINE_ITEM_PARSE_FAILED
    status_code = 422


@dataclass
class LineItem:
    """견적 품목 행."""
    ln: Any = None
    part_num: Any = None
    part_desc: Any = None
    uom: Any = None
    unit_price: Any = None
    qty: Any = None
    line_type: Any = "Regular"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            ln=data.get("ln"),
            part_num=data.get("partNum"),
            part_desc=data.get("partDesc"),
            uom=data.get("uom"),
            unit_price=data.get("unitPrice"),
            qty=data.get("qty"),
            line_type=data.get("lineType", "Regular"),
        )

    def to_dict(self) -> dict[str, Any]:
        """클라이언트 호환 키 (camelCase)."""
        return {
            "ln": self.ln,
            "partNum": self.part_num,
            "partDesc": self.part_desc,
            "uom": self.uom,
            "unitPrice": self.unit_price,
            "qty": self.qty,
            "lineType": self.line_type,
        }


def build_estimate_content(data: str, media_type: str) -> list[ContentBlock]:
    """
    파일 block + 추출 프롬프트 block.

    Args:
        data: base64 파일 데이터
        media_type: 파일 MIME 타입

    Raises:
        MalformedRequestError: data/media_type 누락, 이미지/PDF가 아닌 media_type
    """
    if not isinstance(data, str) or not data:
        raise MalformedRequestError("Invalid request: data (base64) required")
    if not isinstance(media_type, str) or not media_type:
        raise MalformedRequestError("Invalid request: mediaType required")
    if media_type != PDF_MEDIA_TYPE and not media_type.startswith(IMAGE_MEDIA_PREFIX):
        raise MalformedRequestError(
            f"Invalid request: unsupported mediaType {media_type} "
            "(image/* or application/pdf)"
        )

    file_block: ContentBlock
    if media_type == PDF_MEDIA_TYPE:
        file_block = DocumentBlock(data=data)
    else:
        file_block = ImageBlock(media_type=media_type, data=data)

    return [file_block, TextBlock(text=ESTIMATE_PROMPT)]


def parse_line_items(text: str) -> list[LineItem]:
    """
    응답 텍스트 → 품목 목록.

    Raises:
        LineItemParseError: JSON 배열 없음, JSON 오류, 객체가 아닌 항목
    """
    match = _JSON_ARRAY_RE.search(text)
    if match is None:
        raise LineItemParseError("No JSON array found in response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise LineItemParseError(f"Invalid JSON array in response: {e}") from e

    if not all(isinstance(row, dict) for row in data):
        raise LineItemParseError("Line items must be JSON objects")

    return [LineItem.from_dict(row) for row in data]


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    # 275.0 → "275"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_tsv(items: list[LineItem]) -> str:
    """품목 목록 → 탭 구분 텍스트 (행당 한 줄)."""
    rows = []
    for item in items:
        data = item.to_dict()
        rows.append("\t".join(_format_cell(data[col]) for col in TSV_COLUMNS))
    return "\n".join(rows)
