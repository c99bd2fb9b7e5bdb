"""
Application Services.

역할:
- config_store: Selected Configuration 저장소 (memory / redis)
- extract: 선택된 provider 호출 + 외부 응답 envelope
- estimate: 견적서 품목 추출 보조 (프롬프트, JSON 배열 파싱, TSV)
"""

from .config_store import (
    ConfigStore,
    MemoryConfigStore,
    RedisConfigStore,
    create_config_store,
)
from .estimate import LineItem, build_estimate_content, parse_line_items, to_tsv
from .extract import ExtractionService, resolve_credential, to_envelope

__all__ = [
    "ConfigStore",
    "MemoryConfigStore",
    "RedisConfigStore",
    "create_config_store",
    "ExtractionService",
    "resolve_credential",
    "to_envelope",
    "LineItem",
    "build_estimate_content",
    "parse_line_items",
    "to_tsv",
]
