"""
Pytest fixtures for the proxy tests.

테스트 구성:
- 네트워크 호출 없음: 벤더 HTTP는 httpx.MockTransport로 대체
- 실제 API 키 없음: environ 매핑 주입
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

from estimate_proxy.domain.schemas import (
    DocumentBlock,
    ImageBlock,
    TextBlock,
    UnknownBlock,
)

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Content Fixtures
# =============================================================================

# 1x1 흰색 PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)
PDF_BASE64 = "JVBERi0xLjQKJcfsj6IKMSAwIG9iago8PD4+CmVuZG9iagp0cmFpbGVyCjw8Pj4KJSVFT0YK"


@pytest.fixture
def text_block() -> TextBlock:
    return TextBlock(text="Extract all line items.")


@pytest.fixture
def image_block() -> ImageBlock:
    return ImageBlock(media_type="image/png", data=PNG_BASE64)


@pytest.fixture
def pdf_block() -> DocumentBlock:
    return DocumentBlock(data=PDF_BASE64)


@pytest.fixture
def unknown_block() -> UnknownBlock:
    return UnknownBlock(raw={"type": "audio", "source": {"data": "AAAA"}})


@pytest.fixture
def wire_content() -> list[dict[str, Any]]:
    """호출자가 보내는 형태의 content 배열 (PDF + 프롬프트)."""
    return [
        {
            "type": "document",
            "source": {
                "type": "base64",
                "media_type": "application/pdf",
                "data": PDF_BASE64,
            },
        },
        {"type": "text", "text": "Extract all line items."},
    ]


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


class RecordingTransport(httpx.MockTransport):
    """
    요청을 기록하고 고정 응답을 반환하는 transport.

    Usage:
        transport = RecordingTransport(200, {"choices": [...]})
        provider = OpenAIProvider(transport=transport)
        ...
        assert transport.requests[0].headers["authorization"] == "Bearer k"
    """

    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        text: str | None = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.text = text
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """RecordingTransport factory."""
    return RecordingTransport
