"""
test_anthropic.py - Claude Provider 테스트

검증 포인트:
- 요청 wire 형식: URL, x-api-key, anthropic-version, max_tokens=4000
- content block은 받은 그대로 전달 (추가 키, 알 수 없는 block 포함)
- 응답 정규화: content[0].text, usage, model
- non-2xx → VendorHTTPError (status + payload 원문)
"""

import pytest

from estimate_proxy.app.providers.anthropic import ClaudeProvider
from estimate_proxy.domain.errors import VendorHTTPError
from estimate_proxy.domain.schemas import UnknownBlock, parse_content

MODEL = "claude-sonnet-4-20250514"


def make_anthropic_response(
    text: str = "[]",
    model: str = MODEL,
) -> dict:
    """Anthropic Messages API 응답 payload."""
    return {
        "id": "msg_test_default",
        "type": "message",
        "role": "assistant",
        "model": model,
        "content": [{"type": "text", "text": text}],
        "usage": {"input_tokens": 12, "output_tokens": 34},
    }


# =============================================================================
# 요청 구성 테스트
# =============================================================================


class TestBuildRequest:
    """build_request 테스트 (네트워크 없음)."""

    def test_endpoint_and_headers(self, text_block):
        """URL + 인증/버전 헤더."""
        request = ClaudeProvider().build_request("sk-test", MODEL, [text_block])

        assert request.url == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert request.headers["Content-Type"] == "application/json"
        assert request.params == {}

    def test_text_only_body_shape(self, text_block):
        """단일 text block 요청 본문."""
        request = ClaudeProvider().build_request("sk-test", MODEL, [text_block])

        assert request.json == {
            "model": MODEL,
            "max_tokens": 4000,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": "Extract all line items."}],
                }
            ],
        }

    def test_blocks_pass_through_in_order(self, pdf_block, image_block, text_block):
        """document/image/text 순서 그대로 Anthropic 형식 유지."""
        request = ClaudeProvider().build_request(
            "sk-test", MODEL, [pdf_block, image_block, text_block]
        )
        content = request.json["messages"][0]["content"]

        assert [c["type"] for c in content] == ["document", "image", "text"]
        assert content[0]["source"] == {
            "type": "base64",
            "media_type": "application/pdf",
            "data": pdf_block.data,
        }
        assert content[1]["source"]["media_type"] == "image/png"

    def test_unknown_block_passed_through(self, unknown_block):
        """알 수 없는 block은 원문 그대로 전달."""
        request = ClaudeProvider().build_request("sk-test", MODEL, [unknown_block])

        assert request.json["messages"][0]["content"] == [unknown_block.raw]

    def test_extra_block_keys_preserved(self):
        """cache_control, title 등 추가 키도 그대로 전달."""
        wire = [
            {"type": "text", "text": "hi", "cache_control": {"type": "ephemeral"}},
            {
                "type": "document",
                "source": {"type": "base64", "media_type": "application/pdf", "data": "JVBE"},
                "title": "Quote 42",
                "citations": {"enabled": True},
            },
        ]

        request = ClaudeProvider().build_request("sk-test", MODEL, parse_content(wire))

        assert request.json["messages"][0]["content"] == wire

    def test_text_source_document_unchanged(self):
        """source.type=text 문서는 base64로 바뀌지 않고 원문 그대로."""
        wire = [
            {
                "type": "document",
                "source": {"type": "text", "media_type": "text/plain", "data": "hello"},
                "title": "T",
            }
        ]

        blocks = parse_content(wire)
        request = ClaudeProvider().build_request("sk-test", MODEL, blocks)

        assert isinstance(blocks[0], UnknownBlock)
        assert request.json["messages"][0]["content"] == wire


# =============================================================================
# 응답 정규화 테스트
# =============================================================================


class TestNormalize:
    """normalize 테스트."""

    def test_first_content_text(self):
        """content[0].text 추출."""
        data = make_anthropic_response(text="hello")
        result = ClaudeProvider().normalize(data, MODEL)

        assert result.text == "hello"
        assert result.usage == {"input_tokens": 12, "output_tokens": 34}
        assert result.model == MODEL
        assert result.raw is data

    def test_missing_content_defaults_to_empty(self):
        """content 없음 → ""."""
        result = ClaudeProvider().normalize({"model": MODEL}, MODEL)

        assert result.text == ""
        assert result.usage is None

    def test_empty_content_list(self):
        """빈 content 배열 → ""."""
        result = ClaudeProvider().normalize({"content": []}, MODEL)

        assert result.text == ""

    def test_non_text_first_block(self):
        """첫 block에 text 없음 → ""."""
        result = ClaudeProvider().normalize(
            {"content": [{"type": "tool_use", "input": {}}]}, MODEL
        )

        assert result.text == ""

    def test_model_falls_back_to_requested(self):
        """응답에 model 없음 → 요청 모델."""
        result = ClaudeProvider().normalize({"content": []}, MODEL)

        assert result.model == MODEL


# =============================================================================
# call 테스트 (MockTransport)
# =============================================================================


class TestCall:
    """call 테스트."""

    @pytest.mark.asyncio
    async def test_successful_call(self, make_transport, text_block):
        """성공 → 정규화 결과, POST 1회."""
        transport = make_transport(200, make_anthropic_response(text="[{}]"))
        provider = ClaudeProvider(transport=transport)

        result = await provider.call("sk-test", MODEL, [text_block])

        assert result.text == "[{}]"
        assert result.model == MODEL
        assert len(transport.requests) == 1
        assert transport.last_request.method == "POST"
        assert transport.last_request.headers["x-api-key"] == "sk-test"
        assert transport.last_json["max_tokens"] == 4000

    @pytest.mark.asyncio
    async def test_vendor_error_propagated(self, make_transport, text_block):
        """non-2xx → VendorHTTPError, payload 원문 보존, 재시도 없음."""
        payload = {
            "type": "error",
            "error": {"type": "authentication_error", "message": "invalid x-api-key"},
        }
        transport = make_transport(401, payload)
        provider = ClaudeProvider(transport=transport)

        with pytest.raises(VendorHTTPError) as exc_info:
            await provider.call("bad-key", MODEL, [text_block])

        assert exc_info.value.status == 401
        assert exc_info.value.payload == payload
        assert exc_info.value.provider == "anthropic"
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_overloaded_not_retried(self, make_transport, text_block):
        """529 overloaded도 재시도하지 않음."""
        transport = make_transport(529, {"type": "error", "error": {"type": "overloaded_error"}})
        provider = ClaudeProvider(transport=transport)

        with pytest.raises(VendorHTTPError) as exc_info:
            await provider.call("sk-test", MODEL, [text_block])

        assert exc_info.value.status_code == 529
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, make_transport, text_block):
        """JSON 아닌 에러 본문 → {"error": text}."""
        transport = make_transport(502, text="Bad Gateway")
        provider = ClaudeProvider(transport=transport)

        with pytest.raises(VendorHTTPError) as exc_info:
            await provider.call("sk-test", MODEL, [text_block])

        assert exc_info.value.payload == {"error": "Bad Gateway"}
