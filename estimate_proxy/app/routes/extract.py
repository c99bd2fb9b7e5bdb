"""
Extract Routes: 추출 요청 프록시.

- POST /api/extract → 선택된 provider 호출, 외부 응답 envelope 반환
- 그 외 메서드 → 405

에러 매핑:
- 벤더 non-2xx → 같은 status + 벤더 payload 원문
- 로컬 검증 오류 → 해당 status + {"error"}
- 기타 예외 → 500 {"error": "Internal server error", "details"}
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from estimate_proxy.domain.errors import (
    ProxyError,
    UnknownProviderError,
    VendorHTTPError,
)

from .common import (
    error_response,
    get_extraction_service,
    method_not_allowed,
    preflight_ok,
    read_json_body,
)

logger = logging.getLogger(__name__)

api_router = APIRouter()


@api_router.post("")
async def extract(request: Request) -> JSONResponse:
    """
    추출 요청.

    Body:
        {"content": [content block, ...]}

    Returns:
        {"content": [{"type": "text", "text"}], "model", "usage", "provider"}
    """
    try:
        body = await read_json_body(request)
        service = get_extraction_service(request)
        envelope = await service.extract(body.get("content"))

    except VendorHTTPError as e:
        return JSONResponse(status_code=e.status, content=e.payload)

    except UnknownProviderError as e:
        # 저장된 설정의 provider 오류 → 서버 측 설정 문제
        logger.error(f"Configured provider is not registered: {e.provider}")
        return error_response(500, e.message)

    except ProxyError as e:
        return error_response(e.status_code, e.message)

    except Exception as e:
        logger.error(f"Proxy error: {e}", exc_info=True)
        return error_response(500, "Internal server error", details=str(e))

    return JSONResponse(status_code=200, content=envelope)


@api_router.options("")
async def extract_options() -> Response:
    return preflight_ok()


@api_router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"])
async def extract_method_not_allowed() -> JSONResponse:
    return method_not_allowed()
