"""
Route helpers: JSON 에러 응답, 요청 본문 파싱, 서비스 조립.

에러 응답 본문은 항상 {"error": message} (+ 선택적 details).
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from estimate_proxy.app.services.extract import ExtractionService
from estimate_proxy.domain.errors import MalformedRequestError


def error_response(
    status_code: int,
    message: str,
    **extra: Any,
) -> JSONResponse:
    """{"error": message} 응답."""
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def method_not_allowed() -> JSONResponse:
    return error_response(405, "Method not allowed")


def preflight_ok() -> Response:
    """CORS 헤더 없는 단순 OPTIONS 요청용 200."""
    return Response(status_code=200)


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    요청 본문 → dict.

    Raises:
        MalformedRequestError: JSON이 아니거나 객체가 아님
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise MalformedRequestError("Invalid request: JSON body required") from e

    if not isinstance(body, dict):
        raise MalformedRequestError("Invalid request: JSON object required")
    return body


def get_extraction_service(request: Request) -> ExtractionService:
    """app.state에 조립된 구성요소로 ExtractionService 생성."""
    state = request.app.state
    return ExtractionService(
        store=state.config_store,
        dispatcher=state.dispatcher,
        environ=state.environ,
    )
