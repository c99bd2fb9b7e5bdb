"""
Estimate Routes: 견적서 파일 → 품목 행.

- POST /api/estimate → {items, tsv, model, provider, usage}
- 그 외 메서드 → 405
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from estimate_proxy.app.services.estimate import (
    LineItemParseError,
    build_estimate_content,
    parse_line_items,
    to_tsv,
)
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

PARSE_FAILED_MESSAGE = "Could not parse the response. Please try again."


@api_router.post("")
async def extract_estimate(request: Request) -> JSONResponse:
    """
    견적서 품목 추출.

    Body:
        {"data": base64, "mediaType": "application/pdf" | "image/..."}
    """
    try:
        body = await read_json_body(request)
        blocks = build_estimate_content(body.get("data"), body.get("mediaType"))
        service = get_extraction_service(request)
        result, provider = await service.run(blocks)
        items = parse_line_items(result.text)

    except VendorHTTPError as e:
        return JSONResponse(status_code=e.status, content=e.payload)

    except LineItemParseError as e:
        logger.warning(f"Line item parse failed: {e.message}")
        return error_response(e.status_code, PARSE_FAILED_MESSAGE, text=result.text)

    except UnknownProviderError as e:
        return error_response(500, e.message)

    except ProxyError as e:
        return error_response(e.status_code, e.message)

    except Exception as e:
        logger.error(f"Estimate extraction failed: {e}", exc_info=True)
        return error_response(500, "Internal server error", details=str(e))

    return JSONResponse(
        status_code=200,
        content={
            "items": [item.to_dict() for item in items],
            "tsv": to_tsv(items),
            "model": result.model,
            "provider": provider,
            "usage": result.usage,
        },
    )


@api_router.options("")
async def estimate_options() -> Response:
    return preflight_ok()


@api_router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"])
async def estimate_method_not_allowed() -> JSONResponse:
    return method_not_allowed()
