"""
Config Routes: Selected Configuration 조회/변경.

- GET /api/config → {current, providers, storage}
- POST /api/config → 관리자 비밀번호 확인 후 provider/model 변경
- 그 외 메서드 → 405

POST 검증 순서:
1. ADMIN_PASSWORD 미설정 → 500
2. 비밀번호 불일치 → 401
3. provider/model이 레지스트리에 없음 → 400
"""

import hmac
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from estimate_proxy.app.providers.registry import providers_table, validate_selection
from estimate_proxy.app.services.config_store import ConfigStore
from estimate_proxy.domain.constants import ADMIN_PASSWORD_ENV
from estimate_proxy.domain.errors import (
    AdminPasswordNotConfiguredError,
    ProxyError,
    UnauthorizedError,
    UnknownProviderError,
)
from estimate_proxy.domain.schemas import SelectedConfig

from .common import error_response, method_not_allowed, preflight_ok, read_json_body

logger = logging.getLogger(__name__)

api_router = APIRouter()


def require_admin_password(environ: Mapping[str, str]) -> str:
    """
    Raises:
        AdminPasswordNotConfiguredError: ADMIN_PASSWORD 미설정 또는 빈 값
    """
    admin_password = environ.get(ADMIN_PASSWORD_ENV)
    if not admin_password:
        raise AdminPasswordNotConfiguredError()
    return admin_password


def check_admin_password(password: Any, admin_password: str) -> None:
    """
    관리자 비밀번호 확인 (상수 시간 비교).

    Raises:
        UnauthorizedError: 불일치
    """
    if not isinstance(password, str) or not hmac.compare_digest(
        password.encode(), admin_password.encode()
    ):
        raise UnauthorizedError()


def parse_selection(body: dict[str, Any]) -> SelectedConfig:
    """본문의 provider/model 검증."""
    provider = body.get("provider")
    model = body.get("model")
    if not isinstance(provider, str):
        raise UnknownProviderError(str(provider))
    if not isinstance(model, str):
        model = str(model)
    return validate_selection(provider, model)


@api_router.get("")
async def get_config(request: Request) -> dict[str, Any]:
    """현재 설정 + 선택 가능한 provider 목록."""
    store: ConfigStore = request.app.state.config_store
    current = await store.get()
    return {
        "current": current.to_dict(),
        "providers": providers_table(),
        "storage": store.name,
    }


@api_router.post("")
async def set_config(request: Request) -> JSONResponse:
    """
    설정 변경.

    Body:
        {"password", "provider", "model"}
    """
    store: ConfigStore = request.app.state.config_store

    try:
        admin_password = require_admin_password(request.app.state.environ)
        body = await read_json_body(request)
        check_admin_password(body.get("password"), admin_password)
        config = parse_selection(body)
    except ProxyError as e:
        if isinstance(e, UnauthorizedError):
            logger.warning("Config update rejected: invalid password")
        return error_response(e.status_code, e.message)

    saved = await store.set(config)
    logger.info(f"Selected configuration updated: {saved.provider}/{saved.model}")
    return JSONResponse(
        status_code=200,
        content={"success": True, "config": saved.to_dict()},
    )


@api_router.options("")
async def config_options() -> Response:
    return preflight_ok()


@api_router.api_route("", methods=["PUT", "PATCH", "DELETE"])
async def config_method_not_allowed() -> JSONResponse:
    return method_not_allowed()
