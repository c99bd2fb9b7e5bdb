"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn estimate_proxy.app.main:app --reload
- 프로덕션: uv run uvicorn estimate_proxy.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estimate_proxy.app.providers.dispatcher import Dispatcher
from estimate_proxy.app.providers.registry import validate_selection
from estimate_proxy.app.routes import config, estimate, extract
from estimate_proxy.app.services.config_store import (
    DEFAULT_CONFIG,
    create_config_store,
)
from estimate_proxy.domain.constants import CONFIG_PATH_ENV, CONFIG_STORE_KEY
from estimate_proxy.domain.errors import ProxyError
from estimate_proxy.domain.schemas import SelectedConfig

logger = logging.getLogger(__name__)

# .env 로드 (CORS 설정을 읽기 전)
load_dotenv()

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        # 프로젝트 루트의 default.yaml
        config_path = (
            Path(env_path)
            if env_path
            else Path(__file__).parent.parent.parent / "default.yaml"
        )

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def config_section(config: dict, key: str) -> dict:
    """최상위 섹션. 키가 없거나 값이 비어 있으면 {}."""
    section = config.get(key)
    return section if isinstance(section, dict) else {}


def default_selection(config: dict) -> SelectedConfig:
    """
    cold start 기본 provider/model.

    설정 파일 값이 레지스트리에 없으면 경고 후 내장 기본값 사용.
    """
    ai_config = config_section(config, "ai")
    provider = ai_config.get("default_provider", DEFAULT_CONFIG.provider)
    model = ai_config.get("default_model", DEFAULT_CONFIG.model)
    try:
        return validate_selection(provider, model)
    except ProxyError as e:
        logger.warning(f"Invalid default selection in config ({e}), using built-in default")
        return DEFAULT_CONFIG


def configure_logging(level: str = "INFO") -> None:
    """기본 로그 포맷 설정."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 설정 저장소/dispatcher 생성
    종료 시: 저장소 연결 정리
    """
    # Startup
    app.state.config = load_config()
    app.state.environ = os.environ

    store_key = config_section(app.state.config, "config_store").get(
        "key", CONFIG_STORE_KEY
    )
    app.state.config_store = create_config_store(
        os.environ,
        default=default_selection(app.state.config),
        key=store_key,
    )
    app.state.dispatcher = Dispatcher()

    yield

    # Shutdown
    await app.state.config_store.close()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Estimate Proxy",
    description="멀티 벤더 LLM 추출 프록시 (Anthropic / Google / OpenAI)",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: 브라우저/데스크톱 클라이언트에서 직접 호출
_cors_origins = config_section(load_config(), "cors").get("allow_origins", ["*"])
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

app.include_router(extract.api_router, prefix="/api/extract", tags=["Extract API"])
app.include_router(config.api_router, prefix="/api/config", tags=["Config API"])
app.include_router(estimate.api_router, prefix="/api/estimate", tags=["Estimate API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    """서비스 안내."""
    return {
        "message": "Estimate Proxy",
        "endpoints": {
            "extract": "/api/extract",
            "config": "/api/config",
            "estimate": "/api/estimate",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "estimate_proxy.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
