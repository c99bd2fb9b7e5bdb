"""
Selected Configuration Store.

현재 활성 provider/model 쌍 저장소.

구현:
- MemoryConfigStore: 프로세스 로컬 (오프라인 테스트/단일 인스턴스)
- RedisConfigStore: 영속 저장 (REDIS_URL 설정 시)

정책:
- 가용성 > 영속성: 백엔드 오류는 로그만 남기고 메모리 값으로 동작
- set()은 백엔드 쓰기 실패와 무관하게 항상 메모리 값 갱신
- 동시 변경은 last writer wins (락/버전 없음)
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from estimate_proxy.domain.constants import (
    CONFIG_STORE_KEY,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    REDIS_URL_ENV,
)
from estimate_proxy.domain.schemas import SelectedConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = SelectedConfig(provider=DEFAULT_PROVIDER, model=DEFAULT_MODEL)


class ConfigStore(ABC):
    """Selected Configuration 저장소 인터페이스."""

    #: 설정 API의 storage 필드 값
    name: str = ""

    @abstractmethod
    async def get(self) -> SelectedConfig:
        """현재 설정."""

    @abstractmethod
    async def set(self, config: SelectedConfig) -> SelectedConfig:
        """설정 덮어쓰기. 저장된 값 반환."""

    async def close(self) -> None:
        """연결 정리 (필요한 구현만)."""


class MemoryConfigStore(ConfigStore):
    """프로세스 로컬 저장소."""

    name = "memory"

    def __init__(self, default: SelectedConfig = DEFAULT_CONFIG) -> None:
        self._config = default

    async def get(self) -> SelectedConfig:
        return self._config

    async def set(self, config: SelectedConfig) -> SelectedConfig:
        self._config = config
        return config


class RedisConfigStore(ConfigStore):
    """
    Redis 저장소 (메모리 fallback 포함).

    Requires 'redis' package.
    값은 JSON 문자열 {"provider": ..., "model": ...}로 저장.
    """

    name = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        key: str = CONFIG_STORE_KEY,
        default: SelectedConfig = DEFAULT_CONFIG,
        client: Any = None,
    ) -> None:
        """
        Args:
            redis_url: Redis URL (client 미지정 시 필수)
            key: 설정 저장 키
            default: 백엔드에 값이 없을 때 사용할 기본값
            client: redis.asyncio.Redis 호환 클라이언트 (테스트 주입용)
        """
        if client is None:
            if not redis_url:
                raise ValueError(f"{REDIS_URL_ENV} must be set for RedisConfigStore")
            import redis.asyncio as redis

            client = redis.Redis.from_url(redis_url, decode_responses=True)

        self._client = client
        self._key = key
        self._memory = MemoryConfigStore(default)

    async def get(self) -> SelectedConfig:
        try:
            data = await self._client.get(self._key)
            if data:
                return SelectedConfig.from_dict(json.loads(data))
        except Exception as e:
            logger.error(f"Config store read failed, using in-memory config: {e}")
        return await self._memory.get()

    async def set(self, config: SelectedConfig) -> SelectedConfig:
        try:
            await self._client.set(self._key, json.dumps(config.to_dict()))
        except Exception as e:
            logger.error(f"Config store write failed, keeping in-memory config: {e}")
        return await self._memory.set(config)

    async def close(self) -> None:
        await self._client.aclose()


def create_config_store(
    environ: Mapping[str, str],
    default: SelectedConfig = DEFAULT_CONFIG,
    key: str = CONFIG_STORE_KEY,
) -> ConfigStore:
    """
    환경변수 기준으로 저장소 선택.

    REDIS_URL 있음 → RedisConfigStore, 없음 → MemoryConfigStore.
    Redis 클라이언트 생성 실패 시에도 메모리 저장소로 동작.
    """
    redis_url = environ.get(REDIS_URL_ENV)
    if not redis_url:
        logger.info("REDIS_URL not set, using in-memory config store")
        return MemoryConfigStore(default)

    try:
        return RedisConfigStore(redis_url=redis_url, key=key, default=default)
    except Exception as e:
        logger.error(f"Redis config store unavailable, using in-memory store: {e}")
        return MemoryConfigStore(default)
