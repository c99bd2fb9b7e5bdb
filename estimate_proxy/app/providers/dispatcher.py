"""
Provider Dispatcher.

provider id → adapter 고정 매핑으로 위임만 수행.
알 수 없는 id는 네트워크 호출 전에 UnknownProviderError.
재시도/다른 provider로의 fallback 없음.
"""

from collections.abc import Mapping

from estimate_proxy.domain.errors import UnknownProviderError
from estimate_proxy.domain.schemas import ContentBlock, NormalizedResult

from .anthropic import ClaudeProvider
from .base import LLMProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider


def default_adapters() -> dict[str, LLMProvider]:
    """레지스트리 provider id별 기본 adapter."""
    return {
        "anthropic": ClaudeProvider(),
        "google": GeminiProvider(),
        "openai": OpenAIProvider(),
    }


class Dispatcher:
    """
    provider id로 adapter 선택 후 호출.

    Usage:
        dispatcher = Dispatcher()
        result = await dispatcher.dispatch("openai", api_key, "gpt-4o", blocks)
    """

    def __init__(self, adapters: Mapping[str, LLMProvider] | None = None) -> None:
        self.adapters: Mapping[str, LLMProvider] = (
            adapters if adapters is not None else default_adapters()
        )

    async def dispatch(
        self,
        provider: str,
        api_key: str,
        model: str,
        content: list[ContentBlock],
    ) -> NormalizedResult:
        """
        Raises:
            UnknownProviderError: 매핑에 없는 provider id
            VendorHTTPError: adapter가 전파
        """
        adapter = self.adapters.get(provider)
        if adapter is None:
            raise UnknownProviderError(provider)
        return await adapter.call(api_key, model, content)


_default_dispatcher: Dispatcher | None = None


async def call_provider(
    provider: str,
    api_key: str,
    model: str,
    content: list[ContentBlock],
) -> NormalizedResult:
    """기본 Dispatcher로 호출."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = Dispatcher()
    return await _default_dispatcher.dispatch(provider, api_key, model, content)
