"""
LLM Provider Abstraction.

벤더별 adapter (Anthropic, Google, OpenAI) + registry + dispatcher.
provider/model 목록은 registry만 SSOT.
"""

from .anthropic import ClaudeProvider
from .base import LLMProvider, VendorRequest
from .dispatcher import Dispatcher, call_provider
from .gemini import GeminiProvider
from .openai import OpenAIProvider
from .registry import (
    PROVIDERS,
    ModelOption,
    ProviderDescriptor,
    get_provider,
    is_valid_model,
    validate_selection,
)

__all__ = [
    "LLMProvider",
    "VendorRequest",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "Dispatcher",
    "call_provider",
    "PROVIDERS",
    "ModelOption",
    "ProviderDescriptor",
    "get_provider",
    "is_valid_model",
    "validate_selection",
]
