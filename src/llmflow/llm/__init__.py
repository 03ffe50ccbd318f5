"""LLM provider abstractions (OpenAI / Anthropic).

Design goals:
- Keep provider-specific SDKs isolated and imported only when first resolved.
- Provide a small, stable async interface: execute(prompt) / chat_completion(messages).
- Normalize usage and errors so nothing vendor-shaped leaks past an adapter.
"""

from .base import BaseLLMClient, LLMClient, ProviderConfig, SdkStatus
from .factory import ProviderResolver, get_default_resolver, resolve_llm, set_default_resolver
from .models import Models, Vendor, vendor_for_model
from .types import LLMMessage, LLMResponse, RunOptions, TokenUsage

__all__ = [
    "BaseLLMClient",
    "LLMClient",
    "LLMMessage",
    "LLMResponse",
    "Models",
    "ProviderConfig",
    "ProviderResolver",
    "RunOptions",
    "SdkStatus",
    "TokenUsage",
    "Vendor",
    "get_default_resolver",
    "resolve_llm",
    "set_default_resolver",
    "vendor_for_model",
]
