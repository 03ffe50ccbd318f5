from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional, Type, Union

from llmflow import logger as logger_mod
from llmflow.config import Settings
from llmflow.errors import ProviderUnavailableError

from .anthropic_client import AnthropicLLM
from .base import BaseLLMClient, LLMClient
from .models import Vendor, model_name, vendor_for_model
from .openai_client import OpenAILLM

log = logger_mod.get_logger()

ADAPTERS: Dict[Vendor, Type[BaseLLMClient]] = {
    Vendor.OPENAI: OpenAILLM,
    Vendor.ANTHROPIC: AnthropicLLM,
}


class ProviderResolver:
    """Resolve model identifiers to memoized provider adapters.

    One adapter per vendor; every model of that vendor shares the handle.

    Providers:
    - openai (gpt-*, chatgpt-*, o1/o3/o4*)
    - anthropic (claude-*)

    Extend by registering a new adapter class for a Vendor.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        adapters: Optional[Mapping[Vendor, Type[BaseLLMClient]]] = None,
    ) -> None:
        self._settings = settings
        self._adapters: Dict[Vendor, Type[BaseLLMClient]] = dict(adapters or ADAPTERS)
        self._cache: Dict[Vendor, LLMClient] = {}

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    def register(self, vendor: Vendor, adapter_cls: Type[BaseLLMClient]) -> None:
        self._adapters[vendor] = adapter_cls
        self._cache.pop(vendor, None)

    def cached(self, vendor: Vendor) -> Optional[LLMClient]:
        return self._cache.get(vendor)

    def clear(self) -> None:
        self._cache.clear()

    async def resolve(self, model: Union[str, Enum]) -> LLMClient:
        vendor = vendor_for_model(model)

        handle = self._cache.get(vendor)
        if handle is not None:
            return handle

        adapter_cls = self._adapters.get(vendor)
        if adapter_cls is None:
            raise ProviderUnavailableError(
                f"No adapter registered for vendor {vendor.value!r} (model {model_name(model)!r})"
            )

        status = adapter_cls.sdk_status()
        if not status.available:
            extra = adapter_cls.install_extra or vendor.value
            raise ProviderUnavailableError(
                f"{vendor.value} SDK is not available ({status.reason}). "
                f"Install it with: pip install 'llmflow[{extra}]'"
            )

        handle = adapter_cls(self.settings.provider_config(vendor))
        self._cache[vendor] = handle
        log.info(f"Resolved {model_name(model)!r} to {adapter_cls.__name__}")
        return handle


_default_resolver: Optional[ProviderResolver] = None


def get_default_resolver() -> ProviderResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ProviderResolver()
    return _default_resolver


def set_default_resolver(resolver: Optional[ProviderResolver]) -> None:
    """Replace (or with None, reset) the process-wide resolver."""
    global _default_resolver
    _default_resolver = resolver


async def resolve_llm(model: Union[str, Enum]) -> LLMClient:
    return await get_default_resolver().resolve(model)
