from __future__ import annotations

import importlib.util
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, ClassVar, List, Mapping, Optional, Protocol, Sequence, Union

from llmflow.errors import ConfigurationError

from .models import Vendor
from .telemetry import ApiErrorHandler, CallTelemetry, get_caller_details
from .types import LLMMessage, LLMResponse, RunOptions

MessageLike = Union[LLMMessage, Mapping[str, Any]]


@dataclass(frozen=True)
class ProviderConfig:
    vendor: Vendor
    api_key: str
    api_key_env: str
    timeout_s: float = 60.0
    base_url: Optional[str] = None


@dataclass(frozen=True)
class SdkStatus:
    module: str
    available: bool
    reason: str = ""


def check_sdk(module: str) -> SdkStatus:
    """Report whether ``module`` can be imported, without importing it."""

    if module in sys.modules:
        if sys.modules[module] is None:
            return SdkStatus(module, False, f"{module} is blocked in sys.modules")
        return SdkStatus(module, True)

    try:
        found = importlib.util.find_spec(module) is not None
    except (ImportError, ValueError) as e:
        return SdkStatus(module, False, str(e))

    if not found:
        return SdkStatus(module, False, f"No module named {module!r}")
    return SdkStatus(module, True)


class LLMClient(Protocol):
    """Uniform execution contract every provider adapter implements."""

    async def execute(self, prompt: str, options: Optional[RunOptions] = None) -> str:
        raise NotImplementedError

    async def chat_completion(
        self,
        messages: Sequence[MessageLike],
        options: Optional[RunOptions] = None,
    ) -> str:
        raise NotImplementedError


class BaseLLMClient(ABC):
    """Shared adapter plumbing: telemetry hooks and error translation.

    Subclasses set ``vendor``/``sdk_module``/``default_model``, build their SDK
    client in ``__init__`` and implement ``_complete``.
    """

    vendor: ClassVar[Vendor]
    sdk_module: ClassVar[str]
    install_extra: ClassVar[str] = ""
    default_model: ClassVar[str] = ""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        telemetry: Optional[CallTelemetry] = None,
        error_handler: Optional[ApiErrorHandler] = None,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError(
                f"Missing env var {config.api_key_env} for {self.vendor.value} API key"
            )
        self._cfg = config
        self._telemetry = telemetry or CallTelemetry()
        self._errors = error_handler or ApiErrorHandler(vendor=self.vendor.value)

    @classmethod
    def sdk_status(cls) -> SdkStatus:
        return check_sdk(cls.sdk_module)

    async def execute(self, prompt: str, options: Optional[RunOptions] = None) -> str:
        return await self.chat_completion([LLMMessage(role="user", content=prompt)], options)

    async def chat_completion(
        self,
        messages: Sequence[MessageLike],
        options: Optional[RunOptions] = None,
    ) -> str:
        opts = options or RunOptions()
        if not opts.model:
            opts = replace(opts, model=self.default_model)
        msgs: List[LLMMessage] = [LLMMessage.coerce(m) for m in messages]

        context = get_caller_details()
        start = self._telemetry.log_call_start(context)

        try:
            response = await self._complete(msgs, opts)
        except Exception as e:  # noqa: BLE001
            translated = self._errors.handle_api_error(e, context)
            if translated is e:
                raise
            raise translated from e

        duration = self._telemetry.log_call_complete(context, response.usage, opts, start)
        self._telemetry.log_token_usage(
            msgs, response.content, response.usage, context, opts, duration
        )
        return response.content

    @abstractmethod
    async def _complete(
        self, messages: List[LLMMessage], options: RunOptions
    ) -> LLMResponse:
        raise NotImplementedError


def drop_unset(**kwargs: Any) -> dict:
    """SDK calls reject explicit nulls for optional params; omit them instead."""
    return {k: v for k, v in kwargs.items() if v is not None}
