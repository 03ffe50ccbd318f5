from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from llmflow.errors import ProviderApiError, ProviderUnavailableError

from .base import BaseLLMClient, ProviderConfig, drop_unset
from .models import Vendor
from .telemetry import ApiErrorHandler, CallTelemetry
from .types import LLMMessage, LLMResponse, RunOptions, TokenUsage

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletion


def _to_response(completion: "ChatCompletion") -> LLMResponse:
    content = completion.choices[0].message.content if completion.choices else None
    if not content:
        raise ProviderApiError(
            "Message content is null or undefined", vendor=Vendor.OPENAI.value
        )

    usage = completion.usage
    return LLMResponse(
        content=content,
        usage=TokenUsage(
            prompt_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
            completion_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
            total_tokens=int(getattr(usage, "total_tokens", 0) or 0),
        ),
    )


class OpenAILLM(BaseLLMClient):
    """OpenAI chat completions via the async SDK client."""

    vendor = Vendor.OPENAI
    sdk_module = "openai"
    install_extra = "openai"
    default_model = "gpt-3.5-turbo"

    def __init__(
        self,
        config: ProviderConfig,
        *,
        telemetry: Optional[CallTelemetry] = None,
        error_handler: Optional[ApiErrorHandler] = None,
    ) -> None:
        super().__init__(config, telemetry=telemetry, error_handler=error_handler)

        try:
            from openai import AsyncOpenAI  # type: ignore
        except ImportError as e:
            raise ProviderUnavailableError(
                "openai SDK not installed. Add dependency 'openai' or install llmflow with the openai extra."
            ) from e

        self._client = AsyncOpenAI(
            **drop_unset(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_s,
            )
        )

    async def _complete(
        self, messages: List[LLMMessage], options: RunOptions
    ) -> LLMResponse:
        completion = await self._client.chat.completions.create(
            **drop_unset(
                model=options.model,
                messages=[m.to_dict() for m in messages],
                max_tokens=options.max_tokens,
                temperature=options.temperature,
                top_p=options.top_p,
                frequency_penalty=options.frequency_penalty,
                presence_penalty=options.presence_penalty,
                stop=options.stop_sequences,
            )
        )
        return _to_response(completion)
