from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from llmflow.errors import ProviderUnavailableError

from .base import BaseLLMClient, ProviderConfig, drop_unset
from .models import Vendor
from .telemetry import ApiErrorHandler, CallTelemetry
from .types import LLMMessage, LLMResponse, RunOptions, TokenUsage

if TYPE_CHECKING:
    from anthropic.types import Message

DEFAULT_MAX_TOKENS = 500


def _split_system(messages: List[LLMMessage]) -> Tuple[Optional[str], List[dict]]:
    # The Messages API takes system text as a separate parameter.
    system = [m.content for m in messages if m.role == "system"]
    turns = [m.to_dict() for m in messages if m.role != "system"]
    return ("\n\n".join(system) if system else None), turns


def _to_response(message: "Message") -> LLMResponse:
    content = "".join(
        block.text for block in message.content if getattr(block, "type", None) == "text"
    )
    input_tokens = int(message.usage.input_tokens or 0)
    output_tokens = int(message.usage.output_tokens or 0)
    return LLMResponse(
        content=content,
        usage=TokenUsage(
            prompt_tokens=input_tokens,
            completion_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        ),
    )


class AnthropicLLM(BaseLLMClient):
    """Anthropic Messages API via the async SDK client."""

    vendor = Vendor.ANTHROPIC
    sdk_module = "anthropic"
    install_extra = "anthropic"
    default_model = "claude-3-opus-20240229"

    def __init__(
        self,
        config: ProviderConfig,
        *,
        telemetry: Optional[CallTelemetry] = None,
        error_handler: Optional[ApiErrorHandler] = None,
    ) -> None:
        super().__init__(config, telemetry=telemetry, error_handler=error_handler)

        try:
            from anthropic import AsyncAnthropic  # type: ignore
        except ImportError as e:
            raise ProviderUnavailableError(
                "anthropic SDK not installed. Add dependency 'anthropic' or install llmflow with the anthropic extra."
            ) from e

        self._client = AsyncAnthropic(
            **drop_unset(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_s,
            )
        )

    async def _complete(
        self, messages: List[LLMMessage], options: RunOptions
    ) -> LLMResponse:
        system, turns = _split_system(messages)
        message = await self._client.messages.create(
            **drop_unset(
                model=options.model,
                messages=turns,
                system=system,
                max_tokens=(
                    DEFAULT_MAX_TOKENS if options.max_tokens is None else options.max_tokens
                ),
                temperature=options.temperature,
                top_p=options.top_p,
                stop_sequences=options.stop_sequences,
            )
        )
        return _to_response(message)
