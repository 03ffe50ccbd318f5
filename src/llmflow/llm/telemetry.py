"""Per-call observation hooks and vendor error translation.

Every adapter call goes through the same four hooks:

    start = telemetry.log_call_start(context)
    duration = telemetry.log_call_complete(context, usage, options, start)
    telemetry.log_token_usage(messages, content, usage, context, options, duration)
    raise errors.handle_api_error(exc, context)

Destinations are the package logger; swap in a subclass to ship elsewhere.
"""

from __future__ import annotations

import inspect
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from llmflow import logger as logger_mod
from llmflow.errors import LLMFlowError, ProviderApiError

from .types import LLMMessage, RunOptions, TokenUsage

log = logger_mod.get_logger()

# Frames from these modules are plumbing, not the caller we want to report.
_SKIP_MODULE_PREFIXES = ("llmflow", "asyncio")


@dataclass(frozen=True)
class CallerDetails:
    function: str
    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.function} ({self.filename}:{self.lineno})"


UNKNOWN_CALLER = CallerDetails(function="<unknown>", filename="", lineno=0)


def get_caller_details() -> CallerDetails:
    """Return the first stack frame outside llmflow (and asyncio)."""

    frame = inspect.currentframe()
    try:
        while frame is not None:
            module = frame.f_globals.get("__name__", "")
            if not module.startswith(_SKIP_MODULE_PREFIXES):
                return CallerDetails(
                    function=frame.f_code.co_name,
                    filename=frame.f_code.co_filename,
                    lineno=frame.f_lineno,
                )
            frame = frame.f_back
        return UNKNOWN_CALLER
    finally:
        del frame


class CallTelemetry:
    def log_call_start(self, context: CallerDetails) -> float:
        log.debug(f"➡️ LLM call started from {context}")
        return time.perf_counter()

    def log_call_complete(
        self,
        context: CallerDetails,
        usage: TokenUsage,
        options: RunOptions,
        start: float,
    ) -> float:
        duration = time.perf_counter() - start
        log.info(
            f"✅ LLM call complete model={options.model} duration={duration:.2f}s "
            f"tokens={usage.total_tokens} caller={context.function}"
        )
        return duration

    def log_token_usage(
        self,
        messages: Sequence[LLMMessage],
        content: str,
        usage: TokenUsage,
        context: CallerDetails,
        options: RunOptions,
        duration: float,
    ) -> None:
        prompt_chars = sum(len(m.content) for m in messages)
        rate = usage.completion_tokens / duration if duration > 0 else 0.0
        log.debug(
            f"[TOKENS] model={options.model} prompt={usage.prompt_tokens} "
            f"completion={usage.completion_tokens} total={usage.total_tokens} "
            f"messages={len(messages)} prompt_chars={prompt_chars} "
            f"response_chars={len(content)} tok_per_s={rate:.1f} caller={context}"
        )


class ApiErrorHandler:
    def __init__(self, vendor: Optional[str] = None) -> None:
        self.vendor = vendor

    def handle_api_error(
        self, error: Exception, context: CallerDetails
    ) -> LLMFlowError:
        """Translate a vendor exception into the error the adapter raises."""

        status = getattr(error, "status_code", None)
        if not isinstance(status, int):
            status = None

        log.error(
            f"❌ {self.vendor or 'LLM'} API error (status={status}) from {context}: {error}"
        )
        if isinstance(error, LLMFlowError):
            return error

        return ProviderApiError(
            f"{self.vendor or 'LLM'} API call failed: {error}",
            vendor=self.vendor,
            status_code=status,
            context=context,
        )
