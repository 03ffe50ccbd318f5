from __future__ import annotations

from typing import Any, Optional


class LLMFlowError(RuntimeError):
    """Base error for llmflow."""


class ConfigurationError(LLMFlowError):
    """A required option or credential is missing."""


class UnknownModelError(LLMFlowError):
    """The model identifier does not map to any known vendor."""


class ProviderUnavailableError(LLMFlowError):
    """The vendor SDK is not installed (fix: install the matching extra)."""


class ProviderApiError(LLMFlowError):
    """The vendor rejected or failed the request."""

    def __init__(
        self,
        message: str,
        *,
        vendor: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Any = None,
    ) -> None:
        super().__init__(message)
        self.vendor = vendor
        self.status_code = status_code
        self.context = context


class ExtractionError(LLMFlowError):
    """No structured payload could be located or parsed in a response."""


class PersistenceError(LLMFlowError):
    """A version snapshot could not be written or read."""
