from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from llmflow.llm.base import ProviderConfig
    from llmflow.llm.models import Vendor

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper()

# Where version snapshots land when a flow does not say otherwise
DEFAULT_VERSIONS_DIR = "./prompt-versions"

# Provider credentials / endpoints (names only; values are read by Settings.from_env)
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
ANTHROPIC_API_KEY_ENV = "ANTHROPIC_API_KEY"
OPENAI_BASE_URL_ENV = "OPENAI_BASE_URL"
ANTHROPIC_BASE_URL_ENV = "ANTHROPIC_BASE_URL"
TIMEOUT_ENV = "LLM_TIMEOUT_S"

DEFAULT_TIMEOUT_S = 60.0


@dataclass(frozen=True)
class Settings:
    """Credentials and endpoints for every provider.

    Built once by whatever composes a flow (usually via ``from_env``) and
    handed to the resolver, which slices out one ``ProviderConfig`` per vendor.
    """

    openai_api_key: str = ""
    anthropic_api_key: str = ""
    openai_base_url: str = ""
    anthropic_base_url: str = ""
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> "Settings":
        raw_timeout = os.getenv(TIMEOUT_ENV, "")
        try:
            timeout_s = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_S
        except ValueError:
            timeout_s = DEFAULT_TIMEOUT_S

        return cls(
            openai_api_key=os.getenv(OPENAI_API_KEY_ENV, ""),
            anthropic_api_key=os.getenv(ANTHROPIC_API_KEY_ENV, ""),
            openai_base_url=os.getenv(OPENAI_BASE_URL_ENV, ""),
            anthropic_base_url=os.getenv(ANTHROPIC_BASE_URL_ENV, ""),
            timeout_s=timeout_s,
        )

    def provider_config(self, vendor: "Vendor") -> "ProviderConfig":
        from llmflow.llm.base import ProviderConfig
        from llmflow.llm.models import Vendor

        if vendor == Vendor.OPENAI:
            return ProviderConfig(
                vendor=vendor,
                api_key=self.openai_api_key,
                api_key_env=OPENAI_API_KEY_ENV,
                timeout_s=self.timeout_s,
                base_url=self.openai_base_url or None,
            )
        if vendor == Vendor.ANTHROPIC:
            return ProviderConfig(
                vendor=vendor,
                api_key=self.anthropic_api_key,
                api_key_env=ANTHROPIC_API_KEY_ENV,
                timeout_s=self.timeout_s,
                base_url=self.anthropic_base_url or None,
            )
        raise ValueError(f"No credentials configured for vendor: {vendor}")
