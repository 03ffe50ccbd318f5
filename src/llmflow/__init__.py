"""llmflow: prompt templates bound to pluggable LLM providers.

Public API:
- LLMFlow / create_llm_flow
- RunOptions, VersioningOptions, Models
- PromptTemplate / create_prompt_template / format_prompt
"""

from .errors import (
    ConfigurationError,
    ExtractionError,
    LLMFlowError,
    PersistenceError,
    ProviderApiError,
    ProviderUnavailableError,
    UnknownModelError,
)
from .flow import LLMFlow, create_llm_flow
from .llm import LLMClient, Models, ProviderResolver, RunOptions
from .template import PromptTemplate, create_prompt_template, format_prompt
from .versioning import PromptVersion, VersioningOptions, VersionStore

__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "LLMClient",
    "LLMFlow",
    "LLMFlowError",
    "Models",
    "PersistenceError",
    "PromptTemplate",
    "PromptVersion",
    "ProviderApiError",
    "ProviderResolver",
    "ProviderUnavailableError",
    "RunOptions",
    "UnknownModelError",
    "VersionStore",
    "VersioningOptions",
    "create_llm_flow",
    "create_prompt_template",
    "format_prompt",
]
