from __future__ import annotations

from enum import Enum
from typing import Tuple, Union

from llmflow.errors import UnknownModelError


class Vendor(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class Models(str, Enum):
    """Known model identifiers. Any string with a recognised prefix also works."""

    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_TURBO = "gpt-4-turbo"
    GPT_4 = "gpt-4"
    GPT_35_TURBO = "gpt-3.5-turbo"
    O1 = "o1"
    O1_MINI = "o1-mini"
    CLAUDE_3_5_SONNET = "claude-3-5-sonnet-20240620"
    CLAUDE_3_OPUS = "claude-3-opus-20240229"
    CLAUDE_3_SONNET = "claude-3-sonnet-20240229"
    CLAUDE_3_HAIKU = "claude-3-haiku-20240307"


_VENDOR_PREFIXES: Tuple[Tuple[Vendor, Tuple[str, ...]], ...] = (
    (Vendor.OPENAI, ("gpt-", "chatgpt-", "o1", "o3", "o4")),
    (Vendor.ANTHROPIC, ("claude-",)),
)


def model_name(model: Union[str, Enum]) -> str:
    if isinstance(model, Enum):
        return str(model.value)
    return str(model)


def vendor_for_model(model: Union[str, Enum]) -> Vendor:
    """Map a model identifier to the vendor that serves it."""

    name = model_name(model).strip().lower()
    for vendor, prefixes in _VENDOR_PREFIXES:
        if name.startswith(prefixes):
            return vendor

    raise UnknownModelError(f"Unknown model (no vendor matches): {model_name(model)!r}")
