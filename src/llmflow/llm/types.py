from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

from .models import model_name

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class LLMMessage:
    role: Role
    content: str

    @classmethod
    def coerce(cls, message: "LLMMessage | Mapping[str, Any]") -> "LLMMessage":
        if isinstance(message, LLMMessage):
            return message
        return cls(role=message["role"], content=str(message["content"]))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    """Provider-neutral result of one completion call."""

    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)


# camelCase spellings accepted by RunOptions.from_mapping
_OPTION_ALIASES = {
    "topP": "top_p",
    "maxTokens": "max_tokens",
    "frequencyPenalty": "frequency_penalty",
    "presencePenalty": "presence_penalty",
    "stopSequences": "stop_sequences",
    "dontParse": "dont_parse",
    "outputSchema": "output_schema",
}


@dataclass(frozen=True)
class RunOptions:
    """Target model and generation parameters for a flow.

    ``dont_parse`` skips structured extraction and returns the raw model text.
    ``output_schema`` is an optional JSON Schema the extracted payload must
    satisfy; when it does not, the flow falls back to the cleaned text.
    """

    model: str = ""
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    stop_sequences: Optional[List[str]] = None
    dont_parse: bool = False
    output_schema: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if isinstance(self.model, Enum):
            object.__setattr__(self, "model", model_name(self.model))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RunOptions":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown run option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: "RunOptions | Mapping[str, Any] | None") -> "RunOptions":
        if options is None:
            return cls()
        if isinstance(options, RunOptions):
            return options
        return cls.from_mapping(options)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only (the snapshot form)."""
        return {
            k: v
            for k, v in asdict(self).items()
            if v is not None and not (k == "dont_parse" and v is False)
        }
