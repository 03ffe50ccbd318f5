from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from jsonschema import validate
from jsonschema.exceptions import ValidationError as _SchemaValidationError

from llmflow.errors import ExtractionError

_OPENING_FENCE = re.compile(r"\A```[\w+.-]*[ \t]*(?:\r?\n|\Z)")
_CLOSING_FENCE = re.compile(r"(?:\r?\n)?```[ \t]*\Z")

_CLOSERS = {"{": "}", "[": "]"}


def clean_markdown(text: str) -> str:
    """Strip a leading/trailing code fence (``` or ```json) around a response.

    Text without a fence is returned unchanged.
    """

    stripped = text.strip()
    opened = _OPENING_FENCE.search(stripped)
    closed = _CLOSING_FENCE.search(stripped)
    if not opened and not closed:
        return text

    start = opened.end() if opened else 0
    end = closed.start() if closed and closed.start() >= start else len(stripped)
    return stripped[start:end].strip()


def extract_json(text: str) -> str:
    """Return the span from the first ``{``/``[`` to the last matching closer.

    Well-formedness is not checked here; that is :func:`parse_json`'s job.
    """

    positions = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not positions:
        raise ExtractionError("No JSON object or array found in text")

    start = min(positions)
    end = text.rfind(_CLOSERS[text[start]])
    if end < start:
        raise ExtractionError(f"Unbalanced JSON: no closing {_CLOSERS[text[start]]!r}")

    return text[start : end + 1]


def parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise ExtractionError(f"Failed to parse JSON: {e}") from e


def validate_json(instance: Any, schema: Dict[str, Any]) -> None:
    try:
        validate(instance=instance, schema=schema)
    except _SchemaValidationError as e:
        raise ExtractionError(f"JSON schema validation failed: {e.message}") from e


@dataclass(frozen=True)
class ParsedResponse:
    """Outcome of post-processing one model response.

    ``value`` is the parsed payload when extraction worked, otherwise the
    cleaned text. ``error`` says why extraction was abandoned.
    """

    text: str
    data: Any = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def value(self) -> Any:
        return self.data if self.ok else self.text


def parse_response(
    text: str, *, schema: Optional[Dict[str, Any]] = None
) -> ParsedResponse:
    cleaned = clean_markdown(text)
    try:
        data = parse_json(extract_json(cleaned))
        if schema is not None:
            validate_json(data, schema)
    except ExtractionError as e:
        return ParsedResponse(text=cleaned, error=e)
    return ParsedResponse(text=cleaned, data=data)
