import json

import pytest

from llmflow.errors import ExtractionError
from llmflow.llm._json import (
    clean_markdown,
    extract_json,
    parse_json,
    parse_response,
    validate_json,
)


def test_clean_markdown_strips_fence_with_language_tag():
    assert clean_markdown('```json\n{"a":1}\n```') == '{"a":1}'


def test_clean_markdown_strips_fence_without_language_tag():
    assert clean_markdown("```\nplain text\n```") == "plain text"


def test_clean_markdown_tolerates_surrounding_whitespace():
    assert clean_markdown('\n  ```json\n{"a": 1}\n```  \n') == '{"a": 1}'


def test_clean_markdown_without_fence_is_unchanged():
    text = "  just words, {not json}  "
    assert clean_markdown(text) == text


def test_extract_json_object_and_array():
    assert extract_json('noise {"a": {"b": 2}} trailing') == '{"a": {"b": 2}}'
    assert extract_json("list: [1, 2, [3]] done") == "[1, 2, [3]]"


def test_extract_json_uses_first_opener():
    # array comes first, so we look for the last ']' rather than '}'
    assert extract_json('[{"a": 1}, {"b": 2}]') == '[{"a": 1}, {"b": 2}]'


def test_extract_json_does_not_validate():
    assert extract_json("{not: valid}") == "{not: valid}"


@pytest.mark.parametrize("text", ["no json here", "only closer }", "{ never closed"])
def test_extract_json_failures(text):
    with pytest.raises(ExtractionError):
        extract_json(text)


def test_parse_json_wraps_decode_errors():
    with pytest.raises(ExtractionError):
        parse_json("{bad json}")


def test_validate_json_against_schema():
    schema = {
        "type": "object",
        "properties": {"translation": {"type": "string"}},
        "required": ["translation"],
    }

    validate_json({"translation": "bonjour"}, schema)
    with pytest.raises(ExtractionError):
        validate_json({"other": 1}, schema)


def test_parse_response_happy_path():
    parsed = parse_response('```json\n{"a":1}\n```')

    assert parsed.ok
    assert parsed.text == '{"a":1}'
    assert parsed.value == {"a": 1}


def test_parse_response_falls_back_to_cleaned_text():
    parsed = parse_response("no json here")

    assert not parsed.ok
    assert isinstance(parsed.error, ExtractionError)
    assert parsed.value == "no json here"


def test_parse_response_malformed_json_falls_back():
    parsed = parse_response("```\nSure! {this is: not json}\n```")

    assert not parsed.ok
    assert parsed.value == "Sure! {this is: not json}"


def test_parse_response_schema_mismatch_falls_back():
    raw = json.dumps({"other": 1})
    parsed = parse_response(raw, schema={"type": "object", "required": ["translation"]})

    assert not parsed.ok
    assert parsed.value == raw
