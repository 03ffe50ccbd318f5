import asyncio
import sys
import types
from pathlib import Path
from types import SimpleNamespace

import pytest


def pytest_configure():
    # This repo uses a src/ layout, so when running tests without an editable
    # install, we add <repo>/src to sys.path.
    repo_root = Path(__file__).resolve().parents[2]
    src_path = str(repo_root / "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture(autouse=True)
def _reset_default_resolver():
    from llmflow.llm.factory import set_default_resolver

    set_default_resolver(None)
    yield
    set_default_resolver(None)


@pytest.fixture
def settings():
    from llmflow.config import Settings

    return Settings(openai_api_key="sk-test", anthropic_api_key="ak-test", timeout_s=5.0)


class _FakeCreate:
    """Records create(**kwargs) calls; returns .response or raises .error."""

    def __init__(self, response):
        self.calls: list[dict] = []
        self.response = response
        self.error = None

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_openai(monkeypatch):
    """Stub `openai` module exposing AsyncOpenAI + a completion builder."""

    openai = types.ModuleType("openai")

    def completion(content, prompt_tokens=3, completion_tokens=5):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    class APIStatusError(Exception):
        def __init__(self, message, status_code):
            super().__init__(message)
            self.status_code = status_code

    class AsyncOpenAI:
        instances: list = []

        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.chat = SimpleNamespace(completions=_FakeCreate(completion("hello")))
            AsyncOpenAI.instances.append(self)

    openai.AsyncOpenAI = AsyncOpenAI  # type: ignore[attr-defined]
    openai.APIStatusError = APIStatusError  # type: ignore[attr-defined]
    openai.completion = completion  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "openai", openai)
    return openai


@pytest.fixture
def fake_anthropic(monkeypatch):
    """Stub `anthropic` module exposing AsyncAnthropic + a message builder."""

    anthropic = types.ModuleType("anthropic")

    def message(*texts, input_tokens=7, output_tokens=11):
        blocks = [SimpleNamespace(type="text", text=t) for t in texts]
        return SimpleNamespace(
            content=blocks,
            usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
        )

    class AsyncAnthropic:
        instances: list = []

        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.messages = _FakeCreate(message("hi"))
            AsyncAnthropic.instances.append(self)

    anthropic.AsyncAnthropic = AsyncAnthropic  # type: ignore[attr-defined]
    anthropic.message = message  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "anthropic", anthropic)
    return anthropic


class StubLLM:
    """Provider handle returning a canned response and recording prompts."""

    def __init__(self, response):
        self.response = response
        self.prompts: list[tuple] = []

    async def execute(self, prompt, options=None):
        self.prompts.append((prompt, options))
        return self.response

    async def chat_completion(self, messages, options=None):
        return self.response


class StubResolver:
    def __init__(self, llm=None, error=None):
        self.llm = llm
        self.error = error
        self.calls = 0

    async def resolve(self, model):
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.llm


@pytest.fixture
def stub_provider():
    """Factory: stub_provider(response) -> (StubLLM, StubResolver)."""

    def _factory(response, error=None):
        llm = StubLLM(response)
        return llm, StubResolver(llm, error=error)

    return _factory
