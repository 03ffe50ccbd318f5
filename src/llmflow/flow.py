from __future__ import annotations

import asyncio
import time
import uuid
from typing import Any, Mapping, Optional, Union

from llmflow import logger as logger_mod
from llmflow.errors import ConfigurationError
from llmflow.llm._json import parse_response
from llmflow.llm.base import LLMClient
from llmflow.llm.factory import ProviderResolver, get_default_resolver
from llmflow.llm.types import RunOptions
from llmflow.template import PromptTemplate
from llmflow.versioning import PromptVersion, VersioningOptions, VersionStore

log = logger_mod.get_logger()

OptionsLike = Union[RunOptions, Mapping[str, Any]]
VersioningLike = Union[VersioningOptions, Mapping[str, Any], None]


def _note_resolution_failure(task: asyncio.Future) -> None:
    # Marks the exception as retrieved; it stays stored and is re-raised by run().
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log.debug(f"Provider resolution failed: {error!r}")

class LLMFlow:
    """A prompt template bound to run options and a resolved provider.

    Construction validates options and kicks off provider resolution (as a
    task when an event loop is running, otherwise on the first ``run``). The
    resolved provider is shared by every run of this flow.

        flow = LLMFlow("Translate {{text}} to {{lang}}", RunOptions(model="gpt-4o"))
        result = await flow.run({"text": "hello", "lang": "French"})

    String responses are post-processed: markdown fences are stripped and an
    embedded JSON object/array is parsed when one is found. Anything that does
    not parse comes back as the cleaned text.
    """

    def __init__(
        self,
        template: str,
        options: OptionsLike,
        versioning: VersioningLike = None,
        *,
        resolver: Optional[ProviderResolver] = None,
    ) -> None:
        self._options = RunOptions.coerce(options)
        if not self._options.model:
            raise ConfigurationError("Model not specified in LLM options.")

        self._template = PromptTemplate(template)
        self._resolver = resolver or get_default_resolver()
        self._llm: Optional[LLMClient] = None
        self._llm_task: Optional[asyncio.Future] = None

        self._versioning = VersioningOptions.coerce(versioning)
        self._version_id: Optional[str] = None
        self._version_store: Optional[VersionStore] = None
        self._last_timestamp = 0
        if self._versioning.versioning_enabled:
            self._version_id = str(uuid.uuid4())
            self._version_store = VersionStore(self._versioning.store_path)

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass  # no loop yet; resolution starts with the first run
        else:
            self._start_resolution()

    @property
    def template(self) -> PromptTemplate:
        return self._template

    @property
    def options(self) -> RunOptions:
        return self._options

    @property
    def versioning(self) -> VersioningOptions:
        return self._versioning

    @property
    def version_id(self) -> Optional[str]:
        return self._version_id

    @property
    def version_store(self) -> Optional[VersionStore]:
        return self._version_store

    def _start_resolution(self) -> asyncio.Future:
        if self._llm_task is None:
            self._llm_task = asyncio.ensure_future(
                self._resolver.resolve(self._options.model)
            )
            self._llm_task.add_done_callback(_note_resolution_failure)
        return self._llm_task

    async def provider(self) -> LLMClient:
        """Wait for (or return the cached) provider for this flow's model."""
        if self._llm is None:
            self._llm = await self._start_resolution()
        return self._llm

    async def run(
        self, inputs: Optional[Mapping[str, Any]] = None, /, **kwargs: Any
    ) -> Any:
        llm = await self.provider()

        values = dict(inputs or {})
        values.update(kwargs)
        missing = self._template.missing_variables(values)
        if missing:
            log.debug(f"Template variables not provided (rendered empty): {sorted(missing)}")
        prompt = self._template.format(values)

        response = await llm.execute(prompt, self._options)

        if self._versioning.versioning_enabled:
            await self._save_version()

        if self._options.dont_parse:
            return response

        if isinstance(response, str):
            parsed = parse_response(response, schema=self._options.output_schema)
            if not parsed.ok:
                log.debug(f"Returning cleaned text; no structured payload: {parsed.error}")
            return parsed.value

        return response

    def _next_timestamp(self) -> int:
        now = int(time.time() * 1000)
        # Strictly increasing per flow even when runs land in the same millisecond.
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp

    async def _save_version(self) -> None:
        if not self._version_id or self._version_store is None:
            return

        version = PromptVersion(
            id=self._version_id,
            timestamp=self._next_timestamp(),
            template=self._template.template,
            options=self._options.to_dict(),
        )
        await self._version_store.save(version)


def create_llm_flow(
    template: str,
    options: OptionsLike,
    versioning: VersioningLike = None,
    **kwargs: Any,
) -> LLMFlow:
    return LLMFlow(template, options, versioning, **kwargs)
