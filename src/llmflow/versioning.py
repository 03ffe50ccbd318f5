"""Version snapshots of a flow's template and options.

A flow with versioning enabled writes ``{store_path}/{version_id}.json`` after
each successful call. The id is fixed per flow, so the file always holds the
latest run only.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
import tempfile
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from llmflow import config
from llmflow import logger as logger_mod
from llmflow.errors import PersistenceError

log = logger_mod.get_logger()

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class VersioningOptions:
    versioning_enabled: bool = False
    store_path: str = config.DEFAULT_VERSIONS_DIR

    @classmethod
    def coerce(
        cls, value: "VersioningOptions | Mapping[str, Any] | None"
    ) -> "VersioningOptions":
        if value is None:
            return cls()
        if isinstance(value, VersioningOptions):
            return value

        aliases = {"versioningEnabled": "versioning_enabled", "storePath": "store_path"}
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, v in value.items():
            name = aliases.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown versioning option: {key}")
            kwargs[name] = v
        # None means "use the default", same as leaving the key out
        return cls(**{k: v for k, v in kwargs.items() if v is not None})


@dataclass(frozen=True)
class PromptVersion:
    id: str
    timestamp: int
    template: str
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "template": self.template,
            "options": dict(self.options),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PromptVersion":
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            template=str(data["template"]),
            options=dict(data.get("options") or {}),
        )


def write_json_snapshot(snapshot: dict, json_output_path: PathLike) -> None:
    """
    Write a JSON snapshot to disk, creating parent directories if needed.
    """
    text = json.dumps(snapshot, ensure_ascii=False, indent=2)

    directory = os.path.dirname(os.fspath(json_output_path)) or "."
    os.makedirs(directory, exist_ok=True)
    # The previous snapshot stays intact until the new file is complete.
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, json_output_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise


def read_json_snapshot(json_input_path: PathLike) -> dict:
    with open(json_input_path, "r", encoding="utf-8") as f:
        return json.load(f)


class VersionStore:
    def __init__(self, directory: Optional[PathLike] = None) -> None:
        self.directory = Path(directory or config.DEFAULT_VERSIONS_DIR)

    def path_for(self, version_id: str) -> Path:
        return self.directory / f"{version_id}.json"

    async def save(self, version: PromptVersion) -> Path:
        """Overwrite the snapshot file for ``version.id``. Last write wins."""

        path = self.path_for(version.id)
        try:
            await asyncio.to_thread(write_json_snapshot, version.to_dict(), path)
        except (OSError, TypeError, ValueError) as e:
            log.error(f"❌ Failed to save prompt version {version.id} to {path}: {e}")
            raise PersistenceError(f"Failed to save prompt version to {path}: {e}") from e

        log.debug(
            f"Saved prompt version {version.id} "
            f"({logger_mod.format_timestamp(version.timestamp)}) to {path}"
        )
        return path

    async def load(self, version_id: str) -> PromptVersion:
        path = self.path_for(version_id)
        try:
            data = await asyncio.to_thread(read_json_snapshot, path)
            return PromptVersion.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Failed to load prompt version from {path}: {e}") from e
