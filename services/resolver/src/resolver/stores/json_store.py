"""JSON file store for rule sets."""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Union
import structlog
from pydantic import ValidationError as PydanticValidationError
from common import StoreError
from schemas import PublicSuffixRuleSet
from .base_store import BaseStore

logger = structlog.get_logger()

_UNSAFE_KEY_CHARACTERS = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileStore(BaseStore):
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file that is renamed over the target, so a
    reader never sees a partially written rule set.
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize JSON file store.

        Args:
            directory: Directory holding the JSON files (created on first write)
        """
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARACTERS.sub('_', key)}.json"

    def _read(self, key: str) -> PublicSuffixRuleSet:
        path = self.path_for(key)
        if not path.exists():
            logger.debug("No cached rule set", key=key, path=str(path))
            return PublicSuffixRuleSet()

        try:
            return PublicSuffixRuleSet.model_validate_json(path.read_text("utf-8"))
        except (OSError, PydanticValidationError) as e:
            raise StoreError(
                "Failed to read cached rule set",
                context={"key": key, "path": str(path)},
                original_error=e,
            )

    def _write(self, key: str, value: PublicSuffixRuleSet) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value.model_dump_json())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(
                "Failed to write cached rule set",
                context={"key": key, "path": str(path)},
                original_error=e,
            )

        logger.debug(
            "Cached rule set written",
            key=key,
            path=str(path),
            rules=len(value.rules),
            exception_rules=len(value.exception_rules),
        )

    async def get(self, key: str) -> PublicSuffixRuleSet:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: PublicSuffixRuleSet) -> None:
        await asyncio.to_thread(self._write, key, value)
