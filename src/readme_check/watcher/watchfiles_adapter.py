from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine, Iterable
from pathlib import Path
from typing import Any

from watchfiles import awatch

logger = logging.getLogger(__name__)


def _is_watched_file(path: Path, file_names: frozenset[str]) -> bool:
    return path.name in file_names


def _changed_directory(path: Path, file_names: frozenset[str], folder_names: frozenset[str]) -> Path | None:
    """Return the directory to re-check for a changed path, or ``None`` if it is not watched.

    Anything inside a watched folder (or the folder itself) maps to the
    directory holding that folder.
    """
    if _is_watched_file(path, file_names):
        return path.parent
    for candidate in (path, *path.parents):
        if candidate.name in folder_names:
            return candidate.parent
    return None


class WatchfilesWatcher:
    """Watch a directory for documentation, manifest or descriptor changes and trigger a callback.

    The callback receives the set of directories whose files changed.
    """

    def __init__(
        self,
        directory: str | Path,
        file_names: Iterable[str],
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
        folder_names: Iterable[str] = (),
    ) -> None:
        self._directory = Path(directory)
        self._file_names = frozenset(file_names)
        self._folder_names = frozenset(folder_names)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            directories = {
                directory
                for _, p in changes
                if (directory := _changed_directory(Path(p), self._file_names, self._folder_names)) is not None
            }
            if directories:
                logger.info("Detected changes in %d director(ies)", len(directories))
                try:
                    await self._on_change(directories)
                except Exception:
                    logger.exception("Error in watcher callback")
