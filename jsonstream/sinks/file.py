"""Writable file sink for transformed output."""

import asyncio
from pathlib import Path
from typing import IO

from loguru import logger

from jsonstream.core.errors import StreamIOError


class WritableFile:
    """Async text writer over a file opened for truncating writes."""

    def __init__(self, path: Path, handle: IO[str]) -> None:
        self._path = path
        self._handle = handle
        self.bytes_written = 0

    @classmethod
    async def open(cls, path: str | Path) -> "WritableFile":
        """
        Create or truncate the file at path and open it for writing.

        Parent directories are created as needed.

        Raises:
            StreamIOError: If the file cannot be created.
        """
        path = Path(path)
        try:
            await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
            handle = await asyncio.to_thread(
                open, path, "w", encoding="utf-8", newline=""
            )
        except OSError as e:
            raise StreamIOError(f"Failed to open {path} for writing: {e}") from e
        logger.debug(f"Opened {path} for writing")
        return cls(path, handle)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._handle.closed

    async def write(self, text: str) -> None:
        """Write a chunk of text."""
        if self._handle.closed:
            raise StreamIOError(f"Cannot write to closed file {self._path}")
        try:
            await asyncio.to_thread(self._handle.write, text)
        except OSError as e:
            raise StreamIOError(f"Failed to write {self._path}: {e}") from e
        self.bytes_written += len(text.encode("utf-8"))

    async def flush(self) -> None:
        """Flush buffered output to disk without closing."""
        if self._handle.closed:
            return
        try:
            await asyncio.to_thread(self._handle.flush)
        except OSError as e:
            raise StreamIOError(f"Failed to flush {self._path}: {e}") from e

    async def close(self) -> None:
        """Flush and close the file. Closing twice is a no-op."""
        if self._handle.closed:
            return
        try:
            await asyncio.to_thread(self._handle.close)
        except OSError as e:
            raise StreamIOError(f"Failed to close {self._path}: {e}") from e
        logger.debug(f"Closed {self._path} ({self.bytes_written} bytes)")

    async def __aenter__(self) -> "WritableFile":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
