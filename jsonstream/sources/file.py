"""File resource and chunked reader for JSON sources."""

import asyncio
import json
from pathlib import Path
from typing import IO, Any

from loguru import logger

from jsonstream.core.config import DEFAULT_CHUNK_SIZE
from jsonstream.core.errors import ParseError, StreamIOError
from jsonstream.core.types import Chunk
from jsonstream.sinks.file import WritableFile


class ChunkReader:
    """
    Async iterator over fixed-size chunks of an open file.

    Chunks are str when an encoding is given, bytes otherwise. Use it as an
    async context manager so the file handle is always released.
    """

    def __init__(self, path: Path, handle: IO[Any], chunk_size: int) -> None:
        self._path = path
        self._handle = handle
        self._chunk_size = chunk_size

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def __aiter__(self) -> "ChunkReader":
        return self

    async def __anext__(self) -> Chunk:
        try:
            chunk = await asyncio.to_thread(self._handle.read, self._chunk_size)
        except UnicodeDecodeError as e:
            raise ParseError(f"Cannot decode {self._path}: {e}") from e
        except OSError as e:
            raise StreamIOError(f"Failed to read {self._path}: {e}") from e
        if not chunk:
            raise StopAsyncIteration
        return chunk

    async def close(self) -> None:
        """Close the underlying file handle."""
        if not self._handle.closed:
            await asyncio.to_thread(self._handle.close)

    async def __aenter__(self) -> "ChunkReader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


class JsonFile:
    """A JSON file on disk: existence check, whole reads and streams."""

    def __init__(self, path: str | Path) -> None:
        """
        Initialize a file resource.

        Args:
            path: Path to the JSON file. Nothing is opened until a read or
                stream method is called.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def exists(self) -> bool:
        """Return whether the path exists. Never raises."""
        logger.debug(f"[exists] {self._path}")
        try:
            return await asyncio.to_thread(self._path.exists)
        except OSError:
            return False

    async def read_all(self) -> Any:
        """
        Read the whole file and parse it as JSON.

        Meant for small files; use open_reader for anything large.

        Raises:
            StreamIOError: If the file cannot be read.
            ParseError: If the content is not valid JSON.
        """
        logger.debug(f"[read_all] {self._path}")
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Cannot decode {self._path} as UTF-8: {e}") from e
        except OSError as e:
            raise StreamIOError(f"Failed to read {self._path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in {self._path}: {e}") from e

    async def open_reader(
        self,
        encoding: str | None = "utf-8",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> ChunkReader:
        """
        Open a chunked reader on this file.

        Args:
            encoding: Text encoding. None yields raw bytes.
            chunk_size: Bytes (or characters in text mode) per chunk.

        Returns:
            An open ChunkReader.

        Raises:
            StreamIOError: If the file cannot be opened.
        """
        if encoding is None:
            mode, kwargs = "rb", {}
        else:
            mode, kwargs = "r", {"encoding": encoding, "newline": ""}
        try:
            handle = await asyncio.to_thread(open, self._path, mode, **kwargs)
        except OSError as e:
            raise StreamIOError(f"Failed to open {self._path}: {e}") from e
        except LookupError as e:
            raise StreamIOError(
                f"Cannot open {self._path} with encoding {encoding!r}: {e}"
            ) from e
        return ChunkReader(self._path, handle, chunk_size)

    async def open_writer(self, path: str | Path | None = None) -> WritableFile:
        """
        Open a writer, creating or truncating the destination.

        Args:
            path: Destination path. Defaults to this file's own path.

        Returns:
            An open WritableFile.
        """
        return await WritableFile.open(path if path is not None else self._path)
