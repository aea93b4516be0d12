"""Streaming transform stages: chunk-framed and incremental."""

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

import ijson
from loguru import logger

from jsonstream.core.config import Framing
from jsonstream.core.errors import MapperError, ParseError
from jsonstream.core.step import Step
from jsonstream.core.types import Chunk, RecordMapper

# The C backends overflow on integers wider than 64 bits; json.loads does not.
_PARSER = ijson.get_backend("python")


def _apply(mapper: RecordMapper, item: Any, index: int) -> Any:
    try:
        return mapper(item)
    except Exception as e:
        raise MapperError(index, e) from e


class _Serializer:
    def __init__(self, indent: int | None) -> None:
        self._indent = indent

    def dumps(self, value: Any) -> str:
        if self._indent is None:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        return json.dumps(value, ensure_ascii=False, indent=self._indent)


class ChunkTransformer(Step):
    """
    Parse, map and re-serialize every chunk independently.

    Each input chunk must be a complete JSON value and produces exactly one
    output chunk. When the file spans several chunks the output is a
    concatenation of JSON texts, not a single document.
    """

    def __init__(
        self,
        mapper: RecordMapper | None = None,
        indent: int | None = None,
    ) -> None:
        """
        Initialize a chunk transformer.

        Args:
            mapper: Function applied to every element when a chunk parses
                to an array. None passes values through unchanged.
            indent: Indentation for serialized output.
        """
        self._mapper = mapper
        self._serializer = _Serializer(indent)
        self.records_out = 0

    def transform_chunk(self, chunk: Chunk) -> str:
        """Parse one chunk, apply the mapper and serialize the result."""
        try:
            text = chunk.decode("utf-8") if isinstance(chunk, bytes) else chunk
            value = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Chunk is not valid JSON: {e}") from e

        if isinstance(value, list):
            if self._mapper is not None:
                value = [_apply(self._mapper, item, i) for i, item in enumerate(value)]
            self.records_out += len(value)
        else:
            self.records_out += 1
        return self._serializer.dumps(value)

    async def process(self, chunks: AsyncIterable[Chunk]) -> AsyncIterator[str]:
        """Yield one serialized output chunk per input chunk."""
        async for chunk in chunks:
            yield self.transform_chunk(chunk)


class IncrementalTransformer(Step):
    """
    Reassemble JSON values across chunk boundaries and map records as they
    complete.

    A top-level array is streamed element by element and re-emitted as a
    single JSON array. Any other top-level value is passed through unmapped
    once the input ends.
    """

    def __init__(
        self,
        mapper: RecordMapper | None = None,
        indent: int | None = None,
    ) -> None:
        self._mapper = mapper
        self._serializer = _Serializer(indent)
        self.records_out = 0

    def _send(self, coro, data: bytes) -> None:
        try:
            coro.send(data)
        except (ijson.JSONError, UnicodeDecodeError) as e:
            raise ParseError(f"Invalid JSON in stream: {e}") from e

    def _close(self, coro) -> None:
        try:
            coro.close()
        except (ijson.JSONError, UnicodeDecodeError) as e:
            raise ParseError(f"Invalid or truncated JSON in stream: {e}") from e

    def _drain(self, items: list, out: list[str]) -> None:
        for item in items:
            if self._mapper is not None:
                item = _apply(self._mapper, item, self.records_out)
            if self.records_out:
                out.append(",")
            out.append(self._serializer.dumps(item))
            self.records_out += 1
        del items[:]

    async def process(self, chunks: AsyncIterable[Chunk]) -> AsyncIterator[str]:
        """Yield serialized output as soon as records are complete."""
        items = ijson.sendable_list()
        coro = None
        is_array = False
        head = b""

        async for chunk in chunks:
            data = chunk.encode("utf-8") if isinstance(chunk, str) else chunk
            out: list[str] = []

            if coro is None:
                # Shape is decided by the first non-whitespace byte.
                head += data
                stripped = head.lstrip()
                if not stripped:
                    continue
                is_array = stripped[:1] == b"["
                prefix = "item" if is_array else ""
                coro = _PARSER.items_coro(items, prefix, use_float=True)
                data, head = head, b""
                logger.debug(
                    f"Streaming top-level {'array' if is_array else 'value'}"
                )
                if is_array:
                    out.append("[")

            self._send(coro, data)
            if is_array:
                self._drain(items, out)
            if out:
                yield "".join(out)

        if coro is None:
            raise ParseError("Input contains no JSON value")

        self._close(coro)
        if is_array:
            out = []
            self._drain(items, out)
            out.append("]")
            yield "".join(out)
        else:
            if not items:
                raise ParseError("Input contains no complete JSON value")
            self.records_out += 1
            yield self._serializer.dumps(items[0])


def build_transformer(
    framing: Framing | str,
    mapper: RecordMapper | None = None,
    indent: int | None = None,
) -> ChunkTransformer | IncrementalTransformer:
    """Create the transformer for a framing mode."""
    framing = Framing(framing)
    if framing is Framing.CHUNK:
        return ChunkTransformer(mapper, indent=indent)
    return IncrementalTransformer(mapper, indent=indent)
