"""Pipeline orchestration: source reader -> transformer -> destination writer."""

import asyncio
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from jsonstream.core.config import RunConfig
from jsonstream.core.errors import SourceNotFoundError
from jsonstream.core.events import EventHook, EventStage, PipelineEvent, log_event
from jsonstream.core.types import Chunk, RecordMapper
from jsonstream.sinks.file import WritableFile
from jsonstream.sources.file import ChunkReader, JsonFile
from jsonstream.transforms.stream_transformer import build_transformer


@dataclass
class RunResult:
    """Outcome of one pipeline run."""

    source: Path
    """Source file path."""

    dest: Path
    """Destination file path."""

    framing: str
    """Framing used for the run."""

    chunks_in: int = 0
    """Chunks read from the source."""

    chunks_out: int = 0
    """Chunks written to the destination."""

    records_out: int = 0
    """Values written (array elements, or 1 for a non-array value)."""

    bytes_written: int = 0
    """UTF-8 bytes written to the destination."""

    elapsed: float = 0.0
    """Wall-clock duration in seconds."""

    writer: WritableFile | None = None
    """Open destination writer, set only when close_destination is False."""


class StreamRunner:
    """
    Execution engine for stream transform runs.

    Handles:
    - Source existence check before any stream is opened
    - Piping reader chunks through the transformer into the writer
    - Lifecycle events (start, read_end, close, finish / error)
    - Closing or handing back the destination writer
    """

    def __init__(
        self,
        config: RunConfig | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            config: Run configuration. Uses defaults if None.
            on_event: Lifecycle hook. Defaults to logging each event.
        """
        self.config = config or RunConfig()
        self._on_event = on_event or log_event

    def _emit(self, stage: EventStage, result: RunResult, **detail) -> None:
        self._on_event(PipelineEvent(stage, result.source, result.dest, detail))

    async def _count(
        self, reader: ChunkReader, result: RunResult
    ) -> AsyncIterator[Chunk]:
        async for chunk in reader:
            result.chunks_in += 1
            yield chunk
        self._emit(EventStage.READ_END, result, chunks_in=result.chunks_in)

    async def run(
        self,
        source: str | Path,
        dest: str | Path,
        mapper: RecordMapper | None = None,
    ) -> RunResult:
        """
        Stream source through the transformer into dest.

        Args:
            source: Path of the JSON input file.
            dest: Path of the output file (created or truncated).
            mapper: Function applied to every element of a top-level array.

        Returns:
            RunResult with counters, and the open writer when
            close_destination is False.

        Raises:
            SourceNotFoundError: If source does not exist. No stream is
                opened and dest is left untouched.
            ParseError: If the input is not valid JSON.
            MapperError: If the mapper raises.
            StreamIOError: If reading or writing fails.
        """
        source_file = JsonFile(source)
        if not await source_file.exists():
            raise SourceNotFoundError(f"Source file does not exist: {source_file.path}")

        result = RunResult(
            source=source_file.path,
            dest=Path(dest),
            framing=self.config.get_framing().value,
        )
        start_time = time.perf_counter()
        self._emit(EventStage.START, result, framing=result.framing)

        transformer = build_transformer(
            self.config.framing, mapper, indent=self.config.indent
        )
        reader: ChunkReader | None = None
        writer: WritableFile | None = None
        try:
            reader = await source_file.open_reader(
                encoding=self.config.encoding, chunk_size=self.config.chunk_size
            )
            writer = await source_file.open_writer(result.dest)
            async with reader:
                async for text in transformer.process(self._count(reader, result)):
                    await writer.write(text)
                    result.chunks_out += 1
            self._emit(EventStage.CLOSE, result)

            if self.config.close_destination:
                await writer.close()
            else:
                await writer.flush()
                result.writer = writer
        except BaseException as e:
            # CancelledError included: both handles must be released.
            if reader is not None:
                await reader.close()
            if writer is not None:
                await writer.close()
            self._emit(EventStage.ERROR, result, error=e)
            raise

        result.records_out = transformer.records_out
        result.bytes_written = writer.bytes_written
        result.elapsed = time.perf_counter() - start_time
        self._emit(
            EventStage.FINISH,
            result,
            records_out=result.records_out,
            bytes_written=result.bytes_written,
        )
        logger.debug(
            f"Transformed {result.chunks_in} -> {result.chunks_out} chunks "
            f"({result.elapsed:.2f}s)"
        )
        return result


async def stream_transform(
    source: str | Path,
    dest: str | Path,
    mapper: RecordMapper | None = None,
    *,
    config: RunConfig | None = None,
    on_event: EventHook | None = None,
) -> RunResult:
    """
    Stream a JSON file through a record mapper into a new file.

    Args:
        source: Path of the JSON input file.
        dest: Path of the output file.
        mapper: Function applied to every element of a top-level array.
        config: Run configuration. Uses defaults if None.
        on_event: Lifecycle hook. Defaults to logging each event.

    Returns:
        RunResult for the run.
    """
    runner = StreamRunner(config, on_event)
    return await runner.run(source, dest, mapper)


def run_stream_transform(
    source: str | Path,
    dest: str | Path,
    mapper: RecordMapper | None = None,
    *,
    config: RunConfig | None = None,
    on_event: EventHook | None = None,
) -> RunResult:
    """Synchronous wrapper around stream_transform using asyncio.run."""
    return asyncio.run(
        stream_transform(source, dest, mapper, config=config, on_event=on_event)
    )
