"""jsonstream - Stream a JSON array file through a record mapper into a new file."""

from jsonstream.core.types import Chunk, Record, RecordMapper
from jsonstream.core.step import Step
from jsonstream.core.config import Framing, RunConfig, StreamSettings
from jsonstream.core.errors import (
    JsonStreamError,
    MapperError,
    ParseError,
    SourceNotFoundError,
    StreamIOError,
)
from jsonstream.core.events import EventRecorder, EventStage, PipelineEvent, log_event
from jsonstream.core.runner import (
    RunResult,
    StreamRunner,
    run_stream_transform,
    stream_transform,
)
from jsonstream.sources.file import ChunkReader, JsonFile
from jsonstream.sinks.file import WritableFile
from jsonstream.transforms.stream_transformer import (
    ChunkTransformer,
    IncrementalTransformer,
    build_transformer,
)
from jsonstream.transforms.mappers import id_title, select_fields

__all__ = [
    "Chunk",
    "Record",
    "RecordMapper",
    "Step",
    "Framing",
    "RunConfig",
    "StreamSettings",
    "JsonStreamError",
    "MapperError",
    "ParseError",
    "SourceNotFoundError",
    "StreamIOError",
    "EventRecorder",
    "EventStage",
    "PipelineEvent",
    "log_event",
    "RunResult",
    "StreamRunner",
    "run_stream_transform",
    "stream_transform",
    "ChunkReader",
    "JsonFile",
    "WritableFile",
    "ChunkTransformer",
    "IncrementalTransformer",
    "build_transformer",
    "select_fields",
    "id_title",
]
