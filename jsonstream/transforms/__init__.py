"""Streaming transform stages and record mappers."""

from jsonstream.transforms.mappers import id_title, select_fields
from jsonstream.transforms.stream_transformer import (
    ChunkTransformer,
    IncrementalTransformer,
    build_transformer,
)

__all__ = [
    "ChunkTransformer",
    "IncrementalTransformer",
    "build_transformer",
    "select_fields",
    "id_title",
]
