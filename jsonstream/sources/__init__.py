"""File resources and chunked readers."""

from jsonstream.sources.file import ChunkReader, JsonFile

__all__ = ["ChunkReader", "JsonFile"]
