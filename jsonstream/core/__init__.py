"""Core types and base classes for jsonstream."""

from jsonstream.core.types import Chunk, Record, RecordMapper
from jsonstream.core.step import Step

__all__ = ["Chunk", "Record", "RecordMapper", "Step"]
