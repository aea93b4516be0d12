"""Base Step class for streaming stages."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator

from jsonstream.core.types import Chunk


class Step(ABC):
    """
    Base class for streaming stages.

    A step consumes an async stream of chunks and yields output chunks.
    Steps do not subclass any stream primitive; they are async generators
    that the runner pulls from.
    """

    @abstractmethod
    def process(self, chunks: AsyncIterable[Chunk]) -> AsyncIterator[str]:
        """Process input chunks and yield output chunks."""
        ...
