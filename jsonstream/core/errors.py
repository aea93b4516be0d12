"""Exception hierarchy for jsonstream pipelines."""


class JsonStreamError(Exception):
    """Base exception for all jsonstream failures."""


class SourceNotFoundError(JsonStreamError, FileNotFoundError):
    """Raised when the source file does not exist at pipeline start."""


class ParseError(JsonStreamError, ValueError):
    """Raised when a chunk, stream or file does not contain valid JSON."""


class StreamIOError(JsonStreamError, OSError):
    """Raised when reading from or writing to a file fails."""


class MapperError(JsonStreamError):
    """Raised when the record mapper fails on an element."""

    def __init__(self, index: int, cause: BaseException) -> None:
        super().__init__(f"Mapper failed on element {index}: {cause!r}")
        self.index = index
        self.cause = cause
