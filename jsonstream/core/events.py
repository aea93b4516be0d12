"""Lifecycle events emitted during a pipeline run."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger


class EventStage(Enum):
    """Stages of a pipeline run, in the order they are emitted."""

    START = "start"
    """Streams are about to be opened."""

    READ_END = "read_end"
    """The source reader delivered its last chunk."""

    CLOSE = "close"
    """The source reader was closed."""

    FINISH = "finish"
    """All output was written and the run succeeded."""

    ERROR = "error"
    """The run failed; emitted instead of FINISH."""


@dataclass
class PipelineEvent:
    """A lifecycle event delivered to the run's event hook."""

    stage: EventStage
    source: Path
    dest: Path
    detail: dict[str, Any] = field(default_factory=dict)


EventHook = Callable[[PipelineEvent], None]


def log_event(event: PipelineEvent) -> None:
    """Default hook: write one log line per lifecycle event."""
    if event.stage is EventStage.ERROR:
        logger.warning(
            f"[{event.stage.value}] {event.source} -> {event.dest}: "
            f"{event.detail.get('error')}"
        )
        return

    extra = ", ".join(f"{k}={v}" for k, v in event.detail.items())
    message = f"[{event.stage.value}] {event.source} -> {event.dest}"
    if extra:
        message += f" ({extra})"
    logger.info(message)


class EventRecorder:
    """Hook that collects events in memory (useful for tests)."""

    def __init__(self) -> None:
        self.events: list[PipelineEvent] = []

    def __call__(self, event: PipelineEvent) -> None:
        self.events.append(event)

    @property
    def stages(self) -> list[EventStage]:
        """Return the recorded stages in emission order."""
        return [e.stage for e in self.events]
