"""Events exchanged between the producer, the workers and the supervisor.

Workers and the producer put events on plain queues; the supervisor takes
them off one at a time and republishes them on the EventBus, so UI
subscribers only ever run on the supervisor thread.

See `pipeline/orchestrator.py` for the consuming loop.
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """Base class for all events. Events are immutable once built."""

    model_config = ConfigDict(frozen=True)


class ProgressEvent(Event):
    """Status of one worker slot.

    An empty ``stage`` means the worker is idle. ``error_message`` is set on
    the single event a worker sends when a file fails.
    """

    worker_slot: int = Field(ge=0)
    source: Optional[Path] = None
    destination: Optional[Path] = None
    stage: str = ""
    error_message: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return not self.stage

    @property
    def is_error(self) -> bool:
        return self.error_message is not None


class WorkerFinished(Event):
    """Sent once by a worker after the work queue was exhausted."""

    worker_slot: int


class DiscoveryFinished(Event):
    """Emitted by the producer after the walk, before or after workers drain."""

    files_found: int = 0
    files_to_process: int = 0
    already_converted: int = 0
    errors: List[str] = Field(default_factory=list)


class ProcessingFinished(Event):
    """Emitted by the supervisor once every worker reported WorkerFinished."""

    pass
