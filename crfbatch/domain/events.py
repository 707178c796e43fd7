"""Domain events for the transcoding pipeline.

Events flow through the EventBus from the pipeline to whoever listens
(currently the progress display). See `infrastructure/event_bus.py`.
"""

from pathlib import Path
from pydantic import BaseModel
from .models import EncodeJob


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class JobEvent(Event):
    """Base class for events related to a single encode job."""

    job: EncodeJob


class JobStarted(JobEvent):
    """Emitted when a job passes the admission gate and starts work."""

    pass


class JobCompleted(JobEvent):
    """Emitted when a job encoded its file and reported its sizes."""

    pass


class JobFailed(JobEvent):
    """Emitted when a job aborts; no sizes or reference line are produced."""

    error_message: str


class DiscoveryFinished(Event):
    """Emitted once the input set is fixed."""

    directory: Path
    files_found: int


class ProcessingFinished(Event):
    """Emitted after the join barrier, when every job has returned."""

    succeeded: int = 0
    failed: int = 0
