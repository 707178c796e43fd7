import threading
from typing import Optional
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from crfbatch.domain.events import DiscoveryFinished, JobCompleted, JobFailed, ProcessingFinished
from crfbatch.infrastructure.event_bus import EventBus


class ProgressDisplay:
    """Subscribes to job events and advances a rich progress bar.

    Each job advances the bar exactly once, whether it succeeded or failed.
    Counters are updated under a lock since events arrive from worker threads.
    """

    def __init__(self, bus: EventBus, console: Optional[Console] = None, enabled: bool = True):
        self.bus = bus
        self.enabled = enabled
        self._lock = threading.Lock()
        self.completed_count = 0
        self.failed_count = 0
        self.total = 0
        self._progress = Progress(
            TextColumn("[bold blue]Encoding"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[green]{task.fields[ok]} ok[/] [red]{task.fields[err]} failed[/]"),
            TimeElapsedColumn(),
            console=console,
            disable=not enabled,
        )
        self._task_id: Optional[TaskID] = None
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(DiscoveryFinished, self.on_discovery_finished)
        self.bus.subscribe(JobCompleted, self.on_job_completed)
        self.bus.subscribe(JobFailed, self.on_job_failed)
        self.bus.subscribe(ProcessingFinished, self.on_processing_finished)

    def __enter__(self):
        self._progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._progress.stop()
        return False

    @property
    def processed_count(self) -> int:
        with self._lock:
            return self.completed_count + self.failed_count

    def on_discovery_finished(self, event: DiscoveryFinished):
        with self._lock:
            self.total = event.files_found
            self._task_id = self._progress.add_task("encode", total=event.files_found, ok=0, err=0)

    def _advance(self):
        if self._task_id is not None:
            self._progress.update(
                self._task_id, advance=1, ok=self.completed_count, err=self.failed_count
            )

    def on_job_completed(self, event: JobCompleted):
        with self._lock:
            self.completed_count += 1
            self._advance()

    def on_job_failed(self, event: JobFailed):
        with self._lock:
            self.failed_count += 1
            self._advance()

    def on_processing_finished(self, event: ProcessingFinished):
        with self._lock:
            if self._task_id is not None:
                self._progress.update(self._task_id, completed=self.total)
