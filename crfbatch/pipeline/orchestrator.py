"""Pipeline orchestrator for one batch run.

Coordinates discovery, bounded dispatch of one encode job per file, and
aggregation of the resulting sizes. Job lifecycle events are published on the
EventBus so a display layer can follow along without the pipeline knowing
about it.

Only discovery errors propagate out of `run()`. Per-job failures are logged
and counted; `run()` raises InsufficientDataError when no job succeeded.
"""

import logging
import time
from pathlib import Path
from crfbatch.config.models import AppConfig
from crfbatch.domain.events import DiscoveryFinished, ProcessingFinished
from crfbatch.domain.models import RunSummary
from crfbatch.infrastructure.audit_log import AuditLog
from crfbatch.infrastructure.event_bus import EventBus
from crfbatch.infrastructure.ffmpeg import FFmpegAdapter
from crfbatch.infrastructure.ffprobe import FFprobeAdapter
from crfbatch.infrastructure.file_scanner import FileScanner
from crfbatch.pipeline.aggregator import SizeAggregator
from crfbatch.pipeline.dispatcher import BoundedDispatcher
from crfbatch.pipeline.encode_job import EncodeJobRunner
from crfbatch.pipeline.quality import QualityHeuristic


class Orchestrator:
    """Batch transcoding pipeline: discovery → bounded dispatch → summary.

    Args:
        config: AppConfig with general, encoder and quality settings.
        event_bus: EventBus for publishing discovery and job events.
        file_scanner: FileScanner for listing the input directory.
        ffprobe_adapter: FFprobeAdapter for bitrate probing.
        ffmpeg_adapter: FFmpegAdapter for the actual transcode.
        audit_log: AuditLog receiving one reference line per success.
    """

    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        file_scanner: FileScanner,
        ffprobe_adapter: FFprobeAdapter,
        ffmpeg_adapter: FFmpegAdapter,
        audit_log: AuditLog,
    ):
        self.config = config
        self.event_bus = event_bus
        self.file_scanner = file_scanner
        self.ffprobe_adapter = ffprobe_adapter
        self.ffmpeg_adapter = ffmpeg_adapter
        self.audit_log = audit_log
        self.logger = logging.getLogger(__name__)

        self.quality = QualityHeuristic(ffprobe_adapter, config.quality)
        self.dispatcher = BoundedDispatcher(concurrency=config.general.threads)

    def run(self, input_dir: Path, output_dir: Path) -> RunSummary:
        input_dir = Path(input_dir)
        output_dir = Path(output_dir)
        self.logger.info(f"Discovery started: {input_dir}")
        files = self.file_scanner.scan(input_dir)
        self.event_bus.publish(DiscoveryFinished(directory=input_dir, files_found=len(files)))

        output_dir.mkdir(parents=True, exist_ok=True)
        aggregator = SizeAggregator()
        runner = EncodeJobRunner(
            output_dir=output_dir,
            quality=self.quality,
            ffmpeg_adapter=self.ffmpeg_adapter,
            aggregator=aggregator,
            audit_log=self.audit_log,
            event_bus=self.event_bus,
            encoder_config=self.config.encoder,
        )

        self.logger.info(f"Processing {len(files)} file(s) with {self.dispatcher.concurrency} thread(s)")
        start_time = time.monotonic()
        report = self.dispatcher.dispatch(files, runner.run)
        elapsed = time.monotonic() - start_time

        aggregator.drain()
        succeeded = aggregator.count
        failed = len(files) - succeeded
        self.logger.info(
            f"Processing finished: launched={report.launched}, succeeded={succeeded}, "
            f"failed={failed}, elapsed={elapsed:.1f}s"
        )
        self.event_bus.publish(ProcessingFinished(succeeded=succeeded, failed=failed))

        summary = aggregator.summarize(files_found=len(files))
        self.logger.info(
            f"Median in file size: {summary.median_input_mb:.2f} MiB, "
            f"median out file size: {summary.median_output_mb:.2f} MiB"
        )
        return summary
