import logging
import time
import uuid
from pathlib import Path
from crfbatch.config.models import EncoderConfig
from crfbatch.domain.errors import AuditWriteError, EncodeError, StatError
from crfbatch.domain.events import JobCompleted, JobFailed, JobStarted
from crfbatch.domain.models import AuditRecord, EncodeJob, InputFile, JobStatus
from crfbatch.infrastructure.audit_log import AuditLog
from crfbatch.infrastructure.event_bus import EventBus
from crfbatch.infrastructure.ffmpeg import FFmpegAdapter
from crfbatch.pipeline.aggregator import SizeAggregator
from crfbatch.pipeline.quality import QualityHeuristic


class EncodeJobRunner:
    """Runs the full per-file sequence: CRF → encode → stat → report → audit.

    Every failure is contained here. `run()` always returns the EncodeJob and
    never raises a per-job error; a failed job contributes nothing to the
    aggregator or the audit log.
    """

    def __init__(
        self,
        output_dir: Path,
        quality: QualityHeuristic,
        ffmpeg_adapter: FFmpegAdapter,
        aggregator: SizeAggregator,
        audit_log: AuditLog,
        event_bus: EventBus,
        encoder_config: EncoderConfig,
    ):
        self.output_dir = Path(output_dir)
        self.quality = quality
        self.ffmpeg_adapter = ffmpeg_adapter
        self.aggregator = aggregator
        self.audit_log = audit_log
        self.event_bus = event_bus
        self.encoder_config = encoder_config
        self.logger = logging.getLogger(__name__)

    def _new_output_path(self) -> Path:
        return self.output_dir / f"{uuid.uuid4()}{self.encoder_config.output_suffix}"

    def _fail(self, job: EncodeJob, message: str, start_time: float) -> EncodeJob:
        job.status = JobStatus.FAILED
        job.error_message = message
        job.duration_seconds = time.monotonic() - start_time
        self.event_bus.publish(JobFailed(job=job, error_message=message))
        return job

    def run(self, input_file: InputFile) -> EncodeJob:
        start_time = time.monotonic()
        job = EncodeJob(source_file=input_file, status=JobStatus.PROCESSING)
        self.logger.info(f"Starting encoding for file: {input_file.name}")
        self.event_bus.publish(JobStarted(job=job))

        try:
            return self._execute(job, start_time)
        except Exception as e:
            # Log exception but don't take the rest of the batch down
            self.logger.error(f"Exception processing {input_file.name}: {e}")
            if job.status == JobStatus.COMPLETED:
                # Sizes were already reported
                return job
            return self._fail(job, f"Exception: {e}", start_time)

    def _execute(self, job: EncodeJob, start_time: float) -> EncodeJob:
        input_file = job.source_file
        job.crf = self.quality.determine(input_file.path)
        job.output_path = self._new_output_path()

        try:
            self.ffmpeg_adapter.encode(input_file.path, job.crf, job.output_path)
        except EncodeError as e:
            self.logger.error(f"Failed to encode file: {input_file.path}, error: {e}\nffmpeg stderr:\n{e.stderr}")
            return self._fail(job, str(e), start_time)

        try:
            job.input_size_bytes, job.output_size_bytes = self._stat_sizes(input_file.path, job.output_path)
        except StatError as e:
            self.logger.error(str(e))
            return self._fail(job, str(e), start_time)

        self.aggregator.submit(job.size_pair)
        job.status = JobStatus.COMPLETED

        try:
            self.audit_log.append(AuditRecord(input_name=input_file.name, output_path=job.output_path))
        except AuditWriteError as e:
            # Output already exists on disk; the job still counts as done
            self.logger.error(str(e))

        job.duration_seconds = time.monotonic() - start_time
        self.logger.info(
            f"Encoded {input_file.name} -> {job.output_path.name} (crf={job.crf}, "
            f"{job.input_size_bytes} -> {job.output_size_bytes} bytes, {job.duration_seconds:.1f}s)"
        )
        self.event_bus.publish(JobCompleted(job=job))
        return job

    @staticmethod
    def _stat_sizes(input_path: Path, output_path: Path):
        try:
            return input_path.stat().st_size, output_path.stat().st_size
        except OSError as e:
            raise StatError(f"Failed to get file sizes for: {input_path} and {output_path}, error: {e}") from e
