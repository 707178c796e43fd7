"""Exception hierarchy for the transcoding pipeline.

Two groups matter to callers:

- Run-level errors (`ConfigError`, `DiscoveryError`) stop the whole batch
  before any job starts.
- Job-level errors (`ProbeError`, `EncodeError`, `StatError`,
  `AuditWriteError`) are caught inside the job that raised them and only
  ever reach the log.
"""

from typing import Optional


class CrfBatchError(Exception):
    """Base class for all crfbatch errors."""

    pass


class ConfigError(CrfBatchError):
    """Missing or invalid configuration (required paths, YAML, CLI values)."""

    pass


# --- Discovery ---
class DiscoveryError(CrfBatchError):
    """Input set could not be built; fatal to the run."""

    pass


class NotFoundError(DiscoveryError):
    """Input directory does not exist or cannot be listed."""

    pass


class EmptySetError(DiscoveryError):
    """Input directory holds no file with the target extension."""

    pass


# --- Probing ---
class ProbeError(CrfBatchError):
    """ffprobe could not provide a usable bitrate."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class ProbeExecutionError(ProbeError):
    """ffprobe could not be run or exited non-zero."""

    pass


class ProbeParseError(ProbeError):
    """ffprobe ran but its output is not an integer bitrate."""

    pass


# --- Per-job failures ---
class EncodeError(CrfBatchError):
    """ffmpeg could not be run or exited non-zero."""

    def __init__(self, message: str, stderr: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class StatError(CrfBatchError):
    """Input or output size could not be read after encoding."""

    pass


class AuditWriteError(CrfBatchError):
    """A reference line could not be appended to the audit log."""

    pass


# --- Aggregation ---
class InsufficientDataError(CrfBatchError):
    """A statistic was requested over an empty collection."""

    pass
