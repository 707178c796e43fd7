from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

MIB = 1024 * 1024

class JobStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

class InputFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    name: str

class SizePair(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_bytes: int = Field(ge=0)
    output_bytes: int = Field(ge=0)

class AuditRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_name: str
    output_path: Path

    def to_line(self) -> str:
        return f"{self.input_name} - {self.output_path}\n"

class EncodeJob(BaseModel):
    source_file: InputFile
    status: JobStatus = JobStatus.PENDING
    crf: Optional[int] = None
    output_path: Optional[Path] = None
    input_size_bytes: Optional[int] = None
    output_size_bytes: Optional[int] = None
    error_message: Optional[str] = None
    duration_seconds: Optional[float] = None

    @property
    def size_pair(self) -> Optional[SizePair]:
        if self.input_size_bytes is None or self.output_size_bytes is None:
            return None
        return SizePair(input_bytes=self.input_size_bytes, output_bytes=self.output_size_bytes)

class RunSummary(BaseModel):
    """Aggregate result of one batch run. Sizes are in bytes."""

    files_found: int
    succeeded: int
    failed: int
    median_input_bytes: float
    median_output_bytes: float
    total_input_bytes: int
    total_output_bytes: int

    @property
    def median_input_mb(self) -> float:
        return self.median_input_bytes / MIB

    @property
    def median_output_mb(self) -> float:
        return self.median_output_bytes / MIB

    @property
    def space_saved_bytes(self) -> int:
        return max(0, self.total_input_bytes - self.total_output_bytes)

    @property
    def compression_ratio(self) -> float:
        if self.total_input_bytes == 0:
            return 0.0
        return self.total_output_bytes / self.total_input_bytes
