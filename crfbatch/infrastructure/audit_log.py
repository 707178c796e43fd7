import threading
from pathlib import Path
from crfbatch.domain.errors import AuditWriteError
from crfbatch.domain.models import AuditRecord

class AuditLog:
    """Append-only input → output reference file shared by all workers.

    Each record is written as one line under a lock, so concurrent appends
    never interleave. The file is opened per append and closed right after.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, record: AuditRecord) -> None:
        line = record.to_line()
        with self._lock:
            try:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as e:
                raise AuditWriteError(f"Failed to write reference for {record.input_name} to {self.path}: {e}") from e
