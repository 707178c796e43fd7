import subprocess
from pathlib import Path
from crfbatch.domain.errors import ProbeExecutionError, ProbeParseError

class FFprobeAdapter:
    """Wrapper around ffprobe to read the first video stream's bitrate."""

    def __init__(self, binary: str = "ffprobe"):
        self.binary = binary

    def _build_command(self, file_path: Path) -> list:
        return [
            self.binary,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=bit_rate",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(file_path),
        ]

    def get_video_bitrate(self, file_path: Path) -> int:
        """Returns the video bitrate in bits per second.

        Raises ProbeExecutionError when ffprobe can't run or exits non-zero,
        ProbeParseError when its output isn't a single integer (e.g. "N/A").
        """
        cmd = self._build_command(file_path)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ProbeExecutionError(f"ffprobe could not be started for {file_path}: {e}") from e

        if result.returncode != 0:
            raise ProbeExecutionError(
                f"ffprobe failed for {file_path} (exit {result.returncode})",
                stderr=result.stderr or "",
            )

        text = (result.stdout or "").strip()
        try:
            return int(text)
        except ValueError as e:
            raise ProbeParseError(
                f"Failed to parse video bitrate for {file_path}: {text!r}",
                stderr=result.stderr or "",
            ) from e
