import subprocess
import logging
import time
from pathlib import Path
from typing import List
from crfbatch.config.models import EncoderConfig
from crfbatch.domain.errors import EncodeError

class FFmpegAdapter:
    """Wrapper around ffmpeg for H.265 transcoding at a given CRF."""

    def __init__(self, config: EncoderConfig, binary: str = "ffmpeg"):
        self.config = config
        self.binary = binary
        self.logger = logging.getLogger(__name__)

    def _build_command(self, input_path: Path, crf: int, output_path: Path) -> List[str]:
        """Constructs the ffmpeg command line arguments."""
        cmd = [self.binary, "-i", str(input_path)]
        for stream_map in self.config.stream_maps:
            cmd.extend(["-map", stream_map])

        # Video encoding settings
        cmd.extend([
            "-c:v", self.config.video_codec,
            "-b:v", self.config.video_bitrate,
            "-crf", str(crf),
            "-preset", self.config.preset,
        ])

        # Audio settings
        cmd.extend([
            "-c:a", self.config.audio_codec,
            "-b:a", self.config.audio_bitrate,
        ])

        if self.config.tune:
            cmd.extend(["-tune", self.config.tune])
        cmd.extend(["-threads", str(self.config.threads)])
        cmd.append(str(output_path))
        return cmd

    def encode(self, input_path: Path, crf: int, output_path: Path) -> None:
        """Runs ffmpeg to completion; raises EncodeError with captured stderr on failure."""
        cmd = self._build_command(input_path, crf, output_path)
        self.logger.debug(f"FFMPEG_CMD: {' '.join(cmd)}")

        start_time = time.monotonic()
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise EncodeError(f"ffmpeg could not be started for {input_path}: {e}") from e

        elapsed = time.monotonic() - start_time
        if result.returncode != 0:
            raise EncodeError(
                f"ffmpeg exited with code {result.returncode}",
                stderr=result.stderr or "",
                returncode=result.returncode,
            )
        self.logger.debug(f"FFMPEG_END: {input_path.name} crf={crf} elapsed={elapsed:.2f}s")
