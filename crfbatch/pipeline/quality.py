"""Bitrate-driven CRF selection.

Sources above 2 Mbps get the most aggressive CRF, very low-bitrate sources
the gentlest one. Lower CRF means higher quality and a larger output.
"""

import logging
from pathlib import Path
from crfbatch.config.models import QualityConfig
from crfbatch.domain.errors import ProbeExecutionError, ProbeParseError
from crfbatch.infrastructure.ffprobe import FFprobeAdapter

logger = logging.getLogger(__name__)


def crf_for_bitrate(bitrate: int) -> int:
    """Maps a video bitrate (bits/s) to a CRF value."""
    if bitrate >= 2_000_000:
        return 48
    if bitrate >= 1_500_000:
        return 44
    if bitrate >= 1_000_000:
        return 32
    if bitrate > 500_000:
        return 28
    if bitrate >= 200_000:
        return 24
    return 22


class QualityHeuristic:
    """Probes a file and picks its CRF; never raises.

    A probe that can't run and a probe whose output can't be parsed fall
    back to different values (see QualityConfig).
    """

    def __init__(self, ffprobe_adapter: FFprobeAdapter, config: QualityConfig):
        self.ffprobe_adapter = ffprobe_adapter
        self.config = config

    def determine(self, file_path: Path) -> int:
        try:
            bitrate = self.ffprobe_adapter.get_video_bitrate(file_path)
        except ProbeExecutionError as e:
            logger.warning(f"{e}; using fallback CRF {self.config.probe_failure_crf}. ffprobe stderr:\n{e.stderr}")
            return self.config.probe_failure_crf
        except ProbeParseError as e:
            logger.warning(f"{e}; using fallback CRF {self.config.parse_failure_crf}")
            return self.config.parse_failure_crf

        crf = crf_for_bitrate(bitrate)
        logger.debug(f"CRF_SELECT: {Path(file_path).name} bitrate={bitrate} crf={crf}")
        return crf
