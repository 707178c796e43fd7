import logging
import threading
import time
import pytest
import yaml
from pathlib import Path
from crfbatch.config.models import AppConfig
from crfbatch.domain.errors import EncodeError, ProbeExecutionError
from crfbatch.infrastructure.event_bus import EventBus
from crfbatch.infrastructure.logging import LOGGER_NAME

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config(tmp_path):
    """Returns a sample AppConfig writing its side files under tmp_path."""
    return AppConfig(
        general={
            "threads": 4,
            "extension": ".mp4",
            "log_path": str(tmp_path / "logfile.log"),
            "reference_path": str(tmp_path / "reference.txt"),
            "show_progress": False,
            "debug": False,
        },
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "crfbatch.yaml"

    content = {
        'general': {
            'threads': 2,
            'extension': '.mkv',
            'log_path': str(tmp_path / "run.log"),
            'reference_path': str(tmp_path / "refs.txt"),
            'debug': True,
        },
        'encoder': {
            'preset': 'slow',
            'tune': None,
            'threads': 8,
        },
        'quality': {
            'probe_failure_crf': 30,
        },
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def test_output_dir(tmp_path):
    """Creates a test output directory."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir

@pytest.fixture
def dummy_video_files(test_input_dir):
    """Creates ten dummy MP4 files of distinct sizes plus some noise."""
    files = []
    for i in range(10):
        f = test_input_dir / f"video{i}.mp4"
        f.write_bytes(b"x" * (1000 * (i + 1)))
        files.append(f)

    (test_input_dir / "notes.txt").write_text("not a video")
    (test_input_dir / "nested.mp4").mkdir()
    return files

# ============================================================================
# External tool fakes
# ============================================================================

class FakeFFmpeg:
    """Stands in for FFmpegAdapter: writes an output a tenth of the input size.

    Inputs whose name is in `fail_names` raise EncodeError. `delay` keeps each
    encode busy long enough for jobs to overlap.
    """

    def __init__(self, fail_names=(), delay: float = 0.0):
        self.fail_names = set(fail_names)
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()
        self.active = 0
        self.peak_active = 0

    def encode(self, input_path: Path, crf: int, output_path: Path) -> None:
        with self._lock:
            self.calls.append((Path(input_path).name, crf, Path(output_path)))
            self.active += 1
            self.peak_active = max(self.peak_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if Path(input_path).name in self.fail_names:
                raise EncodeError("ffmpeg exited with code 1", stderr="Invalid data found when processing input", returncode=1)
            size = Path(input_path).stat().st_size
            Path(output_path).write_bytes(b"y" * (size // 10))
        finally:
            with self._lock:
                self.active -= 1


class FakeFFprobe:
    """Returns bitrates from a name → value map; missing names fail to probe."""

    def __init__(self, bitrates=None, default: int = 1_200_000):
        self.bitrates = bitrates or {}
        self.default = default

    def get_video_bitrate(self, file_path: Path) -> int:
        value = self.bitrates.get(Path(file_path).name, self.default)
        if value is None:
            raise ProbeExecutionError(f"ffprobe failed for {file_path}", stderr="moov atom not found")
        return value


@pytest.fixture
def fake_ffmpeg_factory():
    return FakeFFmpeg

@pytest.fixture
def fake_ffprobe_factory():
    return FakeFFprobe

# ============================================================================
# Logger isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logging() detaches the package logger from root; undo it per test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
