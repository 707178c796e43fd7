import pytest
from pathlib import Path
from pydantic import ValidationError
from crfbatch.config.loader import load_config
from crfbatch.config.models import AppConfig, EncoderConfig, GeneralConfig, QualityConfig
from crfbatch.domain.errors import ConfigError

def test_config_defaults():
    config = AppConfig()
    assert config.general.threads == 4
    assert config.general.extension == ".mp4"
    assert config.general.log_path == "logfile.log"
    assert config.general.reference_path == "reference.txt"
    assert config.encoder.video_codec == "libx265"
    assert config.encoder.stream_maps == ["0:v:0", "0:a:0"]
    assert config.quality.probe_failure_crf == 28
    assert config.quality.parse_failure_crf == 24

def test_invalid_threads():
    with pytest.raises(ValidationError):
        GeneralConfig(threads=0)

def test_invalid_extension():
    with pytest.raises(ValidationError):
        GeneralConfig(extension="")

def test_invalid_fallback_crf():
    with pytest.raises(ValidationError):
        QualityConfig(probe_failure_crf=60)

def test_invalid_encoder_threads():
    with pytest.raises(ValidationError):
        EncoderConfig(threads=0)

def test_load_config_without_path_uses_defaults():
    assert load_config(None) == AppConfig()

def test_load_config_from_yaml(config_yaml_path):
    config = load_config(config_yaml_path)
    assert config.general.threads == 2
    assert config.general.extension == ".mkv"
    assert config.general.debug is True
    assert config.encoder.preset == "slow"
    assert config.encoder.tune is None
    assert config.encoder.threads == 8
    assert config.encoder.audio_codec == "aac"
    assert config.quality.probe_failure_crf == 30
    assert config.quality.parse_failure_crf == 24

def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml")

def test_load_config_invalid_values(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("general:\n  threads: 0\n")
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(path)

def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("general: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path)

def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == AppConfig()

def test_load_config_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(path)
