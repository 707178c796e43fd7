from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

class GeneralConfig(BaseModel):
    threads: int = Field(default=4, gt=0)
    extension: str = ".mp4"
    log_path: str = "logfile.log"
    reference_path: str = "reference.txt"
    show_progress: bool = True
    debug: bool = False

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v:
            raise ValueError("extension must not be empty")
        return v

class EncoderConfig(BaseModel):
    """Fixed ffmpeg options applied to every job; only CRF varies per file."""
    video_codec: str = "libx265"
    video_bitrate: str = "0"
    preset: str = "medium"
    tune: Optional[str] = "animation"
    audio_codec: str = "aac"
    audio_bitrate: str = "60k"
    threads: int = Field(default=16, gt=0)
    stream_maps: List[str] = Field(default_factory=lambda: ["0:v:0", "0:a:0"])
    output_suffix: str = ".mp4"

class QualityConfig(BaseModel):
    """CRF used when the source bitrate cannot be determined."""
    probe_failure_crf: int = Field(default=28, ge=0, le=51)
    parse_failure_crf: int = Field(default=24, ge=0, le=51)

class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    quality: QualityConfig = Field(default_factory=QualityConfig)
