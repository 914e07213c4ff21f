"""Configuration settings for vtt2lrc."""

import os
import re
import tempfile
from pathlib import Path

from .exceptions import ConfigError

# Directories
DEFAULT_SCRATCH_DIR = Path(tempfile.gettempdir()) / "vtt2lrc"

# Subtitle conversion
SUBTITLE_EXTENSION = ".vtt"
LRC_EXTENSION = ".lrc"
LRC_MEDIA_TYPE = "text/x-lrc"

# Audio extraction (can be overridden via environment variables)
MP3_ENCODER = "libmp3lame"
MP3_EXTENSION = "mp3"
MP3_MEDIA_TYPE = "audio/mpeg"
VBR_QUALITY = int(os.getenv("VTT2LRC_VBR_QUALITY", "2"))
CBR_BITRATE = os.getenv("VTT2LRC_CBR_BITRATE", "192k")
ENCODER_TIMEOUT = float(os.getenv("VTT2LRC_ENCODER_TIMEOUT", "3600"))

VBR_QUALITY_RANGE = (0, 9)
BITRATE_PATTERN = re.compile(r"^\d+k$")

# Video extensions offered for extraction, and the ones selected by default
VIDEO_EXTENSIONS = ("mp4", "mkv", "mov", "avi", "flv", "webm", "m4v")
DEFAULT_VIDEO_EXTENSIONS = ("mp4",)

# Fallback names when an entry has no usable display name
FALLBACK_VIDEO_NAME = "video"
FALLBACK_SUBTITLE_NAME = "unknown.vtt"


def validate_config() -> None:
    """Validate configuration values."""
    low, high = VBR_QUALITY_RANGE
    if not low <= VBR_QUALITY <= high:
        raise ConfigError(f"VBR quality must be between {low} and {high}")

    if not BITRATE_PATTERN.match(CBR_BITRATE):
        raise ConfigError(f"Invalid CBR bitrate: {CBR_BITRATE}")

    if ENCODER_TIMEOUT <= 0:
        raise ConfigError("Encoder timeout must be positive")


def get_scratch_dir() -> Path:
    """Get scratch directory from environment or default."""
    scratch_dir = os.getenv("VTT2LRC_SCRATCH_DIR")
    if scratch_dir:
        return Path(scratch_dir)
    return DEFAULT_SCRATCH_DIR


def get_encoder_binary() -> str:
    """Get the ffmpeg executable, preferring an explicit override."""
    binary = os.getenv("VTT2LRC_FFMPEG")
    if binary:
        return binary
    from pydub.utils import get_encoder_name

    return get_encoder_name()


# Validate config on import
validate_config()
