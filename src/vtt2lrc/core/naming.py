"""Output file naming for converted and extracted files."""

import re
from typing import Optional

from ..config import SUBTITLE_EXTENSION

# Common audio, video and subtitle extensions, scanned in this order
KNOWN_EXTENSIONS = (
    # Audio
    ".mp3", ".wav", ".aac", ".flac", ".ogg", ".wma", ".m4a", ".opus",
    ".aiff", ".au", ".ra", ".ac3", ".dts", ".amr", ".awb",
    # Video
    ".mp4", ".avi", ".mkv", ".flv", ".mov", ".wmv", ".webm", ".m4v",
    ".3gp", ".asf", ".rm", ".rmvb", ".vob", ".ogv", ".dv", ".ts",
    # Subtitle
    ".vtt", ".srt", ".sub", ".sbv", ".ass", ".ssa",
    ".webvtt", ".ttml", ".dfxp", ".smi", ".sami",
)

_ILLEGAL_CHARS_RE = re.compile(r'[\\/:*?"<>|]')


def _matching_known_extension(lower_name: str) -> Optional[str]:
    for ext in KNOWN_EXTENSIONS:
        if lower_name.endswith(ext):
            return ext
    return None


def get_output_file_name(
    original_name: str,
    remove_nested: bool,
    primary_extension: str = SUBTITLE_EXTENSION,
) -> str:
    """
    Derive an output base name from a subtitle file name.

    Args:
        original_name: Input file name, e.g. "song.mp3.vtt"
        remove_nested: Also strip known media extensions left behind the
                       primary one ("song.mp3.vtt" -> "song")
        primary_extension: Extension removed first, case-insensitively

    Returns:
        Base name without extension
    """
    base_name = original_name
    if original_name.lower().endswith(primary_extension.lower()):
        base_name = original_name[: len(original_name) - len(primary_extension)]

    if not remove_nested:
        return base_name

    lower_base = base_name.lower()
    while True:
        ext = _matching_known_extension(lower_base)
        if ext is not None:
            base_name = base_name[: len(base_name) - len(ext)]
            lower_base = lower_base[: len(lower_base) - len(ext)]
        # No dot left means nothing extension-like remains
        if ext is None or "." not in lower_base:
            break

    return base_name


def sanitize_file_name(name: str) -> str:
    """Replace characters that are illegal in file names with underscores."""
    return _ILLEGAL_CHARS_RE.sub("_", name).strip()


def strip_extension(name: str) -> str:
    """Remove the last ``.suffix`` only; names without a dot are unchanged."""
    if "." not in name:
        return name
    return name.rsplit(".", 1)[0]


def extension_of(name: str, default: str = "") -> str:
    """Text after the last dot, or ``default`` when there is none."""
    if "." not in name:
        return default
    return name.rsplit(".", 1)[1]


def last_path_segment(location: str) -> Optional[str]:
    """Final component of a path or URI-like location."""
    segment = location.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    if ":" in segment:
        # Document ids such as "primary:Movies/clip.mp4"
        segment = segment.rsplit(":", 1)[-1]
    return segment or None
