"""Validation utilities."""

from typing import Iterable, Set

from ..config import BITRATE_PATTERN, VBR_QUALITY_RANGE
from ..core.models import Cbr, Mp3Mode, Vbr
from ..exceptions import ValidationError


def normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    """Lowercase extensions without leading dots; blanks are dropped."""
    normalized = set()
    for ext in extensions:
        cleaned = ext.strip().lstrip(".").lower()
        if cleaned:
            normalized.add(cleaned)
    return normalized


def validate_vbr_quality(quality: int) -> int:
    """Validate LAME VBR quality (0 = best, 9 = smallest)."""
    min_q, max_q = VBR_QUALITY_RANGE
    if not min_q <= quality <= max_q:
        raise ValidationError(f"VBR quality must be between {min_q} and {max_q}")
    return quality


def validate_bitrate(bitrate: str) -> str:
    """Validate a CBR bitrate such as "192k"."""
    bitrate = bitrate.strip().lower()
    if not BITRATE_PATTERN.match(bitrate):
        raise ValidationError(f"Invalid bitrate: {bitrate} (expected e.g. '192k')")
    return bitrate


def build_mp3_mode(use_vbr: bool, quality: int, bitrate: str) -> Mp3Mode:
    """Build the encoding mode for a batch from CLI-style options."""
    if use_vbr:
        return Vbr(quality=validate_vbr_quality(quality))
    return Cbr(bitrate=validate_bitrate(bitrate))
