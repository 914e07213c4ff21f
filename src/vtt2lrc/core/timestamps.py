"""WebVTT timing-line parsing and LRC timestamp formatting."""

import re
from typing import Optional, Tuple

from .models import TimeComponents

# ----------------------
# Timing line regex
# ----------------------
_TIMING_RE = re.compile(
    r"""
    (?:(?P<start_h>\d{1,2}):)?      # optional hours
    (?P<start_m>\d{2}):
    (?P<start_s>\d{2})\.
    (?P<start_ms>\d{3})
    \s+-->\s+
    (?:(?P<end_h>\d{1,2}):)?
    (?P<end_m>\d{2}):
    (?P<end_s>\d{2})\.
    (?P<end_ms>\d{3})
    """,
    re.VERBOSE,
)


def _components(match: "re.Match[str]", prefix: str) -> TimeComponents:
    hours = match.group(f"{prefix}_h")
    return TimeComponents(
        hours=int(hours) if hours else 0,
        minutes=int(match.group(f"{prefix}_m")),
        seconds=int(match.group(f"{prefix}_s")),
        milliseconds=int(match.group(f"{prefix}_ms")),
    )


def parse_timing_range(line: str) -> Optional[Tuple[TimeComponents, TimeComponents]]:
    """Parse ``[H:]MM:SS.mmm --> [H:]MM:SS.mmm`` into (start, end).

    Returns None when the line is not a timing line. Cue settings after the
    end time (``align:start`` and the like) are ignored.
    """
    match = _TIMING_RE.search(line)
    if match is None:
        return None
    return _components(match, "start"), _components(match, "end")


def parse_timing_line(line: str) -> Optional[TimeComponents]:
    """Return the start time of a timing line, or None if it is not one."""
    parsed = parse_timing_range(line)
    return parsed[0] if parsed else None


def format_lrc_timestamp(time: TimeComponents) -> str:
    """Format as ``[MM:SS.CC]``; minutes above 99 are printed in full."""
    return "[%02d:%02d.%02d]" % (time.total_minutes, time.seconds, time.centiseconds)
