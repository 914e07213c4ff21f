"""VTT cue extraction and LRC rendering.

This module handles:
- Skipping headers, NOTE blocks and numeric cue identifiers
- Grouping cue text under the start time of its timing line
- Stripping inline markup such as ``<b>`` or ``<c.yellow>``
- Rendering the cues as an LRC document with a title tag
"""

import re
from typing import Iterable, Iterator, List, Optional

from .models import Cue
from .timestamps import format_lrc_timestamp, parse_timing_line

WEBVTT_HEADER = "WEBVTT"
NOTE_PREFIX = "NOTE"

_INDEX_RE = re.compile(r"^\d+$")
_MARKUP_RE = re.compile(r"<[^>]+>")


def _is_ignorable(line: str) -> bool:
    """Blank lines, the header, NOTE comments and bare cue numbers."""
    if not line or line == WEBVTT_HEADER or line.startswith(NOTE_PREFIX):
        return True
    return bool(_INDEX_RE.match(line))


def strip_markup(text: str) -> str:
    """Remove inline tags and surrounding whitespace."""
    return _MARKUP_RE.sub("", text).strip()


def iter_cues(lines: Iterable[str]) -> Iterator[Cue]:
    """Walk subtitle lines and yield each cue that carries text.

    A cue opens on every timing line and collects the text lines that follow
    it. It is emitted when the next timing line arrives or the input ends,
    and only if some text survived markup stripping.
    """
    current: Optional[Cue] = None

    for raw_line in lines:
        line = raw_line.strip()
        if _is_ignorable(line):
            continue

        start = parse_timing_line(line)
        if start is not None:
            if current is not None and current.text:
                yield current
            current = Cue(start_timestamp=format_lrc_timestamp(start))
            continue

        if current is not None:
            current.append(strip_markup(line))

    if current is not None and current.text:
        yield current


def extract_cues(content: str) -> List[Cue]:
    """Parse a whole subtitle document into its cues."""
    return list(iter_cues(content.splitlines()))


def format_lrc(cues: Iterable[Cue], title: str) -> str:
    """Render cues as LRC text, one ``[MM:SS.CC]text`` line per cue."""
    lines = [f"[ti:{title}]"]
    lines.extend(f"{cue.start_timestamp}{cue.text}" for cue in cues)
    return "".join(f"{line}\n" for line in lines)


def convert_to_lrc(content: str, title: str) -> str:
    """Convert VTT document text into an LRC document titled ``title``."""
    return format_lrc(iter_cues(content.splitlines()), title)
