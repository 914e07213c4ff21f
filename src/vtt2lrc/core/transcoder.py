"""Single-file MP3 extraction through scratch copies and ffmpeg."""

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..config import FALLBACK_VIDEO_NAME, MP3_EXTENSION, MP3_MEDIA_TYPE
from ..utils.logging import get_logger
from ..utils.performance import timing_decorator
from .encoder import EncoderRunner, build_ffmpeg_command
from .models import (
    EncoderFailure,
    ExtractResult,
    IoFailure,
    Mp3Mode,
    OutputDirMissing,
)
from .naming import (
    extension_of,
    last_path_segment,
    sanitize_file_name,
    strip_extension,
)
from .storage import (
    StorageDirectory,
    StorageEntry,
    copy_entry_to_file,
    copy_file_to_entry,
    create_or_replace,
)

logger = get_logger(__name__)


def display_name_for(entry: StorageEntry) -> str:
    """Entry name, else the last segment of its location, else a placeholder."""
    return entry.name or last_path_segment(entry.location) or FALLBACK_VIDEO_NAME


def output_name_for(safe_name: str) -> str:
    return f"{strip_extension(safe_name)}.{MP3_EXTENSION}"


@contextmanager
def scratch_files(scratch_dir: Path, input_ext: str) -> Iterator[Tuple[Path, Path]]:
    """Yield (input, output) scratch paths, removing both on exit."""
    scratch_dir.mkdir(parents=True, exist_ok=True)
    stamp = time.time_ns()
    input_path = scratch_dir / f"ffmpeg_in_{stamp}.{input_ext}"
    output_path = scratch_dir / f"ffmpeg_out_{stamp}.{MP3_EXTENSION}"
    try:
        yield input_path, output_path
    finally:
        for path in (input_path, output_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove scratch file {path}: {e}")


@timing_decorator
def extract_one_mp3(
    entry: StorageEntry,
    output_dir: Optional[StorageDirectory],
    mode: Mp3Mode,
    scratch_dir: Path,
    runner: EncoderRunner,
) -> ExtractResult:
    """
    Extract the audio track of one video into ``output_dir`` as MP3.

    Per-item failures are never raised: each is returned as a failed
    ExtractResult carrying the matching error kind. Scratch copies are
    removed on every path out of this function.
    """
    safe_name = sanitize_file_name(display_name_for(entry))
    output_name = output_name_for(safe_name)

    if output_dir is None or not output_dir.is_accessible():
        return ExtractResult.failed(
            safe_name,
            output_name,
            "❌ Cannot access output directory",
            OutputDirMissing("output directory missing"),
        )

    input_ext = extension_of(safe_name, "mp4")
    with scratch_files(scratch_dir, input_ext) as (input_cache, output_cache):
        try:
            copy_entry_to_file(entry, input_cache)
        except Exception as e:
            return ExtractResult.failed(
                safe_name,
                output_name,
                f"❌ Failed to copy input: {e}",
                IoFailure(str(e) or "copy input failed"),
            )

        try:
            session = runner.run(
                build_ffmpeg_command(str(input_cache), str(output_cache), mode)
            )
        except Exception as e:
            logger.debug("Encoder runner raised", exc_info=True)
            return ExtractResult.failed(
                safe_name,
                output_name,
                f"❌ Encoding failed ({safe_name}): {e}",
                EncoderFailure(str(e) or type(e).__name__, code=-1),
            )
        if not session.succeeded:
            code = session.return_code if session.return_code is not None else -1
            return ExtractResult.failed(
                safe_name,
                output_name,
                f"❌ Encoding failed ({safe_name}): {code}",
                EncoderFailure(session.output or None, code=code),
                encoder_output=session.output,
            )

        try:
            output_entry = create_or_replace(output_dir, MP3_MEDIA_TYPE, output_name)
        except Exception as e:
            logger.warning(f"Could not replace {output_name}: {e}")
            output_entry = None
        if output_entry is None:
            return ExtractResult.failed(
                safe_name,
                output_name,
                f"❌ Failed to create output file: {output_name}",
                IoFailure("create output failed"),
                encoder_output=session.output,
            )

        try:
            copy_file_to_entry(output_cache, output_entry)
        except Exception as e:
            return ExtractResult.failed(
                safe_name,
                output_name,
                f"❌ Failed to write output: {e}",
                IoFailure(str(e) or "copy output failed"),
                encoder_output=session.output,
            )

        return ExtractResult.succeeded(
            safe_name,
            output_name,
            output_entry.location,
            f"✅ {safe_name} -> {output_name}",
            encoder_output=session.output,
        )
