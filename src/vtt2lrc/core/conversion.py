"""Batch VTT to LRC conversion, writing each LRC next to its subtitle."""

import logging
from typing import Iterator, Optional

from ..config import (
    FALLBACK_SUBTITLE_NAME,
    LRC_EXTENSION,
    LRC_MEDIA_TYPE,
    SUBTITLE_EXTENSION,
)
from ..exceptions import ConversionError
from ..utils.logging import get_logger
from .events import (
    BatchEvent,
    BatchReport,
    BatchStatus,
    CancellationToken,
    FinishedEvent,
    ProgressEvent,
    ResultEvent,
    drain,
    log_event,
)
from .models import ConversionResult
from .naming import get_output_file_name
from .storage import StorageDirectory, StorageEntry, create_or_replace, read_text, write_text
from .vtt import convert_to_lrc

logger = get_logger(__name__)


def is_subtitle(entry: StorageEntry) -> bool:
    return bool(entry.name) and entry.name.lower().endswith(SUBTITLE_EXTENSION)


def _read_subtitle(entry: StorageEntry) -> str:
    try:
        return read_text(entry)
    except UnicodeDecodeError as e:
        raise ConversionError(f"not valid UTF-8 text: {e.reason}") from e


def convert_entry(
    entry: StorageEntry, output_dir: StorageDirectory, remove_nested: bool
) -> ConversionResult:
    """Convert one VTT entry, replacing any LRC of the same name."""
    original_name = entry.name or FALLBACK_SUBTITLE_NAME
    try:
        content = _read_subtitle(entry)
        base_name = get_output_file_name(original_name, remove_nested)
        lrc_name = f"{base_name}{LRC_EXTENSION}"
        lrc_content = convert_to_lrc(content, base_name)

        lrc_entry = create_or_replace(output_dir, LRC_MEDIA_TYPE, lrc_name)
        if lrc_entry is None:
            return ConversionResult(
                original_name, lrc_name, False, f"❌ Failed to create file: {lrc_name}"
            )
        write_text(lrc_entry, lrc_content)
    except Exception as e:
        logger.debug(f"Conversion of {original_name} failed", exc_info=True)
        return ConversionResult(
            original_name, None, False, f"❌ Conversion failed ({original_name}): {e}"
        )

    return ConversionResult(
        original_name,
        lrc_name,
        True,
        f"✅ {original_name} -> {lrc_name}",
        output_location=lrc_entry.location,
    )


def _converted(
    entry: StorageEntry, output_dir: StorageDirectory, remove_nested: bool
) -> Iterator[BatchEvent]:
    result = convert_entry(entry, output_dir, remove_nested)
    yield ResultEvent(result)
    yield log_event(result.message, logging.INFO if result.success else logging.ERROR)


def iter_folder(
    directory: StorageDirectory,
    remove_nested: bool = True,
    cancel: Optional[CancellationToken] = None,
) -> Iterator[BatchEvent]:
    """Convert every ``.vtt`` directly inside ``directory``, in place."""
    try:
        if not directory.is_accessible():
            yield log_event("Error: cannot access folder.", logging.ERROR)
            yield FinishedEvent(BatchStatus.ABORTED)
            return

        subtitles = [e for e in directory.list_entries() if e.is_file and is_subtitle(e)]
        total = len(subtitles)
        if total == 0:
            yield log_event("No .vtt files found.")
            yield FinishedEvent(BatchStatus.EMPTY)
            return

        yield log_event(f"Found {total} VTT files, converting...")
        processed = 0
        for entry in subtitles:
            if cancel is not None and cancel.cancelled:
                yield log_event(
                    f"Cancelled after {processed}/{total} files.", logging.WARNING
                )
                yield FinishedEvent(BatchStatus.CANCELLED)
                return
            for event in _converted(entry, directory, remove_nested):
                yield event
            processed += 1
            yield ProgressEvent(processed, total, entry.name or "")
    except Exception as e:
        logger.debug("Conversion batch failed", exc_info=True)
        yield log_event(f"Fatal error: {e}", logging.CRITICAL)
        yield FinishedEvent(BatchStatus.FAILED)
        return

    yield FinishedEvent(BatchStatus.COMPLETED)


def iter_file(
    entry: StorageEntry,
    remove_nested: bool = True,
    output_dir: Optional[StorageDirectory] = None,
) -> Iterator[BatchEvent]:
    """Convert a single ``.vtt``, by default into its own directory."""
    if not is_subtitle(entry):
        yield log_event(f"Not a .vtt file: {entry.name or entry.location}", logging.WARNING)
        yield FinishedEvent(BatchStatus.EMPTY)
        return

    target = output_dir or entry.parent()
    if target is None or not target.is_accessible():
        yield log_event("Error: cannot access output folder.", logging.ERROR)
        yield FinishedEvent(BatchStatus.ABORTED)
        return

    for event in _converted(entry, target, remove_nested):
        yield event
    yield ProgressEvent(1, 1, entry.name or "")
    yield FinishedEvent(BatchStatus.COMPLETED)


def convert_folder(directory: StorageDirectory, remove_nested: bool = True,
                   cancel: Optional[CancellationToken] = None) -> BatchReport:
    return drain(iter_folder(directory, remove_nested, cancel))


def convert_file(entry: StorageEntry, remove_nested: bool = True,
                 output_dir: Optional[StorageDirectory] = None) -> BatchReport:
    return drain(iter_file(entry, remove_nested, output_dir))
