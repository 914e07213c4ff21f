"""Batch MP3 extraction over a folder or a single video file."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from ..config import get_scratch_dir
from ..utils.logging import get_logger
from ..utils.validation import normalize_extensions
from .encoder import EncoderRunner, FFmpegRunner
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
from .models import ExtractResult, Mp3Mode, Vbr, describe_mode
from .naming import extension_of
from .storage import StorageDirectory, StorageEntry
from .transcoder import display_name_for, extract_one_mp3

logger = get_logger(__name__)


def matches_extension(name: Optional[str], extensions: Set[str]) -> bool:
    """Case-insensitive check of the text after the last dot."""
    if not name:
        return False
    ext = extension_of(name).lower()
    return bool(ext) and ext in extensions


class ExtractionOrchestrator:
    """Drives one encoder run per matching video, one item at a time."""

    def __init__(
        self,
        runner: Optional[EncoderRunner] = None,
        scratch_dir: Optional[Path] = None,
        show_encoder_logs: bool = False,
    ):
        self.runner = runner or FFmpegRunner()
        self.scratch_dir = scratch_dir or get_scratch_dir()
        self.show_encoder_logs = show_encoder_logs

    def _extract(
        self, entry: StorageEntry, output_dir: Optional[StorageDirectory], mode: Mp3Mode
    ) -> Iterator[BatchEvent]:
        result: ExtractResult = extract_one_mp3(
            entry, output_dir, mode, self.scratch_dir, self.runner
        )
        yield ResultEvent(result)
        if self.show_encoder_logs and result.encoder_output:
            for line in result.encoder_output.splitlines():
                if line.strip():
                    yield log_event(f"  {line}")
        yield log_event(result.message, logging.INFO if result.success else logging.ERROR)

    def iter_folder(
        self,
        directory: StorageDirectory,
        extensions: Iterable[str],
        mode: Mp3Mode = Vbr(),
        output_dir: Optional[StorageDirectory] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Iterator[BatchEvent]:
        """
        Extract every video directly inside ``directory``.

        Output goes next to the inputs unless ``output_dir`` is given.
        A failing item is reported and the batch moves on to the next one.
        """
        accepted = normalize_extensions(extensions)
        if not accepted:
            yield log_event("Select at least one extension.", logging.WARNING)
            yield FinishedEvent(BatchStatus.EMPTY)
            return

        try:
            if not directory.is_accessible():
                yield log_event("Error: cannot access folder.", logging.ERROR)
                yield FinishedEvent(BatchStatus.ABORTED)
                return

            videos = [
                entry
                for entry in directory.list_entries()
                if entry.is_file and matches_extension(entry.name, accepted)
            ]
            total = len(videos)
            if total == 0:
                yield log_event("No video files with matching extensions found.")
                yield FinishedEvent(BatchStatus.EMPTY)
                return

            yield log_event(
                f"Found {total} video files, extracting as {describe_mode(mode)}..."
            )
            target = output_dir or directory
            processed = 0
            for entry in videos:
                if cancel is not None and cancel.cancelled:
                    yield log_event(
                        f"Cancelled after {processed}/{total} files.", logging.WARNING
                    )
                    yield FinishedEvent(BatchStatus.CANCELLED)
                    return
                for event in self._extract(entry, target, mode):
                    yield event
                processed += 1
                yield ProgressEvent(processed, total, display_name_for(entry))
        except Exception as e:
            logger.debug("Extraction batch failed", exc_info=True)
            yield log_event(f"Fatal error: {e}", logging.CRITICAL)
            yield FinishedEvent(BatchStatus.FAILED)
            return

        yield FinishedEvent(BatchStatus.COMPLETED)

    def iter_file(
        self,
        entry: StorageEntry,
        extensions: Iterable[str],
        mode: Mp3Mode = Vbr(),
        output_dir: Optional[StorageDirectory] = None,
    ) -> Iterator[BatchEvent]:
        """Extract a single video, by default into its own directory."""
        accepted = normalize_extensions(extensions)
        if not accepted:
            yield log_event("Select at least one extension.", logging.WARNING)
            yield FinishedEvent(BatchStatus.EMPTY)
            return

        try:
            name = display_name_for(entry)
            if not matches_extension(name, accepted):
                yield log_event(f"Extension does not match: {name}", logging.WARNING)
                yield FinishedEvent(BatchStatus.EMPTY)
                return

            target = output_dir or entry.parent()
            if target is None:
                yield log_event(
                    "Cannot locate the output directory, choose a folder instead.",
                    logging.ERROR,
                )
                yield FinishedEvent(BatchStatus.ABORTED)
                return

            for event in self._extract(entry, target, mode):
                yield event
            yield ProgressEvent(1, 1, name)
        except Exception as e:
            logger.debug("Single-file extraction failed", exc_info=True)
            yield log_event(f"Fatal error: {e}", logging.CRITICAL)
            yield FinishedEvent(BatchStatus.FAILED)
            return

        yield FinishedEvent(BatchStatus.COMPLETED)

    def extract_folder(self, directory: StorageDirectory, extensions: Iterable[str],
                       mode: Mp3Mode = Vbr(), **kwargs) -> BatchReport:
        return drain(self.iter_folder(directory, extensions, mode, **kwargs))

    def extract_file(self, entry: StorageEntry, extensions: Iterable[str],
                     mode: Mp3Mode = Vbr(), **kwargs) -> BatchReport:
        return drain(self.iter_file(entry, extensions, mode, **kwargs))
