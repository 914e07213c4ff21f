"""Command-line interface using Click."""

import sys
from pathlib import Path
from typing import Iterable, Optional

import click

from . import __version__
from .config import (
    CBR_BITRATE,
    DEFAULT_VIDEO_EXTENSIONS,
    VBR_QUALITY,
    VIDEO_EXTENSIONS,
)
from .core import conversion
from .core.encoder import FFmpegRunner
from .core.events import BatchEvent, BatchReport, BatchStatus, ProgressEvent
from .core.extraction import ExtractionOrchestrator
from .core.storage import LocalDirectory, open_location
from .exceptions import Vtt2LrcError
from .utils.logging import setup_logging
from .utils.performance import PerformanceMonitor
from .utils.validation import build_mp3_mode, normalize_extensions


def format_progress(event: ProgressEvent, bar_len: int = 30) -> str:
    """Render a progress event as a text bar."""
    percent = int(100 * event.fraction)
    filled = int(bar_len * event.fraction)
    bar = "█" * filled + "░" * (bar_len - filled)
    return f"  Progress: [{bar}] {percent}% ({event.done}/{event.total})"


def run_batch(events: Iterable[BatchEvent], show_progress: bool = True) -> BatchReport:
    """Drain a batch event stream, echoing progress as it arrives.

    Log events are already written through the package logger.
    """
    report = BatchReport()
    for event in events:
        report.apply(event)
        if show_progress and isinstance(event, ProgressEvent):
            click.echo(format_progress(event))
    return report


def _finish(logger, report: BatchReport) -> None:
    if report.results:
        logger.info(
            f"{len(report.succeeded)} succeeded, {len(report.failed)} failed"
        )
    logger.info("=== All done ===")
    if not report.ok:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """vtt2lrc - Convert VTT subtitles to LRC and extract MP3 audio from videos."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--keep-nested', is_flag=True,
              help='Keep media extensions before .vtt (song.mp3.vtt -> song.mp3.lrc)')
@click.option('--no-progress', is_flag=True, help='Disable progress output')
@click.pass_context
def convert(ctx, path, keep_nested, no_progress):
    """Convert .vtt files in a folder (or a single file) to .lrc in place."""
    logger = ctx.obj['logger']
    remove_nested = not keep_nested

    try:
        location = open_location(path)
        if isinstance(location, LocalDirectory):
            logger.info("Scanning folder...")
            events = conversion.iter_folder(location, remove_nested)
        else:
            events = conversion.iter_file(location, remove_nested)

        with PerformanceMonitor("VTT conversion"):
            report = run_batch(events, show_progress=not no_progress)
    except Vtt2LrcError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)

    _finish(logger, report)


@cli.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--ext', 'extensions', multiple=True, default=DEFAULT_VIDEO_EXTENSIONS,
              show_default=True,
              help=f"Video extension to include, repeatable ({', '.join(VIDEO_EXTENSIONS)})")
@click.option('--vbr/--cbr', 'use_vbr', default=True,
              help='Variable quality (default) or constant bitrate encoding')
@click.option('--quality', type=int, default=VBR_QUALITY, show_default=True,
              help='VBR quality, 0 (best) to 9')
@click.option('--bitrate', default=CBR_BITRATE, show_default=True,
              help='CBR bitrate, e.g. 128k')
@click.option('--output-dir', type=click.Path(file_okay=False),
              help='Write MP3 files here instead of next to the videos')
@click.option('--scratch-dir', type=click.Path(file_okay=False),
              help='Directory for temporary encoder files')
@click.option('--ffmpeg', 'ffmpeg_binary', help='ffmpeg executable to use')
@click.option('--show-encoder-logs', is_flag=True, help='Print ffmpeg output per file')
@click.option('--no-progress', is_flag=True, help='Disable progress output')
@click.pass_context
def extract(ctx, path, extensions, use_vbr, quality, bitrate, output_dir,
            scratch_dir, ffmpeg_binary, show_encoder_logs, no_progress):
    """Extract MP3 audio from videos in a folder (or a single video)."""
    logger = ctx.obj['logger']

    try:
        accepted = normalize_extensions(extensions)
        mode = build_mp3_mode(use_vbr, quality, bitrate)

        orchestrator = ExtractionOrchestrator(
            runner=FFmpegRunner(binary=ffmpeg_binary),
            scratch_dir=Path(scratch_dir) if scratch_dir else None,
            show_encoder_logs=show_encoder_logs,
        )
        target: Optional[LocalDirectory] = LocalDirectory(Path(output_dir)) if output_dir else None
        if target is not None:
            target.path.mkdir(parents=True, exist_ok=True)

        location = open_location(path)
        if isinstance(location, LocalDirectory):
            logger.info("Scanning folder...")
            events = orchestrator.iter_folder(location, accepted, mode, output_dir=target)
        else:
            logger.info("Processing single file...")
            events = orchestrator.iter_file(location, accepted, mode, output_dir=target)

        with PerformanceMonitor("MP3 extraction"):
            report = run_batch(events, show_progress=not no_progress)
    except Vtt2LrcError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)

    if report.status == BatchStatus.EMPTY and not report.results:
        logger.warning("Nothing to extract.")
    _finish(logger, report)


if __name__ == '__main__':
    cli()
