"""Batch run events, reports, cancellation and the background worker.

Batch drivers are generators of events. Callers either iterate them
directly (the CLI does), drain them into a ``BatchReport``, or hand them to a
``BatchWorker`` that forwards each event to an observer from a single
background thread.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Union

from ..utils.logging import get_logger
from .models import ConversionResult, ExtractResult

logger = get_logger(__name__)


class BatchStatus(str, Enum):
    """How a batch run ended."""

    COMPLETED = "completed"
    EMPTY = "empty"          # nothing matched, nothing attempted
    ABORTED = "aborted"      # a directory-level precondition failed
    CANCELLED = "cancelled"
    FAILED = "failed"        # unexpected error while enumerating


@dataclass(frozen=True)
class LogEvent:
    message: str
    level: int = logging.INFO


@dataclass(frozen=True)
class ProgressEvent:
    done: int
    total: int
    current_name: str = ""

    @property
    def fraction(self) -> float:
        return self.done / self.total if self.total else 1.0


@dataclass(frozen=True)
class ResultEvent:
    result: Union[ExtractResult, ConversionResult]


@dataclass(frozen=True)
class FinishedEvent:
    status: BatchStatus


BatchEvent = Union[LogEvent, ProgressEvent, ResultEvent, FinishedEvent]


def log_event(message: str, level: int = logging.INFO) -> LogEvent:
    """Build a log event and mirror it to the module logger."""
    logger.log(level, message)
    return LogEvent(message, level)


class CancellationToken:
    """Cooperative cancellation, checked between items only."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class BatchReport:
    """Everything a batch run produced, in delivery order."""

    status: BatchStatus = BatchStatus.COMPLETED
    results: List[Union[ExtractResult, ConversionResult]] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    progress: List[float] = field(default_factory=list)

    @property
    def succeeded(self) -> List[Union[ExtractResult, ConversionResult]]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[Union[ExtractResult, ConversionResult]]:
        return [r for r in self.results if not r.success]

    @property
    def final_progress(self) -> float:
        return self.progress[-1] if self.progress else 0.0

    @property
    def ok(self) -> bool:
        return self.status in (BatchStatus.COMPLETED, BatchStatus.EMPTY) and not self.failed

    def apply(self, event: BatchEvent) -> None:
        if isinstance(event, LogEvent):
            self.logs.append(event.message)
        elif isinstance(event, ProgressEvent):
            self.progress.append(event.fraction)
        elif isinstance(event, ResultEvent):
            self.results.append(event.result)
        elif isinstance(event, FinishedEvent):
            self.status = event.status
        else:
            raise TypeError(f"Unknown batch event: {event!r}")


def drain(events: Iterable[BatchEvent]) -> BatchReport:
    """Consume an event stream into a report."""
    report = BatchReport()
    for event in events:
        report.apply(event)
    return report


class BatchWorker:
    """Runs one batch on a background thread, forwarding events in order."""

    def __init__(
        self,
        events: Iterator[BatchEvent],
        observer: Optional[Callable[[BatchEvent], None]] = None,
    ):
        self._events = events
        self._observer = observer
        self.report = BatchReport()
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name="vtt2lrc-batch", daemon=True)

    def _run(self) -> None:
        try:
            for event in self._events:
                self.report.apply(event)
                if self._observer is not None:
                    self._observer(event)
        except Exception as e:
            logger.error(f"❌ Batch worker stopped: {e}")
            self.error = e
            self.report.status = BatchStatus.FAILED

    def start(self) -> "BatchWorker":
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> BatchReport:
        self._thread.join(timeout)
        return self.report

    @property
    def running(self) -> bool:
        return self._thread.is_alive()
