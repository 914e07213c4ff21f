import logging
import threading

import pytest

from vtt2lrc.core.events import (
    BatchReport,
    BatchStatus,
    BatchWorker,
    FinishedEvent,
    LogEvent,
    ProgressEvent,
    ResultEvent,
    drain,
    log_event,
)
from vtt2lrc.core.models import ConversionResult


def _events():
    yield LogEvent("start")
    yield ResultEvent(ConversionResult("a.vtt", "a.lrc", True, "ok"))
    yield ProgressEvent(1, 2)
    yield ResultEvent(ConversionResult("b.vtt", None, False, "bad"))
    yield ProgressEvent(2, 2)
    yield FinishedEvent(BatchStatus.COMPLETED)


def test_drain_collects_everything():
    report = drain(_events())
    assert report.logs == ["start"]
    assert report.progress == [0.5, 1.0]
    assert len(report.succeeded) == 1
    assert len(report.failed) == 1
    assert report.status == BatchStatus.COMPLETED
    assert not report.ok


def test_progress_fraction_with_zero_total():
    assert ProgressEvent(0, 0).fraction == 1.0


def test_report_rejects_unknown_event():
    with pytest.raises(TypeError):
        BatchReport().apply("nope")


def test_empty_report_is_ok():
    report = drain([FinishedEvent(BatchStatus.EMPTY)])
    assert report.ok
    assert report.final_progress == 0.0


def test_log_event_mirrors_to_logger(caplog):
    caplog.set_level(logging.INFO, logger="vtt2lrc")
    event = log_event("hello", logging.WARNING)
    assert event == LogEvent("hello", logging.WARNING)
    assert "hello" in caplog.text


def test_worker_delivers_events_in_order_off_thread():
    seen = []
    threads = set()

    def observer(event):
        seen.append(event)
        threads.add(threading.current_thread().name)

    worker = BatchWorker(_events(), observer).start()
    report = worker.join(timeout=5)

    assert seen == list(_events())
    assert threads == {"vtt2lrc-batch"}
    assert report.progress == [0.5, 1.0]
    assert not worker.running


def test_worker_records_failure():
    def broken():
        yield LogEvent("start")
        raise RuntimeError("boom")

    worker = BatchWorker(broken()).start()
    report = worker.join(timeout=5)

    assert report.status == BatchStatus.FAILED
    assert str(worker.error) == "boom"
    assert report.logs == ["start"]
