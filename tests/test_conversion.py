"""Test VTT to LRC batch conversion."""

from vtt2lrc.core import conversion
from vtt2lrc.core.events import BatchStatus, CancellationToken, ProgressEvent
from vtt2lrc.core.storage import LocalDirectory, LocalEntry


def test_convert_folder_writes_lrc_files(memory_dir, sample_vtt):
    memory_dir.add("song.mp3.vtt", sample_vtt.encode("utf-8"))
    memory_dir.add("video.mp4", b"ignored")

    report = conversion.convert_folder(memory_dir, remove_nested=True)

    assert report.status == BatchStatus.COMPLETED
    assert report.logs == ["Found 1 VTT files, converting...", "✅ song.mp3.vtt -> song.lrc"]
    lrc = memory_dir.entries["song.lrc"].data.decode("utf-8")
    assert lrc.startswith("[ti:song]\n[00:01.23]Hello there world\n")
    assert memory_dir.created == [("text/x-lrc", "song.lrc")]
    assert report.progress == [1.0]


def test_keep_nested_extension(memory_dir, sample_vtt):
    memory_dir.add("song.mp3.vtt", sample_vtt.encode("utf-8"))

    conversion.convert_folder(memory_dir, remove_nested=False)

    assert memory_dir.entries["song.mp3.lrc"].data.startswith(b"[ti:song.mp3]\n")


def test_uppercase_extension_is_matched(memory_dir):
    memory_dir.add("LOUD.VTT", b"00:01.000 --> 00:02.000\nhey\n")

    report = conversion.convert_folder(memory_dir)

    assert report.results[0].output_name == "LOUD.lrc"


def test_existing_lrc_is_replaced_in_place(memory_dir):
    memory_dir.add("a.lrc", b"old")
    memory_dir.add("a.vtt", b"00:01.000 --> 00:02.000\nnew\n")

    conversion.convert_folder(memory_dir)

    assert sorted(memory_dir.entries) == ["a.lrc", "a.vtt"]
    assert memory_dir.entries["a.lrc"].data == b"[ti:a]\n[00:01.00]new\n"


def test_failure_is_logged_and_batch_continues(memory_dir):
    broken = memory_dir.add("bad.vtt", b"x")
    broken.fail_read = True
    memory_dir.add("good.vtt", b"00:01.000 --> 00:02.000\nok\n")

    report = conversion.convert_folder(memory_dir)

    assert [r.success for r in report.results] == [False, True]
    assert report.logs[1] == "❌ Conversion failed (bad.vtt): read denied"
    assert report.progress == [0.5, 1.0]
    assert not report.ok


def test_invalid_utf8_fails_the_item(memory_dir):
    memory_dir.add("latin.vtt", "caf\xe9".encode("latin-1"))
    report = conversion.convert_folder(memory_dir)
    assert not report.results[0].success
    assert "not valid UTF-8 text" in report.results[0].message


def test_create_failure(memory_dir):
    memory_dir.add("a.vtt", b"00:01.000 --> 00:02.000\nx\n")
    memory_dir.fail_create = True

    report = conversion.convert_folder(memory_dir)

    assert report.results[0].message == "❌ Failed to create file: a.lrc"


def test_no_vtt_files(memory_dir):
    memory_dir.add("a.srt", b"")
    report = conversion.convert_folder(memory_dir)
    assert report.status == BatchStatus.EMPTY
    assert report.logs == ["No .vtt files found."]


def test_inaccessible_folder(memory_dir):
    memory_dir.accessible = False
    report = conversion.convert_folder(memory_dir)
    assert report.status == BatchStatus.ABORTED
    assert report.results == []


def test_cancel_between_files(memory_dir):
    memory_dir.add("a.vtt", b"00:01.000 --> 00:02.000\na\n")
    memory_dir.add("b.vtt", b"00:01.000 --> 00:02.000\nb\n")
    token = CancellationToken()

    for event in conversion.iter_folder(memory_dir, cancel=token):
        if isinstance(event, ProgressEvent):
            token.cancel()

    assert "a.lrc" in memory_dir.entries
    assert "b.lrc" not in memory_dir.entries


def test_convert_local_folder(temp_dir):
    (temp_dir / "track.flac.vtt").write_text(
        "WEBVTT\n\n00:10.500 --> 00:12.000\n<i>la la</i>\n", encoding="utf-8"
    )

    report = conversion.convert_folder(LocalDirectory(temp_dir))

    assert report.ok
    assert (temp_dir / "track.lrc").read_text(encoding="utf-8") == "[ti:track]\n[00:10.50]la la\n"


def test_convert_single_file(temp_dir):
    path = temp_dir / "one.vtt"
    path.write_text("00:01.000 --> 00:02.000\nsolo\n", encoding="utf-8")

    report = conversion.convert_file(LocalEntry(path))

    assert report.status == BatchStatus.COMPLETED
    assert (temp_dir / "one.lrc").exists()


def test_convert_single_non_vtt(temp_dir):
    path = temp_dir / "one.srt"
    path.write_text("", encoding="utf-8")
    report = conversion.convert_file(LocalEntry(path))
    assert report.status == BatchStatus.EMPTY
    assert report.results == []


def test_unexpected_provider_error_does_not_stop_batch(memory_dir):
    for name in ("a.vtt", "b.vtt", "c.vtt"):
        memory_dir.add(name, b"00:01.000 --> 00:02.000\nline\n")

    def broken_read():
        raise ValueError("stale document handle")

    memory_dir.entries["b.vtt"].open_read = broken_read
    report = conversion.convert_folder(memory_dir)

    assert report.status == BatchStatus.COMPLETED
    assert [r.success for r in report.results] == [True, False, True]
    assert report.results[1].message == "❌ Conversion failed (b.vtt): stale document handle"
    assert report.progress == [1 / 3, 2 / 3, 1.0]
    assert "c.lrc" in memory_dir.entries
