"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary files and directories
- An in-memory storage directory that renames on collision, like document
  providers do
- A fake encoder runner that never starts a process
- Sample VTT documents
"""

import io
import shlex
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from vtt2lrc.core.models import EncoderSession
from vtt2lrc.core.encoder import EncoderRunner
from vtt2lrc.core.storage import StorageDirectory, StorageEntry


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def scratch_dir(temp_dir):
    path = temp_dir / "scratch"
    path.mkdir()
    return path


# =============================================================================
# In-memory storage
# =============================================================================


class _WriteBuffer(io.BytesIO):
    def __init__(self, entry):
        super().__init__()
        self._entry = entry

    def close(self):
        if not self.closed:
            self._entry.data = self.getvalue()
        super().close()


class MemoryEntry(StorageEntry):
    def __init__(self, directory, key, data=b"", display_name="", is_file=True):
        self.directory = directory
        self.key = key
        self.data = data
        self._display_name = key if display_name == "" else display_name
        self._is_file = is_file
        self.fail_read = False
        self.fail_write = False

    @property
    def name(self):
        return self._display_name

    @property
    def location(self):
        return f"{self.directory.location}/{self.key}"

    @property
    def is_file(self):
        return self._is_file

    def exists(self):
        return self.directory.entries.get(self.key) is self

    def open_read(self):
        if self.fail_read:
            raise OSError("read denied")
        return io.BytesIO(self.data)

    def open_write(self):
        if self.fail_write:
            raise OSError("write denied")
        return _WriteBuffer(self)

    def delete(self):
        return self.directory.entries.pop(self.key, None) is not None

    def parent(self):
        return self.directory


class MemoryDirectory(StorageDirectory):
    """Flat in-memory directory. ``create`` picks "name (1).ext" on collision."""

    def __init__(self, location="memory://root", accessible=True):
        self._location = location
        self.accessible = accessible
        self.entries: Dict[str, MemoryEntry] = {}
        self.created: List[tuple] = []
        self.fail_create = False

    @property
    def location(self):
        return self._location

    def add(self, key, data=b"", display_name="", is_file=True):
        entry = MemoryEntry(self, key, data, display_name, is_file)
        self.entries[key] = entry
        return entry

    def is_accessible(self):
        return self.accessible

    def list_entries(self):
        return list(self.entries.values())

    def find(self, name):
        return self.entries.get(name)

    def create(self, media_type, name):
        if self.fail_create:
            return None
        key = name
        counter = 1
        while key in self.entries:
            stem, dot, ext = name.rpartition(".")
            key = f"{stem} ({counter}).{ext}" if dot else f"{name} ({counter})"
            counter += 1
        self.created.append((media_type, key))
        return self.add(key)


@pytest.fixture
def memory_dir():
    return MemoryDirectory()


# =============================================================================
# Fake encoder
# =============================================================================


class FakeRunner(EncoderRunner):
    """Copies input to output with an "MP3" prefix; fails on marked inputs."""

    def __init__(self, fail_marker: bytes = b"corrupt", code: int = 1):
        self.fail_marker = fail_marker
        self.code = code
        self.commands: List[str] = []
        self.seen_paths: List[tuple] = []

    def run(self, command):
        self.commands.append(command)
        args = shlex.split(command)
        input_path = Path(args[args.index("-i") + 1])
        output_path = Path(args[-1])
        self.seen_paths.append((input_path, output_path))
        data = input_path.read_bytes()
        if self.fail_marker and self.fail_marker in data:
            return EncoderSession(self.code, "Invalid data found when processing input")
        output_path.write_bytes(b"MP3:" + data)
        return EncoderSession(0, "size=1kB time=00:00:01.00\n")


@pytest.fixture
def fake_runner():
    return FakeRunner()


# =============================================================================
# Subtitle fixtures
# =============================================================================


@pytest.fixture
def sample_vtt():
    return (
        "WEBVTT\n"
        "\n"
        "NOTE generated by a test\n"
        "\n"
        "1\n"
        "00:01.234 --> 00:03.000\n"
        "<v Singer>Hello</v> there\n"
        "world\n"
        "\n"
        "2\n"
        "01:02:03.456 --> 01:02:05.000 align:start\n"
        "<b>Second</b> line\n"
    )
