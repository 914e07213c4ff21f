"""Storage abstraction for listing, reading and writing named entries.

The batch drivers only see ``StorageDirectory`` and ``StorageEntry``; the
local filesystem implementation below backs the CLI. Other providers
(document trees, remote buckets) plug in by subclassing the two interfaces.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from ..exceptions import StorageError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class StorageEntry(ABC):
    """A single named item inside a storage directory."""

    @property
    @abstractmethod
    def name(self) -> Optional[str]:
        """Display name, if the provider can report one."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Provider-specific reference (path, URI, document id)."""

    @property
    @abstractmethod
    def is_file(self) -> bool:
        pass

    @abstractmethod
    def exists(self) -> bool:
        pass

    @abstractmethod
    def open_read(self) -> BinaryIO:
        pass

    @abstractmethod
    def open_write(self) -> BinaryIO:
        """Open for writing, truncating existing content."""

    @abstractmethod
    def delete(self) -> bool:
        pass

    @abstractmethod
    def parent(self) -> Optional["StorageDirectory"]:
        """Directory holding this entry, or None when it cannot be resolved."""


class StorageDirectory(ABC):
    """A flat directory of entries. Subdirectories are never traversed."""

    @property
    @abstractmethod
    def location(self) -> str:
        pass

    @abstractmethod
    def is_accessible(self) -> bool:
        """True when the directory exists and can be listed."""

    @abstractmethod
    def list_entries(self) -> List[StorageEntry]:
        pass

    @abstractmethod
    def find(self, name: str) -> Optional[StorageEntry]:
        pass

    @abstractmethod
    def create(self, media_type: str, name: str) -> Optional[StorageEntry]:
        """Create an empty entry. Providers may pick a different name on collision."""


# ----------------------
# Local filesystem
# ----------------------


class LocalEntry(StorageEntry):
    """Entry backed by a path on the local filesystem."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"LocalEntry({str(self.path)!r})"

    @property
    def name(self) -> Optional[str]:
        return self.path.name or None

    @property
    def location(self) -> str:
        return str(self.path)

    @property
    def is_file(self) -> bool:
        return self.path.is_file()

    def exists(self) -> bool:
        return self.path.exists()

    def open_read(self) -> BinaryIO:
        return open(self.path, "rb")

    def open_write(self) -> BinaryIO:
        return open(self.path, "wb")

    def delete(self) -> bool:
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False

    def parent(self) -> Optional["LocalDirectory"]:
        return LocalDirectory(self.path.parent)


class LocalDirectory(StorageDirectory):
    """Directory on the local filesystem."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self.path)!r})"

    @property
    def location(self) -> str:
        return str(self.path)

    def is_accessible(self) -> bool:
        return self.path.is_dir()

    def list_entries(self) -> List[StorageEntry]:
        try:
            children = sorted(self.path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise StorageError(f"Cannot list directory {self.path}: {e}")
        return [LocalEntry(child) for child in children]

    def find(self, name: str) -> Optional[StorageEntry]:
        candidate = self.path / name
        return LocalEntry(candidate) if candidate.exists() else None

    def create(self, media_type: str, name: str) -> Optional[StorageEntry]:
        target = self.path / name
        try:
            target.touch(exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create {target} ({media_type}): {e}")
            return None
        return LocalEntry(target)


def open_location(path: Union[str, Path]) -> Union[LocalDirectory, LocalEntry]:
    """Wrap a local path as a directory or a single entry."""
    path = Path(path)
    if path.is_dir():
        return LocalDirectory(path)
    return LocalEntry(path)


# ----------------------
# Helpers shared by the batch drivers
# ----------------------


def create_or_replace(
    directory: StorageDirectory, media_type: str, name: str
) -> Optional[StorageEntry]:
    """Create ``name`` in ``directory``, deleting a same-named entry first.

    Deleting up front keeps providers that rename on collision from writing
    ``name (1)`` next to the old file.
    """
    existing = directory.find(name)
    if existing is not None and existing.exists():
        if not existing.delete():
            logger.warning(f"Could not delete existing {name}, writing over it")
    return directory.create(media_type, name)


def copy_entry_to_file(entry: StorageEntry, target: Path) -> None:
    """Copy an entry's bytes into a local file."""
    with entry.open_read() as source, open(target, "wb") as output:
        shutil.copyfileobj(source, output)


def copy_file_to_entry(source: Path, entry: StorageEntry) -> None:
    """Copy a local file's bytes into an entry, replacing its content."""
    with open(source, "rb") as input_file, entry.open_write() as output:
        shutil.copyfileobj(input_file, output)


def read_text(entry: StorageEntry, encoding: str = "utf-8") -> str:
    with entry.open_read() as source:
        return source.read().decode(encoding)


def write_text(entry: StorageEntry, text: str, encoding: str = "utf-8") -> None:
    with entry.open_write() as output:
        output.write(text.encode(encoding))
