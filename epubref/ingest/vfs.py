"""
Archive access abstraction.

Content references never touch zipfile or the filesystem directly. They ask
an Archive for a named ArchiveEntry and open it only when content is
actually requested, so nothing is read until a caller needs it.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import IO, TYPE_CHECKING, Iterator, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------


def normalize_path(path: str) -> str:
    """
    Normalize path to forward slashes, remove leading ./ and /

    Converts Windows backslashes and ensures consistent format.
    """
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def is_path_safe(path: str) -> bool:
    """
    Check if path stays inside the archive root.

    Rejects empty paths, absolute paths and anything with a .. component.

    Args:
        path: Path to check

    Returns:
        True if path is safe
    """
    normalized = normalize_path(path)
    if not normalized:
        return False

    ppath = PurePosixPath(normalized)
    if ppath.is_absolute():
        return False
    return ".." not in ppath.parts


def combine_path(directory: str, file_name: str) -> str:
    """
    Resolve a manifest href against the content directory.

    Args:
        directory: Directory holding the package document ("" for root)
        file_name: Relative href from the manifest

    Returns:
        Archive path with . and .. segments collapsed

    Example:
        combine_path("OEBPS", "../images/cover.jpg") -> "images/cover.jpg"
    """
    directory = normalize_path(directory or "")
    file_name = (file_name or "").replace("\\", "/")
    if not directory:
        combined = file_name
    elif not file_name:
        combined = directory
    else:
        combined = f"{directory}/{file_name}"
    if not combined:
        return ""
    collapsed = posixpath.normpath(combined)
    if collapsed == ".":
        return ""
    # .. segments that would climb past the root are dropped
    parts = [part for part in collapsed.split("/") if part not in ("", "..")]
    return "/".join(parts)


# -----------------------------------------------------------------------------
# Entries
# -----------------------------------------------------------------------------


@runtime_checkable
class ArchiveEntry(Protocol):
    """A single readable file inside an archive."""

    @property
    def length(self) -> int:
        """Uncompressed size in bytes."""
        ...

    def open(self) -> IO[bytes]:
        """Open a fresh stream positioned at the start of the content."""
        ...


@dataclass(frozen=True, slots=True)
class LazyEntry:
    """
    ArchiveEntry backed by an opener callable.

    Attributes:
        path: Normalized path inside the archive
        length: Size in bytes, known without reading
        _opener: Returns a new binary stream on every call
    """

    path: str
    length: int
    _opener: Callable[[], IO[bytes]]

    def open(self) -> IO[bytes]:
        return self._opener()


# -----------------------------------------------------------------------------
# Archive Protocol
# -----------------------------------------------------------------------------


@runtime_checkable
class Archive(Protocol):
    """
    Protocol for EPUB archive sources.

    Implementations provide read-only lookup of entries by their
    absolute path inside the archive.
    """

    def get_entry(self, path: str) -> ArchiveEntry | None:
        """
        Look up an entry.

        Returns:
            The entry, or None if the archive has no such file
        """
        ...

    def names(self) -> Iterator[str]:
        """Iterate over every file path in the archive."""
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "Archive":
        ...

    def __exit__(self, *args: object) -> None:
        ...
