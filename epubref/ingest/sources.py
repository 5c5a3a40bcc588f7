"""
Archive implementations.

Provides read-only access to the files of an EPUB book stored as:
- Zip containers (.epub files, in-memory, no extraction to disk)
- Directories (an unpacked book on the local filesystem)

All sources implement the Archive protocol.
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import IO, Iterator

from .vfs import Archive, LazyEntry, is_path_safe, normalize_path

logger = logging.getLogger(__name__)

# Suffixes that are always treated as zip containers
ZIP_SUFFIXES: frozenset[str] = frozenset({".epub", ".zip"})


# -----------------------------------------------------------------------------
# Zip Archive
# -----------------------------------------------------------------------------


class ZipArchive:
    """
    Archive over a zip container.

    Entries are looked up through the zip central directory and opened
    on demand. Nothing is decompressed until a stream is read.

    Security:
    - Member names with .. components or absolute paths are not resolvable
    - Zip is opened in read-only mode

    Usage:
        with ZipArchive("book.epub") as archive:
            entry = archive.get_entry("OEBPS/content.opf")
    """

    def __init__(self, path: str | Path | bytes) -> None:
        """
        Initialize zip archive.

        Args:
            path: Path to the zip file, or raw bytes of zip content

        Raises:
            FileNotFoundError: If path does not point to a file
            zipfile.BadZipFile: If the data is not a zip container
        """
        if isinstance(path, bytes):
            self._path: Path | None = None
            self._zip_file = zipfile.ZipFile(io.BytesIO(path), "r")
        else:
            self._path = Path(path)
            if not self._path.is_file():
                raise FileNotFoundError(f"Zip file not found: {self._path}")
            self._zip_file = zipfile.ZipFile(self._path, "r")

        # Map normalized names back to the member info, skipping directories
        self._members: dict[str, zipfile.ZipInfo] = {}
        for info in self._zip_file.infolist():
            if info.is_dir():
                continue
            normalized = normalize_path(info.filename)
            if not is_path_safe(normalized):
                logger.debug("Skipping unsafe zip member %r", info.filename)
                continue
            self._members[normalized] = info

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        source = self._path if self._path is not None else "<bytes>"
        return f"ZipArchive({source!s})"

    def close(self) -> None:
        self._zip_file.close()

    def names(self) -> Iterator[str]:
        yield from self._members

    def get_entry(self, path: str) -> LazyEntry | None:
        """
        Look up a zip member by its path.

        Args:
            path: Path inside the zip (forward slashes)

        Returns:
            LazyEntry for the member, or None if absent
        """
        normalized = normalize_path(path)
        info = self._members.get(normalized)
        if info is None:
            return None

        def make_opener(zf: zipfile.ZipFile, member: zipfile.ZipInfo):  # noqa: ANN202
            def opener() -> IO[bytes]:
                return zf.open(member, "r")

            return opener

        return LazyEntry(
            path=normalized,
            length=info.file_size,
            _opener=make_opener(self._zip_file, info),
        )


# -----------------------------------------------------------------------------
# Directory Archive
# -----------------------------------------------------------------------------


class DirectoryArchive:
    """
    Archive over an unpacked EPUB directory.

    Usage:
        with DirectoryArchive("./unpacked-book") as archive:
            for name in archive.names():
                print(name)
    """

    def __init__(self, root: str | Path) -> None:
        """
        Initialize directory archive.

        Args:
            root: Path to the directory holding META-INF/ and the content
        """
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")

    def __enter__(self) -> "DirectoryArchive":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DirectoryArchive({self.root!s})"

    def close(self) -> None:
        pass  # No cleanup needed

    def names(self) -> Iterator[str]:
        for dirpath, _dirnames, filenames in os.walk(self.root):
            for filename in filenames:
                rel_path = (Path(dirpath) / filename).relative_to(self.root)
                yield normalize_path(str(rel_path))

    def get_entry(self, path: str) -> LazyEntry | None:
        normalized = normalize_path(path)
        if not is_path_safe(normalized):
            return None

        full_path = self.root / normalized
        try:
            if not full_path.is_file():
                return None
            size = full_path.stat().st_size
        except OSError:
            return None

        def make_opener(p: Path):  # noqa: ANN202
            def opener() -> IO[bytes]:
                return open(p, "rb")

            return opener

        return LazyEntry(path=normalized, length=size, _opener=make_opener(full_path))


# -----------------------------------------------------------------------------
# Source detection
# -----------------------------------------------------------------------------


def detect_archive(target: str | Path) -> Archive:
    """
    Detect and create the appropriate archive for a target.

    Handles:
    - .epub / .zip files
    - Other files starting with zip magic bytes
    - Unpacked book directories

    Args:
        target: Path to open

    Returns:
        Appropriate Archive implementation

    Raises:
        FileNotFoundError: If the path doesn't exist
        ValueError: If the target type cannot be determined
    """
    path = Path(target)

    if not path.exists():
        raise FileNotFoundError(f"Path not found: {target}")

    if path.is_dir():
        logger.debug("Opening %s as a directory archive", path)
        return DirectoryArchive(path)

    if path.is_file():
        if path.suffix.lower() in ZIP_SUFFIXES:
            logger.debug("Opening %s as a zip archive", path)
            return ZipArchive(path)

        # Try to detect zip by magic bytes
        try:
            with open(path, "rb") as f:
                if f.read(2) == b"PK":
                    logger.debug("Opening %s as a zip archive (magic bytes)", path)
                    return ZipArchive(path)
        except OSError:
            pass

        raise ValueError(f"Unsupported file type: {target}")

    raise ValueError(f"Cannot determine archive type: {target}")
