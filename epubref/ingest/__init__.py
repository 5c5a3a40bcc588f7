"""
Epubref archive layer.

Provides a read-only archive abstraction for looking up the files of an
EPUB book stored as a zip container or as an unpacked directory.

Usage:
    from epubref.ingest import detect_archive

    with detect_archive("book.epub") as archive:
        entry = archive.get_entry("META-INF/container.xml")
        with entry.open() as stream:
            print(stream.read())
"""

from .sources import DirectoryArchive, ZipArchive, detect_archive
from .vfs import (
    Archive,
    ArchiveEntry,
    LazyEntry,
    combine_path,
    is_path_safe,
    normalize_path,
)

__all__ = [
    # Protocols
    "Archive",
    "ArchiveEntry",
    "LazyEntry",
    # Sources
    "ZipArchive",
    "DirectoryArchive",
    "detect_archive",
    # Paths
    "combine_path",
    "is_path_safe",
    "normalize_path",
]
