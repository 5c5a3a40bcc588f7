"""
Book-level entry point.

Opens an EPUB (zip container or unpacked directory), reads its package
document and builds the content index in one call. Content stays in the
archive until a reference is read.
"""

from __future__ import annotations

import logging
from pathlib import Path

from epubref.content import ContentIndex, MissingFilePolicy, build_index
from epubref.ingest import Archive, detect_archive
from epubref.opf import EpubVersion, PackageDocument, read_package
from epubref.runtime import ReaderConfig

logger = logging.getLogger(__name__)


class EpubBookRef:
    """
    An opened book: its archive, package document and content index.

    The archive stays open until close() is called, since every content
    reference reads from it lazily.

    Usage:
        with open_book("book.epub") as book:
            cover = book.read_cover()
            for href, ref in book.content.html.items():
                print(href, len(ref.read_text()))
    """

    def __init__(self, archive: Archive, package: PackageDocument, content: ContentIndex) -> None:
        self.archive = archive
        self.package = package
        self.content = content

    def __enter__(self) -> "EpubBookRef":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def version(self) -> EpubVersion:
        return self.package.version

    @property
    def title(self) -> str | None:
        return self.package.title

    def read_cover(self) -> bytes | None:
        """Read the cover image, or return None if the book declares none."""
        if self.content.cover is None:
            return None
        return self.content.cover.read_bytes()

    def close(self) -> None:
        self.archive.close()


def open_book(
    target: str | Path,
    *,
    missing_file_policy: MissingFilePolicy | None = None,
    config: ReaderConfig | None = None,
) -> EpubBookRef:
    """
    Open a book and index its content.

    Args:
        target: Path to an .epub file or an unpacked book directory
        missing_file_policy: Fallback for manifest items absent from the archive
        config: Reader configuration

    Returns:
        EpubBookRef; close it (or use it as a context manager) when done

    Raises:
        FileNotFoundError: If target doesn't exist
        ValueError: If target is neither a zip nor a directory
        PackageError: If the container or package document is unusable
    """
    archive = detect_archive(target)
    try:
        package = read_package(archive)
        content = build_index(
            package.manifest,
            package.content_directory_path,
            missing_file_policy,
            archive=archive,
            epub_version=package.version,
            cover_item_id=package.cover_item_id,
            config=config,
        )
    except Exception:
        archive.close()
        raise

    logger.debug("Opened %s (EPUB %s)", target, package.version.value)
    return EpubBookRef(archive, package, content)
