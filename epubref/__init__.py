"""
Epubref: lazy, type-aware access to the content files of EPUB books.

Usage:
    from epubref import open_book

    with open_book("book.epub") as book:
        print(book.content.navigation_html_file)
        cover = book.read_cover()
"""

from __future__ import annotations

__version__ = "0.1.0"

from epubref.book import EpubBookRef, open_book
from epubref.content import (
    ByteContentFileRef,
    ContentCategory,
    ContentFileRef,
    ContentIndex,
    ContentType,
    MissingFileEvent,
    MissingFileResponse,
    TextContentFileRef,
    build_index,
    category_of,
    classify,
)
from epubref.errors import (
    ContentFileNotFoundError,
    ContentFileTooLargeError,
    ContentReferenceError,
    EmptyFileNameError,
    EpubError,
    PackageError,
)
from epubref.runtime import ReaderConfig

__all__ = [
    "__version__",
    # Book
    "EpubBookRef",
    "open_book",
    "ReaderConfig",
    # Content
    "ContentIndex",
    "ContentFileRef",
    "TextContentFileRef",
    "ByteContentFileRef",
    "ContentType",
    "ContentCategory",
    "MissingFileEvent",
    "MissingFileResponse",
    "build_index",
    "classify",
    "category_of",
    # Errors
    "EpubError",
    "PackageError",
    "ContentReferenceError",
    "EmptyFileNameError",
    "ContentFileNotFoundError",
    "ContentFileTooLargeError",
]
