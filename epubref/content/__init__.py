"""
Content index and lazy content file references.

Usage:
    from epubref.content import build_index

    index = build_index(package.manifest, package.content_directory_path, archive=archive)
    for href, ref in index.html.items():
        print(href, len(ref.read_text()))
"""

from .index import ContentIndex, ManifestEntry, build_index
from .refs import (
    MAX_CONTENT_LENGTH,
    ByteContentFileRef,
    ContentFileRef,
    MissingFileAction,
    MissingFileEvent,
    MissingFilePolicy,
    MissingFileResponse,
    ReplacementEntry,
    TextContentFileRef,
    create_content_ref,
    decode_text,
    replace_missing_files,
    suppress_missing_files,
)
from .types import ContentCategory, ContentType, category_of, classify

__all__ = [
    # Types
    "ContentType",
    "ContentCategory",
    "classify",
    "category_of",
    # References
    "ContentFileRef",
    "TextContentFileRef",
    "ByteContentFileRef",
    "ReplacementEntry",
    "create_content_ref",
    "decode_text",
    "MAX_CONTENT_LENGTH",
    # Missing files
    "MissingFileAction",
    "MissingFileEvent",
    "MissingFilePolicy",
    "MissingFileResponse",
    "suppress_missing_files",
    "replace_missing_files",
    # Index
    "ContentIndex",
    "ManifestEntry",
    "build_index",
]
