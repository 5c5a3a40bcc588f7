"""
Content index construction.

Turns the manifest of a package document into a ContentIndex: lazy
references grouped by kind (markup, stylesheets, images, fonts) plus the
navigation document and the cover image. Building the index never reads
file content and never fails on odd manifest data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .refs import (
    ByteContentFileRef,
    ContentFileRef,
    MissingFilePolicy,
    TextContentFileRef,
    create_content_ref,
    suppress_missing_files,
)
from .types import is_font, is_image, is_markup, is_stylesheet

if TYPE_CHECKING:
    from epubref.ingest.vfs import Archive
    from epubref.opf import EpubVersion
    from epubref.runtime import ReaderConfig

logger = logging.getLogger(__name__)

# Manifest property markers
COVER_IMAGE_PROPERTY = "cover-image"
NAV_PROPERTY = "nav"


class ManifestEntry(Protocol):
    """What the index builder needs from a manifest item."""

    id: str
    href: str
    media_type: str

    def has_property(self, name: str) -> bool: ...


@dataclass
class ContentIndex:
    """
    Content files of a book, grouped by kind and keyed by manifest href.

    Attributes:
        html: Markup documents (XHTML, DTBook, OEB 1 documents)
        css: Stylesheets (CSS, OEB 1 CSS)
        images: GIF, JPEG, PNG and SVG images
        fonts: TrueType and OpenType fonts
        all_files: Every manifest item, including the ones above
        navigation_html_file: EPUB 3 navigation document, if declared
        cover: Cover image, if declared
    """

    html: dict[str, TextContentFileRef] = field(default_factory=dict)
    css: dict[str, TextContentFileRef] = field(default_factory=dict)
    images: dict[str, ByteContentFileRef] = field(default_factory=dict)
    fonts: dict[str, ByteContentFileRef] = field(default_factory=dict)
    all_files: dict[str, ContentFileRef] = field(default_factory=dict)
    navigation_html_file: TextContentFileRef | None = None
    cover: ByteContentFileRef | None = None

    def __len__(self) -> int:
        return len(self.all_files)

    def __contains__(self, href: object) -> bool:
        return href in self.all_files

    def get(self, href: str) -> ContentFileRef | None:
        """Look up any content file by its manifest href."""
        return self.all_files.get(href)

    def _collections(self) -> tuple[dict, ...]:
        return (self.html, self.css, self.images, self.fonts, self.all_files)

    def _put(self, href: str, ref: ContentFileRef) -> None:
        """Insert ref, dropping any earlier reference with the same href."""
        previous = self.all_files.get(href)
        if previous is not None:
            for collection in self._collections():
                collection.pop(href, None)
            if self.navigation_html_file is previous:
                self.navigation_html_file = None
            if self.cover is previous:
                self.cover = None

        self.all_files[href] = ref
        if isinstance(ref, TextContentFileRef):
            if is_markup(ref.content_type):
                self.html[href] = ref
            elif is_stylesheet(ref.content_type):
                self.css[href] = ref
        elif isinstance(ref, ByteContentFileRef):
            if is_image(ref.content_type):
                self.images[href] = ref
            elif is_font(ref.content_type):
                self.fonts[href] = ref


def _supports_navigation_document(epub_version: EpubVersion | None) -> bool:
    return epub_version is None or epub_version.is_epub3


def build_index(
    manifest: Iterable[ManifestEntry],
    content_directory_path: str,
    missing_file_policy: MissingFilePolicy | None = None,
    *,
    archive: Archive,
    epub_version: EpubVersion | None = None,
    cover_item_id: str | None = None,
    config: ReaderConfig | None = None,
) -> ContentIndex:
    """
    Build the content index of a book from its manifest.

    Items are processed in manifest order. When two items share an href,
    the later one wins everywhere. When several items carry the nav or
    cover-image property, the last one wins.

    Args:
        manifest: Manifest items in document order
        content_directory_path: Directory of the package document in the archive
        missing_file_policy: Fallback for files absent from the archive
        archive: Archive the references read from
        epub_version: Package version; EPUB 2 packages have no navigation document
        cover_item_id: Manifest id named by an EPUB 2 cover meta element,
            used when no item carries the cover-image property
        config: Text decoding defaults and the ignore_missing switch

    Returns:
        Populated ContentIndex
    """
    if missing_file_policy is None and config is not None and config.ignore_missing:
        missing_file_policy = suppress_missing_files

    index = ContentIndex()
    hrefs_by_id: dict[str, str] = {}
    honor_nav = _supports_navigation_document(epub_version)

    for item in manifest:
        ref = create_content_ref(
            archive,
            item.href,
            item.media_type,
            content_directory_path=content_directory_path,
            missing_file_policy=missing_file_policy,
            config=config,
        )
        index._put(item.href, ref)
        if item.id:
            hrefs_by_id[item.id] = item.href

        # Singletons must also be reachable through their kind's collection
        if honor_nav and item.has_property(NAV_PROPERTY):
            if item.href in index.html:
                index.navigation_html_file = index.html[item.href]
            else:
                logger.warning(
                    "Navigation document %s is not a markup file (%s); ignoring",
                    item.href,
                    item.media_type,
                )
        if item.has_property(COVER_IMAGE_PROPERTY):
            if item.href in index.images:
                index.cover = index.images[item.href]
            else:
                logger.warning(
                    "Cover image %s is not an image file (%s); ignoring",
                    item.href,
                    item.media_type,
                )

    if index.cover is None and cover_item_id:
        cover_href = hrefs_by_id.get(cover_item_id)
        cover_ref = index.images.get(cover_href) if cover_href is not None else None
        if cover_ref is not None:
            index.cover = cover_ref
        else:
            logger.warning("Cover meta points to %r, which is not an image item", cover_item_id)

    logger.debug(
        "Indexed %d files: %d html, %d css, %d images, %d fonts",
        len(index.all_files),
        len(index.html),
        len(index.css),
        len(index.images),
        len(index.fonts),
    )
    return index
