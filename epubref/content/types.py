"""
Content type taxonomy.

Maps the free-form media types declared in an EPUB manifest onto a closed
set of content types, and each content type onto a text/binary category.
Both mappings are total: anything unrecognized is OTHER, which is binary.
"""

from __future__ import annotations

from enum import Enum


class ContentType(Enum):
    """Type of a content file, derived from its declared media type."""

    XHTML_1_1 = "xhtml"
    DTBOOK = "dtbook"
    DTBOOK_NCX = "dtbook-ncx"
    OEB1_DOCUMENT = "oeb1-document"
    XML = "xml"
    CSS = "css"
    OEB1_CSS = "oeb1-css"
    IMAGE_GIF = "gif"
    IMAGE_JPEG = "jpeg"
    IMAGE_PNG = "png"
    IMAGE_SVG = "svg"
    FONT_TRUETYPE = "truetype"
    FONT_OPENTYPE = "opentype"
    OTHER = "other"


class ContentCategory(Enum):
    """How a content file is meant to be consumed."""

    TEXT = "text"
    BINARY = "binary"


# -----------------------------------------------------------------------------
# Lookup tables
# -----------------------------------------------------------------------------

# Exact, case-sensitive matches only
MIME_TYPES: dict[str, ContentType] = {
    "application/xhtml+xml": ContentType.XHTML_1_1,
    "application/x-dtbook+xml": ContentType.DTBOOK,
    "application/x-dtbncx+xml": ContentType.DTBOOK_NCX,
    "text/x-oeb1-document": ContentType.OEB1_DOCUMENT,
    "application/xml": ContentType.XML,
    "text/css": ContentType.CSS,
    "text/x-oeb1-css": ContentType.OEB1_CSS,
    "image/gif": ContentType.IMAGE_GIF,
    "image/jpeg": ContentType.IMAGE_JPEG,
    "image/png": ContentType.IMAGE_PNG,
    "image/svg+xml": ContentType.IMAGE_SVG,
    "font/truetype": ContentType.FONT_TRUETYPE,
    "font/opentype": ContentType.FONT_OPENTYPE,
    "application/x-font-truetype": ContentType.FONT_TRUETYPE,
    "application/vnd.ms-opentype": ContentType.FONT_OPENTYPE,
}

TEXT_CONTENT_TYPES: frozenset[ContentType] = frozenset(
    {
        ContentType.XHTML_1_1,
        ContentType.DTBOOK,
        ContentType.DTBOOK_NCX,
        ContentType.OEB1_DOCUMENT,
        ContentType.XML,
        ContentType.CSS,
        ContentType.OEB1_CSS,
    }
)

MARKUP_CONTENT_TYPES: frozenset[ContentType] = frozenset(
    {
        ContentType.XHTML_1_1,
        ContentType.DTBOOK,
        ContentType.OEB1_DOCUMENT,
    }
)

STYLESHEET_CONTENT_TYPES: frozenset[ContentType] = frozenset(
    {
        ContentType.CSS,
        ContentType.OEB1_CSS,
    }
)

IMAGE_CONTENT_TYPES: frozenset[ContentType] = frozenset(
    {
        ContentType.IMAGE_GIF,
        ContentType.IMAGE_JPEG,
        ContentType.IMAGE_PNG,
        ContentType.IMAGE_SVG,
    }
)

FONT_CONTENT_TYPES: frozenset[ContentType] = frozenset(
    {
        ContentType.FONT_TRUETYPE,
        ContentType.FONT_OPENTYPE,
    }
)


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


def classify(mime_type: str | None) -> ContentType:
    """
    Map a declared media type to a content type.

    Args:
        mime_type: Media type string as written in the manifest

    Returns:
        The matching ContentType, or ContentType.OTHER if there is none
    """
    if not mime_type:
        return ContentType.OTHER
    return MIME_TYPES.get(mime_type, ContentType.OTHER)


def category_of(content_type: ContentType) -> ContentCategory:
    """Return TEXT for markup, XML and stylesheets, BINARY for everything else."""
    if content_type in TEXT_CONTENT_TYPES:
        return ContentCategory.TEXT
    return ContentCategory.BINARY


def is_markup(content_type: ContentType) -> bool:
    return content_type in MARKUP_CONTENT_TYPES


def is_stylesheet(content_type: ContentType) -> bool:
    return content_type in STYLESHEET_CONTENT_TYPES


def is_image(content_type: ContentType) -> bool:
    return content_type in IMAGE_CONTENT_TYPES


def is_font(content_type: ContentType) -> bool:
    return content_type in FONT_CONTENT_TYPES
