"""
Package document reader.

Locates the package document (OPF) through META-INF/container.xml and
extracts what the content index needs from it: the EPUB version, the
manifest items and the EPUB 2 cover meta. Namespaces are matched by local
name only, since real-world books are sloppy about them.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import unquote
from xml.etree import ElementTree as ET

from epubref.errors import PackageError
from epubref.ingest.vfs import Archive, normalize_path

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


class EpubVersion(Enum):
    """Version declared on the package element."""

    EPUB_2 = "2.0"
    EPUB_3 = "3.0"
    EPUB_3_1 = "3.1"

    @property
    def is_epub3(self) -> bool:
        return self is not EpubVersion.EPUB_2


class ManifestProperty(Enum):
    """Values of the manifest item properties attribute."""

    COVER_IMAGE = "cover-image"
    MATHML = "mathml"
    NAV = "nav"
    REMOTE_RESOURCES = "remote-resources"
    SCRIPTED = "scripted"
    SVG = "svg"
    SWITCH = "switch"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "ManifestProperty":
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ManifestItem:
    """A single item of the package manifest."""

    id: str
    href: str
    media_type: str
    properties: frozenset[ManifestProperty] = field(default_factory=frozenset)

    def has_property(self, name: str) -> bool:
        return any(prop.value == name for prop in self.properties)


@dataclass
class PackageDocument:
    """
    Parsed package document.

    Attributes:
        path: Path of the OPF file inside the archive
        version: Declared EPUB version
        manifest: Manifest items in document order
        cover_item_id: Manifest id from <meta name="cover">, if any
        title: First dc:title, if any
    """

    path: str
    version: EpubVersion
    manifest: list[ManifestItem] = field(default_factory=list)
    cover_item_id: str | None = None
    title: str | None = None

    @property
    def content_directory_path(self) -> str:
        """Directory hrefs in the manifest are relative to ("" at the root)."""
        return posixpath.dirname(self.path)


# -----------------------------------------------------------------------------
# XML helpers
# -----------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _first_child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _parse_xml(data: bytes, path: str) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise PackageError(f"EPUB parsing error: {path} is not valid XML: {e}") from e


def _read_archive_file(archive: Archive, path: str) -> bytes:
    entry = archive.get_entry(path)
    if entry is None:
        raise PackageError(f"EPUB parsing error: {path} was not found in the EPUB file.")
    with entry.open() as stream:
        return stream.read()


# -----------------------------------------------------------------------------
# Container
# -----------------------------------------------------------------------------


def read_rootfile_path(archive: Archive) -> str:
    """
    Find the package document path from META-INF/container.xml.

    Args:
        archive: Book archive

    Returns:
        Path of the first rootfile inside the archive

    Raises:
        PackageError: If the container file is missing or has no rootfile
    """
    root = _parse_xml(_read_archive_file(archive, CONTAINER_PATH), CONTAINER_PATH)
    rootfiles = _first_child(root, "rootfiles")
    if rootfiles is not None:
        for rootfile in _children(rootfiles, "rootfile"):
            full_path = rootfile.get("full-path")
            if full_path:
                return normalize_path(full_path)
    raise PackageError("EPUB parsing error: root file path not found in the EPUB container.")


# -----------------------------------------------------------------------------
# Package document
# -----------------------------------------------------------------------------


def parse_version(value: str | None) -> EpubVersion:
    """
    Parse the version attribute of the package element.

    Raises:
        PackageError: If the version is missing or unsupported
    """
    if not value:
        raise PackageError("EPUB parsing error: EPUB version is not specified in the package.")
    value = value.strip()
    if value == "2.0" or value.startswith("2.0."):
        return EpubVersion.EPUB_2
    if value == "3.0":
        return EpubVersion.EPUB_3
    if value == "3.1":
        return EpubVersion.EPUB_3_1
    raise PackageError(f"EPUB parsing error: unsupported EPUB version: {value!r}.")


def _parse_manifest(manifest: ET.Element | None) -> list[ManifestItem]:
    items: list[ManifestItem] = []
    if manifest is None:
        return items
    for element in _children(manifest, "item"):
        properties = frozenset(
            ManifestProperty.parse(token) for token in (element.get("properties") or "").split()
        )
        items.append(
            ManifestItem(
                id=element.get("id") or "",
                href=unquote(element.get("href") or ""),
                media_type=element.get("media-type") or "",
                properties=properties,
            )
        )
    return items


def parse_package(data: bytes, path: str) -> PackageDocument:
    """
    Parse a package document.

    Args:
        data: Raw OPF bytes
        path: Path of the OPF inside the archive

    Returns:
        PackageDocument with version, manifest and cover meta

    Raises:
        PackageError: If the XML is invalid or the version unsupported
    """
    root = _parse_xml(data, path)
    if _local_name(root.tag) != "package":
        raise PackageError(f"EPUB parsing error: {path} has no package element.")

    version = parse_version(root.get("version"))
    manifest = _parse_manifest(_first_child(root, "manifest"))

    cover_item_id: str | None = None
    title: str | None = None
    metadata = _first_child(root, "metadata")
    if metadata is not None:
        for meta in _children(metadata, "meta"):
            if (meta.get("name") or "").lower() == "cover" and meta.get("content"):
                cover_item_id = meta.get("content")
                break
        title_element = _first_child(metadata, "title")
        if title_element is not None and title_element.text:
            title = title_element.text.strip()

    logger.debug("Parsed %s: EPUB %s, %d manifest items", path, version.value, len(manifest))
    return PackageDocument(
        path=path,
        version=version,
        manifest=manifest,
        cover_item_id=cover_item_id,
        title=title,
    )


def read_package(archive: Archive) -> PackageDocument:
    """Locate and parse the package document of a book archive."""
    path = read_rootfile_path(archive)
    return parse_package(_read_archive_file(archive, path), path)
