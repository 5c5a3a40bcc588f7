import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from epubref.opf import ManifestItem, ManifestProperty

CONTAINER_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

PACKAGE_OPF = b"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:identifier id="uid">urn:uuid:1234</dc:identifier>
    <dc:title>Test Book</dc:title>
  </metadata>
  <manifest>
    <item id="nav" href="nav.xhtml" media-type="application/xhtml+xml" properties="nav"/>
    <item id="ch1" href="text/chapter%201.xhtml" media-type="application/xhtml+xml"/>
    <item id="css" href="styles/book.css" media-type="text/css"/>
    <item id="cover" href="images/cover.png" media-type="image/png" properties="cover-image"/>
    <item id="font" href="fonts/serif.otf" media-type="font/opentype"/>
    <item id="video" href="media/clip.mp4" media-type="video/mp4"/>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
  </manifest>
  <spine toc="ncx">
    <itemref idref="ch1"/>
  </spine>
</package>
"""

NAV_XHTML = b'<html xmlns="http://www.w3.org/1999/xhtml"><body><nav/></body></html>'
CHAPTER_XHTML = "<html><body><p>Café</p></body></html>".encode("utf-8")
BOOK_CSS = b"body { margin: 0; }"


def png_bytes(width: int = 4, height: int = 3) -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 10, 10)).save(buffer, format="PNG")
    return buffer.getvalue()


def build_zip(files: dict[str, bytes]) -> bytes:
    """Build an in-memory zip with the given members."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def book_files(overrides: dict[str, bytes | None] | None = None) -> dict[str, bytes]:
    """Files of a small EPUB 3 book; map a path to None to drop it."""
    files = {
        "mimetype": b"application/epub+zip",
        "META-INF/container.xml": CONTAINER_XML,
        "OEBPS/content.opf": PACKAGE_OPF,
        "OEBPS/nav.xhtml": NAV_XHTML,
        "OEBPS/text/chapter 1.xhtml": CHAPTER_XHTML,
        "OEBPS/styles/book.css": BOOK_CSS,
        "OEBPS/images/cover.png": png_bytes(),
        "OEBPS/fonts/serif.otf": b"OTTO\x00\x01",
        "OEBPS/media/clip.mp4": b"\x00\x00\x00\x18ftypmp42",
        "OEBPS/toc.ncx": b"<ncx/>",
    }
    for path, data in (overrides or {}).items():
        if data is None:
            files.pop(path, None)
        else:
            files[path] = data
    return files


@pytest.fixture
def epub_path(tmp_path: Path) -> Path:
    path = tmp_path / "book.epub"
    path.write_bytes(build_zip(book_files()))
    return path


@pytest.fixture
def epub_dir(tmp_path: Path) -> Path:
    root = tmp_path / "unpacked"
    for name, data in book_files().items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    return root


# -----------------------------------------------------------------------------
# Fakes
# -----------------------------------------------------------------------------


@dataclass
class FakeEntry:
    data: bytes
    declared_length: int | None = None

    @property
    def length(self) -> int:
        if self.declared_length is not None:
            return self.declared_length
        return len(self.data)

    def open(self) -> io.BytesIO:
        return io.BytesIO(self.data)


class FakeArchive:
    """Dict-backed archive that records every lookup."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.entries: dict[str, FakeEntry] = {
            name: FakeEntry(data) for name, data in (files or {}).items()
        }
        self.lookups: list[str] = []
        self.closed = False

    def get_entry(self, path: str) -> FakeEntry | None:
        self.lookups.append(path)
        return self.entries.get(path)

    def names(self):
        yield from self.entries

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeArchive":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class RecordingPolicy:
    """Missing-file policy that records events and returns a fixed response."""

    def __init__(self, respond) -> None:
        self.respond = respond
        self.events = []

    def __call__(self, event):
        self.events.append(event)
        return self.respond()


def manifest_item(id: str, href: str, media_type: str, *properties: str) -> ManifestItem:
    return ManifestItem(
        id=id,
        href=href,
        media_type=media_type,
        properties=frozenset(ManifestProperty.parse(p) for p in properties),
    )


@pytest.fixture
def fake_archive() -> FakeArchive:
    return FakeArchive()


@pytest.fixture
def isolate_logging():
    """Swap root handlers for a NullHandler while a test runs."""
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level
    logging.root.handlers.clear()
    logging.root.addHandler(logging.NullHandler())

    yield

    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)
