"""
Lazy content file references.

A reference knows where a manifest item lives inside the archive but holds
none of its content. Bytes are pulled from the archive only when
read_bytes, read_text or open_stream is called, and nothing is cached
except the replacement produced by a missing-file policy.
"""

from __future__ import annotations

import asyncio
import codecs
import io
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import IO, TYPE_CHECKING, ClassVar

from epubref.errors import (
    ContentFileNotFoundError,
    ContentFileTooLargeError,
    EmptyFileNameError,
)
from epubref.ingest.vfs import combine_path

from .types import ContentCategory, ContentType, category_of, classify

if TYPE_CHECKING:
    from epubref.ingest.vfs import Archive, ArchiveEntry
    from epubref.runtime import ReaderConfig

logger = logging.getLogger(__name__)

# Largest entry that can be read into a single buffer (2 GiB - 1)
MAX_CONTENT_LENGTH = 2**31 - 1

# Checked in order: the UTF-32 LE mark starts with the UTF-16 LE one
BYTE_ORDER_MARKS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def decode_text(data: bytes, encoding: str = "utf-8", errors: str = "replace") -> str:
    """
    Decode file content, honoring a byte-order mark if one is present.

    Args:
        data: Raw bytes
        encoding: Encoding to use when there is no byte-order mark
        errors: Codec error handler

    Returns:
        Decoded text without the byte-order mark
    """
    for bom, bom_encoding in BYTE_ORDER_MARKS:
        if data.startswith(bom):
            return data.decode(bom_encoding, errors=errors)
    return data.decode(encoding, errors=errors)


# -----------------------------------------------------------------------------
# Missing-file policy
# -----------------------------------------------------------------------------


class MissingFileAction(Enum):
    """What to do about a manifest item that is absent from the archive."""

    REPLACE = "replace"
    SUPPRESS = "suppress"
    PROPAGATE = "propagate"


@dataclass(frozen=True, slots=True)
class MissingFileEvent:
    """
    Details passed to a missing-file policy.

    Attributes:
        file_name: Href of the item as written in the manifest
        file_path: Absolute path that was looked up in the archive
        content_type: Classified type of the item
        content_mime_type: Media type declared in the manifest
    """

    file_name: str
    file_path: str
    content_type: ContentType
    content_mime_type: str


@dataclass(frozen=True, slots=True)
class MissingFileResponse:
    """
    Answer of a missing-file policy.

    Use the replace(), suppress() and propagate() constructors rather
    than building instances directly.
    """

    action: MissingFileAction
    replacement: IO[bytes] | None = None

    def __post_init__(self) -> None:
        if self.action is MissingFileAction.REPLACE and self.replacement is None:
            raise ValueError("A REPLACE response needs a replacement stream")

    @classmethod
    def replace(cls, content: IO[bytes] | bytes) -> "MissingFileResponse":
        """Serve the given stream (or bytes) in place of the missing file."""
        if isinstance(content, (bytes, bytearray)):
            content = io.BytesIO(bytes(content))
        return cls(MissingFileAction.REPLACE, content)

    @classmethod
    def suppress(cls) -> "MissingFileResponse":
        """Treat the missing file as empty."""
        return cls(MissingFileAction.SUPPRESS)

    @classmethod
    def propagate(cls) -> "MissingFileResponse":
        """Let the not-found error reach the caller."""
        return cls(MissingFileAction.PROPAGATE)


# Returning None is the same as MissingFileResponse.propagate()
MissingFilePolicy = Callable[[MissingFileEvent], MissingFileResponse | None]


def suppress_missing_files(event: MissingFileEvent) -> MissingFileResponse:
    """Policy that reads every missing file as empty."""
    return MissingFileResponse.suppress()


def replace_missing_files(content: bytes) -> MissingFilePolicy:
    """
    Build a policy that serves the same placeholder for every missing file.

    Args:
        content: Placeholder bytes

    Returns:
        Policy callable
    """

    def policy(event: MissingFileEvent) -> MissingFileResponse:
        return MissingFileResponse.replace(content)

    return policy


# -----------------------------------------------------------------------------
# Replacement entry
# -----------------------------------------------------------------------------


class ReplacementEntry:
    """Fully buffered stand-in for an archive entry that does not exist."""

    __slots__ = ("_content",)

    def __init__(self, stream: IO[bytes] | None = None) -> None:
        if stream is None:
            self._content = b""
        else:
            with stream:
                self._content = stream.read()

    @property
    def length(self) -> int:
        return len(self._content)

    @property
    def content(self) -> bytes:
        return self._content

    def open(self) -> IO[bytes]:
        return io.BytesIO(self._content)


# -----------------------------------------------------------------------------
# References
# -----------------------------------------------------------------------------


class ContentFileRef:
    """
    Reference to a content file inside the archive.

    Holds no content. Every read resolves the file again, except after a
    missing-file policy has supplied a replacement, which is then reused
    for the lifetime of the reference.

    Attributes:
        file_name: Href as written in the manifest
        file_path: Absolute path of the file inside the archive
        content_type: Classified type of the file
        content_mime_type: Media type declared in the manifest
        category: TEXT or BINARY, fixed per subclass
    """

    category: ClassVar[ContentCategory]

    def __init__(
        self,
        archive: Archive,
        file_name: str,
        content_type: ContentType,
        content_mime_type: str,
        *,
        content_directory_path: str = "",
        missing_file_policy: MissingFilePolicy | None = None,
    ) -> None:
        self._archive = archive
        self._file_name = file_name
        self._file_path = combine_path(content_directory_path, file_name)
        self._content_type = content_type
        self._content_mime_type = content_mime_type
        self._missing_file_policy = missing_file_policy
        self._replacement: ReplacementEntry | None = None
        self._replacement_lock = threading.Lock()

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def content_type(self) -> ContentType:
        return self._content_type

    @property
    def content_mime_type(self) -> str:
        return self._content_mime_type

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(file_name={self._file_name!r}, "
            f"content_type={self._content_type.name}, "
            f"content_mime_type={self._content_mime_type!r})"
        )

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def read_bytes(self) -> bytes:
        """
        Read the whole content of the referenced file.

        Returns:
            Raw bytes content

        Raises:
            EmptyFileNameError: If the reference has no file name
            ContentFileNotFoundError: If the file is absent and not replaced
            ContentFileTooLargeError: If the file is 2 GB or larger
        """
        return _read_entry(self._get_content_file_entry())

    async def read_bytes_async(self) -> bytes:
        """Like read_bytes, but lookup, policy and stream read run in a worker thread."""
        return await asyncio.to_thread(self.read_bytes)

    def open_stream(self) -> IO[bytes]:
        """
        Open the referenced file.

        Returns:
            New binary stream positioned at the start; the caller closes it
        """
        return self._get_content_file_entry().open()

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _get_content_file_entry(self) -> ArchiveEntry:
        entry: ArchiveEntry | None = self._replacement
        if entry is None:
            if not self._file_name:
                raise EmptyFileNameError()
            entry = self._archive.get_entry(self._file_path)
            if entry is None:
                entry = self._resolve_missing_file()
        if entry.length > MAX_CONTENT_LENGTH:
            raise ContentFileTooLargeError(self._file_path)
        return entry

    def _resolve_missing_file(self) -> ReplacementEntry:
        with self._replacement_lock:
            # Another thread may have run the policy while we waited
            if self._replacement is not None:
                return self._replacement
            if self._missing_file_policy is None:
                raise ContentFileNotFoundError(self._file_path)

            event = MissingFileEvent(
                file_name=self._file_name,
                file_path=self._file_path,
                content_type=self._content_type,
                content_mime_type=self._content_mime_type,
            )
            response = self._missing_file_policy(event)
            if response is None or response.action is MissingFileAction.PROPAGATE:
                logger.debug("Missing file %s was not replaced", self._file_path)
                raise ContentFileNotFoundError(self._file_path)

            if response.action is MissingFileAction.REPLACE:
                replacement = ReplacementEntry(response.replacement)
                logger.debug(
                    "Missing file %s replaced with %d bytes",
                    self._file_path,
                    replacement.length,
                )
            else:
                replacement = ReplacementEntry()
                logger.debug("Missing file %s suppressed", self._file_path)

            self._replacement = replacement
            return replacement


class TextContentFileRef(ContentFileRef):
    """Reference to a markup, XML or stylesheet file."""

    category = ContentCategory.TEXT

    def __init__(
        self,
        archive: Archive,
        file_name: str,
        content_type: ContentType,
        content_mime_type: str,
        *,
        content_directory_path: str = "",
        missing_file_policy: MissingFilePolicy | None = None,
        encoding: str = "utf-8",
        errors: str = "replace",
    ) -> None:
        super().__init__(
            archive,
            file_name,
            content_type,
            content_mime_type,
            content_directory_path=content_directory_path,
            missing_file_policy=missing_file_policy,
        )
        self._encoding = encoding
        self._errors = errors

    def read_text(self) -> str:
        """
        Read the whole content of the referenced file as text.

        A byte-order mark selects the encoding; otherwise the reference's
        default encoding applies.

        Returns:
            Decoded text content
        """
        return decode_text(self.read_bytes(), self._encoding, self._errors)

    async def read_text_async(self) -> str:
        data = await self.read_bytes_async()
        return decode_text(data, self._encoding, self._errors)


class ByteContentFileRef(ContentFileRef):
    """Reference to an image, font or any other binary file."""

    category = ContentCategory.BINARY


def _read_entry(entry: ArchiveEntry) -> bytes:
    with entry.open() as stream:
        return stream.read()


def create_content_ref(
    archive: Archive,
    file_name: str,
    content_mime_type: str,
    *,
    content_directory_path: str = "",
    missing_file_policy: MissingFilePolicy | None = None,
    config: ReaderConfig | None = None,
) -> TextContentFileRef | ByteContentFileRef:
    """
    Create a text or binary reference depending on the declared media type.

    Args:
        archive: Archive the file lives in
        file_name: Href from the manifest
        content_mime_type: Declared media type
        content_directory_path: Directory of the package document
        missing_file_policy: Fallback for files absent from the archive
        config: Supplies text decoding defaults

    Returns:
        TextContentFileRef for text categories, ByteContentFileRef otherwise
    """
    content_type = classify(content_mime_type)
    if category_of(content_type) is ContentCategory.TEXT:
        text_options = {}
        if config is not None:
            text_options = {"encoding": config.text_encoding, "errors": config.text_errors}
        return TextContentFileRef(
            archive,
            file_name,
            content_type,
            content_mime_type,
            content_directory_path=content_directory_path,
            missing_file_policy=missing_file_policy,
            **text_options,
        )
    return ByteContentFileRef(
        archive,
        file_name,
        content_type,
        content_mime_type,
        content_directory_path=content_directory_path,
        missing_file_policy=missing_file_policy,
    )
