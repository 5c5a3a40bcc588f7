"""Exceptions raised while reading an EPUB package and its content files."""

from __future__ import annotations


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class EpubError(Exception):
    """Base exception for all epubref errors."""

    pass


class PackageError(EpubError):
    """Raised when the container or package document is missing or malformed."""

    pass


# -----------------------------------------------------------------------------
# Content references
# -----------------------------------------------------------------------------


class ContentReferenceError(EpubError):
    """
    Raised when a content file reference cannot be resolved to archive data.

    Attributes:
        file_path: Absolute path of the file inside the archive, if known
    """

    def __init__(self, message: str, file_path: str | None = None) -> None:
        super().__init__(message)
        self.file_path = file_path


class EmptyFileNameError(ContentReferenceError):
    """Raised when a reference was built from a manifest item without an href."""

    def __init__(self) -> None:
        super().__init__("EPUB parsing error: file name of the specified content file is empty.")


class ContentFileNotFoundError(ContentReferenceError):
    """Raised when the referenced file is absent and no fallback was provided."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f'EPUB parsing error: file "{file_path}" was not found in the EPUB file.',
            file_path,
        )


class ContentFileTooLargeError(ContentReferenceError):
    """Raised when the referenced file does not fit into a single buffer."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f'EPUB parsing error: file "{file_path}" is larger than 2 GB.',
            file_path,
        )
