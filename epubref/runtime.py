"""
Runtime configuration for epubref.

Holds the knobs that flow from the CLI (or a library caller) down to the
content references: text decoding defaults and the missing-file fallback.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass


@dataclass
class ReaderConfig:
    """
    Configuration for reading a book's content files.

    Attributes:
        text_encoding: Encoding used by read_text when no byte-order mark is present
        text_errors: Codec error handler for read_text
        ignore_missing: Treat files listed in the manifest but absent from
            the archive as empty instead of raising
    """

    text_encoding: str = "utf-8"
    text_errors: str = "replace"
    ignore_missing: bool = False


def get_reader_config(
    text_encoding: str | None = None,
    ignore_missing: bool = False,
) -> ReaderConfig:
    """
    Create a reader configuration with sensible defaults.

    Args:
        text_encoding: Override the fallback text encoding
        ignore_missing: Suppress missing-file errors

    Returns:
        Configured ReaderConfig instance

    Raises:
        ValueError: If text_encoding names no known codec
    """
    config = ReaderConfig(ignore_missing=ignore_missing)
    if text_encoding:
        try:
            codecs.lookup(text_encoding)
        except LookupError:
            raise ValueError(f"Unknown text encoding: {text_encoding}") from None
        config.text_encoding = text_encoding
    return config
