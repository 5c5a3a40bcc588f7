"""Image content inspection.

Reads the format and pixel size of image content files (covers in
particular) with Pillow, falling back to magic-byte sniffing for data
Pillow cannot decode, such as SVG.
"""

from __future__ import annotations

import io

from PIL import Image

from .base import ImageInfo


def _sniff_format(data: bytes) -> str:
    """Detect the format from magic bytes."""
    if data.startswith(b"\x89PNG"):
        return "png"
    if data.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if data.startswith(b"GIF8"):
        return "gif"
    head = data[:1024].lstrip()
    if b"<svg" in head and (head.startswith(b"<") or head.startswith(b"\xef\xbb\xbf")):
        return "svg"
    return "unknown"


def describe_image(data: bytes) -> ImageInfo:
    """
    Describe an image from its raw bytes.

    Args:
        data: Raw image bytes

    Returns:
        ImageInfo with format and size (0x0 when Pillow cannot decode it)
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            fmt = img.format.lower() if img.format else "unknown"
    except (OSError, ValueError, Image.DecompressionBombError):
        return ImageInfo(format=_sniff_format(data), width=0, height=0)

    if fmt == "jpg":
        fmt = "jpeg"
    return ImageInfo(format=fmt, width=width, height=height)
