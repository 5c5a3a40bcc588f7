"""Inspection helpers for binary content files."""

from __future__ import annotations

from .base import ImageInfo
from .image import describe_image

__all__ = [
    "ImageInfo",
    "describe_image",
]
