"""Base types for content inspection."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ImageInfo:
    """Format and pixel size of an image content file."""

    format: str  # 'png', 'jpeg', 'gif', 'svg' or 'unknown'
    width: int
    height: int

    @property
    def dimensions(self) -> str:
        if not self.width or not self.height:
            return "unknown size"
        return f"{self.width}x{self.height}"
