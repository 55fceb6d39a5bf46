# pagezip/document/raster.py
# ============================================================
# Viewports & Raster Surfaces
# ============================================================
# A Viewport describes how a page is rasterized (scale + pixel
# size). A RasterSurface owns the pixels of one rendered page and
# releases them deterministically when its `with` block ends, so
# at most one full-resolution page is alive at any time.
#
# Usage:
#   viewport = Viewport.for_page(612, 792, scale=2.0)
#   with page.render(viewport) as surface:
#       data = encode_png(surface.image)
# ============================================================

import math
from dataclasses import dataclass
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class Viewport:
    """
    Geometric transform used to rasterize one page.

    Attributes:
        scale: Factor applied to the page's native geometry (points).
        width: Output width in pixels.
        height: Output height in pixels.
    """
    scale: float
    width: int
    height: int

    @classmethod
    def for_page(cls, page_width: float, page_height: float, scale: float) -> "Viewport":
        """Build a viewport for a page measured in PDF points."""
        if scale <= 0:
            raise ValueError(f"Viewport scale must be positive, got {scale}")
        return cls(
            scale=scale,
            width=max(1, math.ceil(page_width * scale)),
            height=max(1, math.ceil(page_height * scale)),
        )

    @property
    def dpi(self) -> float:
        """Rendering resolution (PDF user space is 72 units per inch)."""
        return 72 * self.scale


class RasterSurface:
    """
    Pixel buffer holding one rendered page.

    The surface is a context manager: leaving the `with` block (or
    calling release()) closes the underlying image and zeroes the
    dimensions. Accessing `image` afterwards raises RuntimeError.
    """

    def __init__(self, image: Image.Image):
        self._image: Optional[Image.Image] = image

    @classmethod
    def blank(cls, viewport: Viewport, color: str = "white") -> "RasterSurface":
        """Allocate an empty RGB surface matching a viewport."""
        return cls(Image.new("RGB", (viewport.width, viewport.height), color=color))

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError("Raster surface has been released")
        return self._image

    @property
    def width(self) -> int:
        return self._image.width if self._image is not None else 0

    @property
    def height(self) -> int:
        return self._image.height if self._image is not None else 0

    @property
    def released(self) -> bool:
        return self._image is None

    def release(self) -> None:
        """Free the pixel buffer. Safe to call more than once."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "RasterSurface":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"RasterSurface({self.width}x{self.height})"
