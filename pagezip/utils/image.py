# pagezip/utils/image.py
# ============================================================
# Image Utility Functions
# ============================================================
# Encoding helpers for rendered pages: the full-resolution PNG
# that goes into the archive, and the downscaled thumbnail used
# as a preview. Also metadata extraction for debug logging.
#
# Usage:
#   from pagezip.utils.image import encode_png, make_thumbnail
#   data = encode_png(page_image)
#   thumb = make_thumbnail(page_image, scale=0.3)
# ============================================================

import io
import time

from PIL import Image

from pagezip.utils.logger import get_logger

logger = get_logger(__name__)


def encode_png(image: Image.Image) -> bytes:
    """
    Serialize a PIL Image into PNG bytes.
    """
    start = time.perf_counter()
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    data = buffer.getvalue()

    duration = (time.perf_counter() - start) * 1000
    logger.debug(f"PNG encoding ({image.width}x{image.height}) took {duration:.2f}ms")
    return data


def make_thumbnail(image: Image.Image, scale: float) -> bytes:
    """
    Downscale an image by `scale` and encode the copy as PNG.

    The source image is left untouched. Each side is at least one
    pixel so that very small pages still produce a valid preview.

    Args:
        image: Full-resolution page image.
        scale: Factor in (0, 1] applied to both dimensions.

    Returns:
        PNG bytes of the reduced copy.

    Example:
        >>> thumb = make_thumbnail(Image.new("RGB", (1000, 500)), 0.3)
        >>> Image.open(io.BytesIO(thumb)).size
        (300, 150)
    """
    if not 0 < scale <= 1:
        raise ValueError(f"Thumbnail scale must be in (0, 1], got {scale}")

    width = max(1, round(image.width * scale))
    height = max(1, round(image.height * scale))

    small = image.resize((width, height), Image.Resampling.LANCZOS)
    try:
        return encode_png(small)
    finally:
        small.close()


def get_image_info(image: Image.Image) -> dict:
    """
    Extract metadata from a PIL Image for logging and diagnostics.

    Args:
        image: PIL Image to inspect.

    Returns:
        Dictionary with width, height, mode (RGB/RGBA/L), and
        estimated uncompressed size in MB.

    Example:
        >>> info = get_image_info(Image.new("RGB", (1920, 1080)))
        >>> info["width"]
        1920
    """
    width, height = image.size
    # Estimate uncompressed size: width * height * channels
    channels = len(image.getbands())
    estimated_bytes = width * height * channels
    estimated_mb = round(estimated_bytes / (1024 * 1024), 2)

    return {
        "width": width,
        "height": height,
        "mode": image.mode,
        "channels": channels,
        "estimated_size_mb": estimated_mb,
    }
