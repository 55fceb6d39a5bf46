# pagezip/utils/__init__.py
# ============================================================
# Shared Utilities Package
# ============================================================
# Provides reusable helpers used across the pipeline:
#   - logger: pagezip namespace logging with one Rich handler
#   - image: PNG encoding, thumbnails, metadata extraction
# ============================================================

from pagezip.utils.logger import get_logger, set_level
from pagezip.utils.image import encode_png, make_thumbnail, get_image_info

__all__ = [
    "get_logger",
    "set_level",
    "encode_png",
    "make_thumbnail",
    "get_image_info",
]
