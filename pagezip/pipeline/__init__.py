# pagezip/pipeline/__init__.py
# ============================================================
# Pipeline Package
# ============================================================
# Contains the PdfConverter that ties the decoder, rasterizer,
# encoder and archive packer together.
#
# Key classes:
#   - PdfConverter: PDF bytes → ConversionResult
#   - ConversionResult / PagePreview: immutable outputs
#   - CancelToken: cooperative cancellation between pages
# ============================================================

from pagezip.pipeline.cancel import CancelToken
from pagezip.pipeline.orchestrator import (
    ConversionResult,
    PagePreview,
    PdfConverter,
    convert_file,
)

__all__ = [
    "CancelToken",
    "ConversionResult",
    "PagePreview",
    "PdfConverter",
    "convert_file",
]
