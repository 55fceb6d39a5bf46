# pagezip/__init__.py
# ============================================================
# pagezip — PDF pages to PNG archive
# ============================================================
# Root package. Sub-packages:
#   - pagezip.document  → PDF decoding (pypdf) + rasterizing (pdf2image)
#   - pagezip.archive   → ZIP accumulator
#   - pagezip.pipeline  → PdfConverter (ties everything together)
#   - pagezip.utils     → Shared utilities (logging, image helpers)
# ============================================================

from pagezip.errors import ConversionError
from pagezip.pipeline import CancelToken, ConversionResult, PagePreview, PdfConverter, convert_file

__all__ = [
    "CancelToken",
    "ConversionError",
    "ConversionResult",
    "PagePreview",
    "PdfConverter",
    "convert_file",
]
