# pagezip/document/__init__.py
# ============================================================
# Document Processing Package
# ============================================================
# Handles decoding PDFs and rasterizing their pages:
#   - PdfDocument: parses bytes (pypdf), exposes page_count/get_page
#   - PdfPage: page geometry, viewports and rendering (pdf2image)
#   - RasterSurface / Viewport: scoped pixel buffers
# ============================================================

from pagezip.document.decoder import PdfDocument, PdfPage
from pagezip.document.raster import RasterSurface, Viewport

__all__ = ["PdfDocument", "PdfPage", "RasterSurface", "Viewport"]
