# pagezip/document/decoder.py
# ============================================================
# PDF Decoder & Page Rasterizer
# ============================================================
# Turns raw PDF bytes into a navigable page collection and
# renders single pages into raster surfaces.
#
#   - Parsing / page geometry: pypdf (pure Python, no poppler)
#   - Rasterization: pdf2image (poppler's pdftoppm), one page
#     per call so only one page of pixels exists at a time.
#     The bytes are spooled to one temp file per document, on
#     first render, and every page is rendered from that file.
#
# Usage:
#   from pagezip.document.decoder import PdfDocument
#   with PdfDocument.from_bytes(data) as doc:
#       page = doc.get_page(1)
#       with page.render(page.get_viewport(2.0)) as surface:
#           print(surface)
# ============================================================

import io
import os
import tempfile
from typing import Optional

from pdf2image import convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from pagezip.document.raster import RasterSurface, Viewport
from pagezip.errors import DocumentDecodeError, PageRenderError
from pagezip.utils.logger import get_logger

logger = get_logger(__name__)

_RENDER_ERRORS = (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
    OSError,
)


# ============================================================
# Page
# ============================================================

class PdfPage:
    """
    Handle on a single page of a decoded document.

    Geometry comes from the page's crop box (what viewers show),
    with /Rotate applied: a page rotated by 90 or 270 degrees has
    its width and height swapped.
    """

    def __init__(self, document: "PdfDocument", number: int, width: float, height: float):
        self.document = document
        self.number = number
        self.width = width
        self.height = height

    def get_viewport(self, scale: float) -> Viewport:
        return Viewport.for_page(self.width, self.height, scale)

    def render(self, viewport: Viewport) -> RasterSurface:
        """
        Rasterize this page at the viewport's size.

        Args:
            viewport: Target geometry from get_viewport().

        Returns:
            An RGB RasterSurface of exactly viewport.width x viewport.height.

        Raises:
            PageRenderError: If poppler is missing or fails on this page.
        """
        try:
            images = convert_from_path(
                self.document.spool_path(),
                dpi=viewport.dpi,
                first_page=self.number,
                last_page=self.number,
                size=(viewport.width, viewport.height),
                use_cropbox=True,
                userpw=self.document.password,
                poppler_path=self.document.poppler_path,
            )
        except _RENDER_ERRORS as e:
            raise PageRenderError(self.number, str(e)) from e

        if not images:
            raise PageRenderError(self.number, "renderer returned no image")

        img = images[0]
        for extra in images[1:]:
            extra.close()

        if img.mode != "RGB":
            converted = img.convert("RGB")
            img.close()
            img = converted

        return RasterSurface(img)

    def __repr__(self) -> str:
        return f"PdfPage({self.number}, {self.width:.1f}x{self.height:.1f}pt)"


# ============================================================
# Document
# ============================================================

class PdfDocument:
    """
    Decoded PDF: page count plus 1-indexed page access.

    Rendering needs the bytes on disk, so the first render writes
    them to a temp file that every later page reuses. close() (or
    leaving a `with` block) deletes it.

    Example:
        >>> with PdfDocument.from_bytes(Path("report.pdf").read_bytes()) as doc:
        ...     doc.page_count
        3
    """

    def __init__(
        self,
        data: bytes,
        reader: PdfReader,
        poppler_path: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.data = data
        self._reader = reader
        self.poppler_path = poppler_path
        self.password = password
        self.page_count = len(reader.pages)
        self._spool_path: Optional[str] = None

    def spool_path(self) -> str:
        """Path of the on-disk copy of the document, written on first use."""
        if self._spool_path is None:
            with tempfile.NamedTemporaryFile(
                prefix="pagezip-", suffix=".pdf", delete=False
            ) as spool:
                spool.write(self.data)
            self._spool_path = spool.name
            logger.debug(f"Spooled {len(self.data)} bytes to {self._spool_path}")
        return self._spool_path

    def close(self) -> None:
        """Delete the temp file, if any. Safe to call more than once."""
        if self._spool_path is not None:
            try:
                os.remove(self._spool_path)
            except FileNotFoundError:
                pass
            self._spool_path = None

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        poppler_path: Optional[str] = None,
        password: Optional[str] = None,
    ) -> "PdfDocument":
        """
        Parse PDF bytes.

        Encrypted documents are opened with `password`, or the empty
        user password when none is given.

        Raises:
            DocumentDecodeError: If the bytes are not a readable PDF.
        """
        try:
            reader = PdfReader(io.BytesIO(data))
            if reader.is_encrypted and not reader.decrypt(password or ""):
                raise DocumentDecodeError("Document is encrypted and the password is wrong")
            document = cls(data, reader, poppler_path=poppler_path, password=password)
        except PyPdfError as e:
            raise DocumentDecodeError(f"Not a readable PDF document: {e}") from e

        logger.debug(f"Decoded PDF — {document.page_count} pages, {len(data)} bytes")
        return document

    def get_page(self, number: int) -> PdfPage:
        """Return page `number` (1-indexed)."""
        if not 1 <= number <= self.page_count:
            raise IndexError(f"Page {number} out of range 1..{self.page_count}")

        page = self._reader.pages[number - 1]
        box = page.cropbox
        width, height = float(box.width), float(box.height)
        if (page.rotation or 0) % 180 == 90:
            width, height = height, width

        return PdfPage(self, number, width, height)
