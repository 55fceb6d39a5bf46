# tests/conftest.py
# ============================================================
# Shared fixtures
# ============================================================
# - make_pdf: builds real PDF bytes in memory with pypdf
# - FakeDocument / FakePage: stand-ins for the decoder so the
#   converter can be tested without poppler installed
# ============================================================

import io
import shutil

import pytest
from pypdf import PdfWriter
from pypdf.generic import RectangleObject

from config.settings import Settings
from pagezip.document.raster import RasterSurface, Viewport
from pagezip.errors import PageRenderError

requires_poppler = pytest.mark.skipif(
    shutil.which("pdftoppm") is None,
    reason="poppler (pdftoppm) is not installed",
)


class FakePage:
    """Page double that renders blank white surfaces and remembers them."""

    def __init__(self, number, width=100.0, height=50.0, fail=False):
        self.number = number
        self.width = width
        self.height = height
        self.fail = fail
        self.surfaces = []

    def get_viewport(self, scale):
        return Viewport.for_page(self.width, self.height, scale)

    def render(self, viewport):
        if self.fail:
            raise PageRenderError(self.number, "simulated render failure")
        surface = RasterSurface.blank(viewport)
        self.surfaces.append(surface)
        return surface


class FakeDocument:
    """Document double exposing page_count and 1-indexed get_page()."""

    def __init__(self, pages):
        self.pages = pages
        self.page_count = len(pages)
        self.requested = []
        self.closed = False

    def get_page(self, number):
        self.requested.append(number)
        return self.pages[number - 1]

    def close(self):
        self.closed = True

    @property
    def surfaces(self):
        return [s for page in self.pages for s in page.surfaces]


@pytest.fixture
def make_pdf():
    """Return a builder: make_pdf([(w, h), ...], rotations={idx: deg}, crops={idx: box})."""

    def _make(sizes=((200, 100),), rotations=None, crops=None):
        writer = PdfWriter()
        for idx, (width, height) in enumerate(sizes):
            page = writer.add_blank_page(width=width, height=height)
            if rotations and idx in rotations:
                page.rotate(rotations[idx])
            if crops and idx in crops:
                page.cropbox = RectangleObject(crops[idx])
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture
def fake_document():
    """Return a builder: fake_document(n_pages, fail_on=None)."""

    def _make(n_pages, fail_on=None):
        return FakeDocument([
            FakePage(i, fail=(i == fail_on)) for i in range(1, n_pages + 1)
        ])

    return _make


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file."""
    return Settings(render_scale=2.0, preview_scale=0.5, _env_file=None)
