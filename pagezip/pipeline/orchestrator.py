# pagezip/pipeline/orchestrator.py
# ============================================================
# Pipeline Orchestrator — PDF → PNG pages → ZIP archive
# ============================================================
# Ties the decoder, rasterizer, encoder and archive packer into
# one conversion: bytes → pages → PNGs + thumbnails → ZIP.
#
# Design Decisions:
#   1. Strictly sequential: page i is rendered, encoded, packed
#      and released before page i+1 starts. Blocking library calls
#      are awaited through asyncio.to_thread; those are sequencing
#      points, never concurrency.
#   2. One live surface: each RasterSurface is released by its
#      `with` block, so peak memory is one page of pixels no
#      matter how long the document is.
#   3. One error path: anything that is not already a
#      ConversionError is wrapped once at the top. No retries, no
#      partial results.
#
# Usage:
#   from pagezip.pipeline.orchestrator import PdfConverter
#   converter = PdfConverter()
#   result = await converter.convert(data, "report.pdf", print)
#   result.save("output/")
# ============================================================

import asyncio
import base64
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from config.settings import Settings, settings as default_settings
from pagezip.archive.packer import ArchiveBuilder
from pagezip.document.decoder import PdfDocument
from pagezip.errors import ConversionCancelled, ConversionError, PageEncodeError
from pagezip.pipeline.cancel import CancelToken
from pagezip.utils.image import encode_png, get_image_info, make_thumbnail
from pagezip.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


# ============================================================
# Naming & Progress Helpers
# ============================================================

def base_name(file_name: str) -> str:
    """Strip the final extension: 'report.v2.pdf' → 'report.v2'."""
    return _EXTENSION_RE.sub("", file_name)


def page_entry_name(base: str, page_number: int) -> str:
    return f"{base}_page_{page_number}.png"


def archive_name(base: str, suffix: str = "_images.zip") -> str:
    return f"{base}{suffix}"


def progress_percent(done: int, total: int) -> int:
    """
    Integer percentage of `done` out of `total`, rounded half up.

    Uses integer arithmetic so that e.g. 1/8 (12.5%) always gives
    13 regardless of float representation.
    """
    if total <= 0:
        raise ValueError(f"total must be positive, got {total}")
    return (done * 200 + total) // (2 * total)


# ============================================================
# Data Classes
# ============================================================

@dataclass(frozen=True)
class PagePreview:
    """
    Low-resolution snapshot of one converted page.

    Attributes:
        page_number: 1-indexed page number in the source document.
        thumbnail: PNG bytes of the downscaled page.
    """
    page_number: int
    thumbnail: bytes

    @property
    def data_url(self) -> str:
        """The thumbnail as an inline `data:` URL, ready for an <img> tag."""
        encoded = base64.b64encode(self.thumbnail).decode("ascii")
        return f"data:image/png;base64,{encoded}"


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of converting one document.

    Attributes:
        archive: ZIP bytes holding one PNG per successfully encoded page.
        previews: Thumbnails in ascending page order.
        output_name: Suggested archive file name (`<base>_images.zip`).
        entry_names: Archive entry names, in archive order.
        page_count: Number of pages in the source document.
        skipped_pages: Pages left out because they encoded to no data.
        latency_ms: End-to-end conversion time in milliseconds.
        base_name: Input file name without its extension.
    """
    archive: bytes
    previews: tuple[PagePreview, ...]
    output_name: str
    entry_names: tuple[str, ...] = ()
    page_count: int = 0
    skipped_pages: tuple[int, ...] = ()
    latency_ms: float = 0.0
    base_name: str = ""

    def save(self, output_dir: Union[str, Path]) -> Path:
        """
        Write the archive into `output_dir` under `output_name`.

        Returns:
            The absolute path to the saved archive.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / self.output_name
        path.write_bytes(self.archive)
        logger.info(f"Saved archive to [bold]{path}[/bold]")
        return path.resolve()

    def save_previews(self, output_dir: Union[str, Path]) -> list[Path]:
        """Write every thumbnail as `<base>_page_<n>_preview.png`."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        paths = []
        for preview in self.previews:
            path = output_dir / f"{self.base_name}_page_{preview.page_number}_preview.png"
            path.write_bytes(preview.thumbnail)
            paths.append(path.resolve())
        return paths


# ============================================================
# Converter
# ============================================================

class PdfConverter:
    """
    Converts a PDF into a ZIP of PNG page images plus thumbnails.

    Flow:
        1. decoder(bytes) → document with page_count / get_page(i) / close()
        2. for each page, in order: viewport → render → encode → pack
           → thumbnail → progress → release
        3. ArchiveBuilder.build() → ConversionResult
        4. document.close(), on success and on failure

    The decoder and encoder are injectable; by default the decoder
    is PdfDocument.from_bytes (pypdf + pdf2image) and the encoder
    is encode_png (Pillow).

    Example:
        >>> converter = PdfConverter()
        >>> result = asyncio.run(converter.convert(data, "report.pdf"))
        >>> result.output_name
        'report_images.zip'
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        decoder: Optional[Callable[[bytes], object]] = None,
        encoder: Optional[Callable[[Image.Image], Optional[bytes]]] = None,
    ):
        self.settings = settings or default_settings
        self.decoder = decoder or self._default_decoder
        self.encoder = encoder or encode_png

        logger.info(
            f"PdfConverter initialized — scale: {self.settings.render_scale}, "
            f"preview scale: {self.settings.preview_scale}, "
            f"on page error: {self.settings.page_error_policy}"
        )

    def _default_decoder(self, data: bytes) -> PdfDocument:
        return PdfDocument.from_bytes(data, poppler_path=self.settings.poppler_path)

    async def convert(
        self,
        document: bytes,
        file_name: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ConversionResult:
        """
        Convert one PDF document end-to-end.

        Args:
            document: Raw PDF bytes.
            file_name: Name of the input file; drives entry and archive names.
            on_progress: Called once per source page, after that page is
                         done, with an integer percentage in [0, 100].
            cancel_token: Checked before each page.

        Returns:
            ConversionResult with the archive, previews and output name.

        Raises:
            ConversionError: On any failure. Subclasses name the stage:
                DocumentDecodeError, PageRenderError, PageEncodeError,
                ConversionCancelled.
        """
        start = time.perf_counter()
        base = base_name(file_name)

        logger.info(f"Conversion starting — file: [bold]{file_name}[/bold]")

        doc = None
        try:
            doc = await asyncio.to_thread(self.decoder, document)
            total = doc.page_count
            logger.info(f"Document decoded — {total} pages")

            builder = ArchiveBuilder()
            previews: list[PagePreview] = []
            skipped: list[int] = []

            for number in range(1, total + 1):
                if cancel_token is not None and cancel_token.cancelled:
                    raise ConversionCancelled(
                        f"Conversion cancelled before page {number} of {total}"
                    )

                preview = await self._convert_page(doc, number, base, builder)
                if preview is not None:
                    previews.append(preview)
                else:
                    skipped.append(number)

                if on_progress is not None:
                    on_progress(progress_percent(number, total))

            archive = await asyncio.to_thread(builder.build)

        except ConversionError as e:
            logger.error(f"Conversion of {file_name} failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Conversion of {file_name} failed: {e}")
            raise ConversionError(f"Failed to convert {file_name}: {e}") from e
        finally:
            if doc is not None:
                doc.close()

        latency = (time.perf_counter() - start) * 1000
        logger.info(
            f"Conversion complete — {len(builder)}/{total} pages, "
            f"{len(archive)} bytes, {latency:.0f}ms total"
        )

        return ConversionResult(
            archive=archive,
            previews=tuple(previews),
            output_name=archive_name(base, self.settings.archive_suffix),
            entry_names=tuple(builder.names),
            page_count=total,
            skipped_pages=tuple(skipped),
            latency_ms=latency,
            base_name=base,
        )

    async def _convert_page(
        self, doc, number: int, base: str, builder: ArchiveBuilder
    ) -> Optional[PagePreview]:
        """Render, encode and pack one page. Returns None if it was skipped."""
        page = doc.get_page(number)
        viewport = page.get_viewport(self.settings.render_scale)
        surface = await asyncio.to_thread(page.render, viewport)

        with surface:
            info = get_image_info(surface.image)
            logger.debug(
                f"  Page {number}: {info['width']}x{info['height']} "
                f"({info['estimated_size_mb']}MB)"
            )

            data = await asyncio.to_thread(self.encoder, surface.image)
            if not data:
                if self.settings.page_error_policy == "abort":
                    raise PageEncodeError(number)
                logger.warning(f"Page {number} encoded to no data — skipped")
                return None

            builder.add(page_entry_name(base, number), data)
            thumbnail = await asyncio.to_thread(
                make_thumbnail, surface.image, self.settings.preview_scale
            )

        return PagePreview(page_number=number, thumbnail=thumbnail)


# ============================================================
# Convenience Entry Point
# ============================================================

def convert_file(
    path: Union[str, Path],
    on_progress: Optional[ProgressCallback] = None,
    settings: Optional[Settings] = None,
    cancel_token: Optional[CancelToken] = None,
) -> ConversionResult:
    """Read a PDF from disk and convert it synchronously."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    converter = PdfConverter(settings=settings)
    return asyncio.run(
        converter.convert(path.read_bytes(), path.name, on_progress, cancel_token)
    )
