# pagezip/archive/packer.py
# ============================================================
# Archive Packer — in-memory ZIP accumulator
# ============================================================
# Collects named byte blobs and packs them into one ZIP file.
# Entries are stored, not deflated: rendered pages are PNGs and
# already compressed.
#
# Usage:
#   builder = ArchiveBuilder()
#   builder.add("report_page_1.png", png_bytes)
#   zip_bytes = builder.build()
# ============================================================

import io
import zipfile


class ArchiveBuilder:
    """Ordered accumulator of (name, bytes) entries."""

    def __init__(self, compression: int = zipfile.ZIP_STORED):
        self.compression = compression
        self._entries: dict[str, bytes] = {}

    def add(self, name: str, data: bytes) -> None:
        if name in self._entries:
            raise ValueError(f"Duplicate archive entry: {name}")
        self._entries[name] = data

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self) -> bytes:
        """Pack all entries, in insertion order, into ZIP bytes."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=self.compression) as zf:
            for name, data in self._entries.items():
                zf.writestr(name, data)
        return buffer.getvalue()
