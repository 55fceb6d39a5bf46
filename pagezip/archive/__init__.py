# pagezip/archive/__init__.py
# ============================================================
# Archive Package
# ============================================================
# Key classes:
#   - ArchiveBuilder: accumulates named blobs, packs a ZIP
# ============================================================

from pagezip.archive.packer import ArchiveBuilder

__all__ = ["ArchiveBuilder"]
