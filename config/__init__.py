# config/__init__.py
# ============================================================
# Configuration package for the pagezip pipeline.
# Provides centralized, validated settings loaded from .env file.
#
# Usage:
#   from config.settings import settings
#   print(settings.render_scale)
# ============================================================

from config.settings import Settings, settings

__all__ = ["Settings", "settings"]
