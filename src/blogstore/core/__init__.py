"""Core package initializer for blogstore.

Downstream code imports from the submodules directly:
    from blogstore.core.settings import settings, load_settings, Settings, get_logger
    from blogstore.core.errors import InvalidRecord, WriteFailed
"""

from __future__ import annotations

__all__ = ["__doc__"]
