"""blogstore: JSON-file persistence service for blog posts and talk messages.

The importable surface lives in the subpackages:

- ``blogstore.storage``: cache, disk/memory backends and the write serializer.
- ``blogstore.stores``: the Posts and Talk collection stores.
- ``blogstore.api``: the FastAPI application that exposes them over HTTP.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
