"""Top-level package for py_category_sync.

Category bootstrap-and-reconciliation engine for the personal-finance client:
canonical catalog, one-shot bootstrap, TTL-gated reconciliation and the
fallback read path, grouped under ``py_category_sync.*``.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = [
    "__version__",
]
