"""
FastAPI Routes.

registry 라우트 (GET /r/..., /init) + 번들 API 라우트 (POST /api/bundles/...)
"""

from . import bundles, errors, registry

__all__ = ["bundles", "errors", "registry"]
