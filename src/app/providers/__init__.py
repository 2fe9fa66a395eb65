"""
Content Store Abstraction.

ORDFS(HTTP) / in-memory 구현 교체 가능하게 설계.
base_url, timeout, 캐시 크기는 config만 SSOT.
"""

from .base import ContentStore, FetchedContent
from .cached import CachedContentStore
from .memory import InMemoryContentStore
from .ordfs import OrdfsContentStore

__all__ = [
    "ContentStore",
    "FetchedContent",
    "CachedContentStore",
    "InMemoryContentStore",
    "OrdfsContentStore",
]
