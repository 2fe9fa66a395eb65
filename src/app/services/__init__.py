"""
Application Services.

역할:
- validate: resolve된 문서 → kind별 manifest 타입
- hydrate: sibling 파일 동시 fetch + 디코딩
- translate: manifest → shadcn registry-item
- gateway: 위 단계를 묶는 상태 머신
"""

from .gateway import GatewayOrchestrator, GatewayResult
from .hydrate import ManifestHydrator, hydrate
from .translate import get_translator, translate
from .validate import detect_kind, validate_manifest

__all__ = [
    "GatewayOrchestrator",
    "GatewayResult",
    "ManifestHydrator",
    "hydrate",
    "get_translator",
    "translate",
    "detect_kind",
    "validate_manifest",
]
