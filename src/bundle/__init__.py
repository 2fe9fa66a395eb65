"""
Bundle layer: multi-output inscription 번들 생성 (오프라인).

역할:
- asset + primary template → index가 확정된 BundleItem 목록
- "{{vout:N}}" forward reference 기록 + build 시점 범위 검증
- 네트워크 없음: 서명/브로드캐스트는 외부
"""

from .builder import build, estimate_bundle_cost, estimate_bundle_size
from .project import ProjectBundleAsset, build_project_bundle, create_project_manifest
from .registry import build_registry_bundle
from .theme import ThemeBundleAsset, build_theme_bundle

__all__ = [
    "build",
    "estimate_bundle_size",
    "estimate_bundle_cost",
    "build_theme_bundle",
    "ThemeBundleAsset",
    "build_registry_bundle",
    "build_project_bundle",
    "create_project_manifest",
    "ProjectBundleAsset",
]
