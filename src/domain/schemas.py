"""
Data schemas for the bundle protocol.

규칙:
- BundleItem은 생성 후 불변, 리스트 위치 = output index
- manifest는 단계별로 타입이 다름: template → resolved → validated → hydrated
- 번역(translate)은 validated/hydrated 타입만 받음
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

JsonValue = Union[str, int, float, bool, None, list["JsonValue"], dict[str, "JsonValue"]]
JsonObject = dict[str, JsonValue]


# =============================================================================
# Enums
# =============================================================================

class AssetKind(str, Enum):
    """번들 아이템 종류 (inscription MAP 메타데이터의 type)."""
    FONT = "font"
    PATTERN = "pattern"
    WALLPAPER = "wallpaper"
    ICON = "icon"
    IMAGE = "image"
    FILE = "file"
    THEME = "theme"
    COMPONENT = "component"
    BLOCK = "block"
    PROJECT = "project"


class OrderPolicy(str, Enum):
    """
    번들 내 primary 문서 위치.

    MANIFEST_LAST: asset 0..k-1, primary k (theme, project)
    MANIFEST_FIRST: primary 0, file 1..k (component, block)
    """
    MANIFEST_LAST = "manifest-last"
    MANIFEST_FIRST = "manifest-first"


class ManifestKind(str, Enum):
    """manifest 종류 = discriminator(type 필드) 값."""
    THEME = "registry:style"
    COMPONENT = "registry:component"
    BLOCK = "registry:block"
    PROJECT = "registry:base"

    @property
    def order_policy(self) -> OrderPolicy:
        if self in (ManifestKind.COMPONENT, ManifestKind.BLOCK):
            return OrderPolicy.MANIFEST_FIRST
        return OrderPolicy.MANIFEST_LAST

    @property
    def needs_hydration(self) -> bool:
        """manifest-first 종류만 sibling 파일 hydration 필요."""
        return self.order_policy is OrderPolicy.MANIFEST_FIRST


class GatewayStage(str, Enum):
    """gateway 요청 상태 머신."""
    FETCHING = "fetching"
    RESOLVING = "resolving"
    VALIDATING = "validating"
    HYDRATING = "hydrating"
    TRANSLATING = "translating"
    DONE = "done"
    FAILED = "failed"


# =============================================================================
# Bundle Item Model
# =============================================================================

@dataclass(frozen=True)
class ContentLocator:
    """
    inscription 주소: (txid, output index).

    직렬화: "<txid>_<index>". 파싱/검증은 core/locator.py.
    """
    txid: str
    index: int

    def __str__(self) -> str:
        return f"{self.txid}_{self.index}"

    def sibling(self, index: int) -> "ContentLocator":
        """같은 트랜잭션의 다른 output."""
        return ContentLocator(txid=self.txid, index=index)


@dataclass(frozen=True)
class BundleAsset:
    """build() 입력 asset. 순서가 곧 index 할당 순서."""
    kind: AssetKind
    payload: bytes
    mime_type: str
    display_name: str = ""
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BundleItem:
    """번들의 한 output. 생성 후 불변."""
    kind: AssetKind
    payload: bytes
    mime_type: str
    display_name: str = ""
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_asset(cls, asset: BundleAsset) -> "BundleItem":
        return cls(
            kind=asset.kind,
            payload=asset.payload,
            mime_type=asset.mime_type,
            display_name=asset.display_name,
            metadata=dict(asset.metadata),
        )

    def to_dict(self) -> dict[str, Any]:
        """signer 전달/JSON 응답용 (payload는 base64)."""
        return {
            "kind": self.kind.value,
            "base64Data": base64.b64encode(self.payload).decode("ascii"),
            "mimeType": self.mime_type,
            "name": self.display_name,
            "metadata": dict(self.metadata),
        }


@dataclass
class BuildResult:
    """
    build() 결과.

    items: output index 순서의 아이템 목록
    document: placeholder가 들어간 최종 primary 문서 (unresolved template)
    slot_indices: slot 이름 → asset index
    """
    items: list[BundleItem]
    document: JsonObject
    order_policy: OrderPolicy
    slot_indices: dict[str, int] = field(default_factory=dict)

    @property
    def primary_index(self) -> int:
        if self.order_policy is OrderPolicy.MANIFEST_FIRST:
            return 0
        return len(self.items) - 1

    @property
    def primary_item(self) -> BundleItem:
        return self.items[self.primary_index]


# =============================================================================
# Manifest Phase Types
# =============================================================================

@dataclass(frozen=True)
class ResolvedDocument:
    """
    placeholder가 절대 locator로 치환된 문서.

    스키마 검증은 이 타입에만 적용됨 (template은 검증 불가).
    """
    locator: ContentLocator
    document: JsonObject


@dataclass
class BundleAssetRef:
    """manifest에 기록된 sibling asset 정보 (bundle.assets[])."""
    index: int
    kind: str
    slot: str | None = None
    library: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"index": self.index, "kind": self.kind}
        if self.slot is not None:
            result["slot"] = self.slot
        if self.library is not None:
            result["library"] = self.library
        return result


@dataclass
class ThemeManifest:
    """검증된 theme manifest (registry:style)."""
    locator: ContentLocator
    name: str
    light: dict[str, str]
    dark: dict[str, str]
    description: str | None = None
    author: str | None = None
    assets: list[BundleAssetRef] = field(default_factory=list)


@dataclass
class RegistryFileEntry:
    """
    component/block manifest의 파일 항목.

    content(inline, 비어 있지 않음) 또는 source(sibling locator) 중 하나를 가짐.
    content가 빈 문자열이면 source로 채움.
    """
    path: str
    type: str
    content: str | None = None
    source: ContentLocator | None = None
    target: str | None = None

    @property
    def is_inline(self) -> bool:
        return bool(self.content)


@dataclass
class RegistryManifest:
    """검증된 component/block manifest (hydration 전)."""
    locator: ContentLocator
    kind: ManifestKind
    name: str
    type: str
    files: list[RegistryFileEntry]
    description: str | None = None
    dependencies: list[str] = field(default_factory=list)
    registry_dependencies: list[str] = field(default_factory=list)
    css_vars: dict[str, Any] | None = None
    css: dict[str, Any] | None = None
    tailwind: dict[str, Any] | None = None


@dataclass(frozen=True)
class HydratedFile:
    """content가 채워진 파일 항목."""
    path: str
    type: str
    content: str
    target: str | None = None


@dataclass
class HydratedRegistryManifest:
    """모든 파일에 content가 있는 manifest. 부분 hydration 상태는 존재하지 않음."""
    locator: ContentLocator
    kind: ManifestKind
    name: str
    type: str
    files: list[HydratedFile]
    description: str | None = None
    dependencies: list[str] = field(default_factory=list)
    registry_dependencies: list[str] = field(default_factory=list)
    css_vars: dict[str, Any] | None = None
    css: dict[str, Any] | None = None
    tailwind: dict[str, Any] | None = None


@dataclass
class ProjectConfig:
    """registry:base config 블록 (shadcn/create)."""
    style: str
    base_color: str = "zinc"
    icon_library: str = "lucide"
    menu_color: str = "default"
    menu_accent: str = "subtle"

    def to_dict(self) -> dict[str, Any]:
        return {
            "style": self.style,
            "tailwind": {"baseColor": self.base_color},
            "iconLibrary": self.icon_library,
            "menuColor": self.menu_color,
            "menuAccent": self.menu_accent,
        }


@dataclass
class ProjectManifest:
    """검증된 project manifest (registry:base)."""
    locator: ContentLocator
    name: str
    light: dict[str, str]
    dark: dict[str, str]
    config: ProjectConfig
    extends: str = "none"
    dependencies: list[str] = field(default_factory=list)
    registry_dependencies: list[str] = field(default_factory=list)
    css: dict[str, Any] | None = None
    assets: list[BundleAssetRef] = field(default_factory=list)


ValidatedManifest = Union[ThemeManifest, RegistryManifest, ProjectManifest]
TranslatableManifest = Union[ThemeManifest, HydratedRegistryManifest, ProjectManifest]


# =============================================================================
# Request Logging Schemas
# =============================================================================

@dataclass
class StageEvent:
    """상태 전이 기록."""
    stage: GatewayStage
    at: str  # ISO 8601
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "at": self.at,
            "elapsed_ms": round(self.elapsed_ms, 3),
        }


@dataclass
class RequestLog:
    """
    gateway 요청 로그.

    요청 단위 상태 전이 및 결과. 저장하지 않고 logger로만 출력.
    """
    request_id: str
    locator: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed
    kind: str | None = None

    stages: list[StageEvent] = field(default_factory=list)
    siblings_fetched: int = 0
    document_hash: str | None = None

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    # 경과 시간 계산용 (직렬화 제외)
    monotonic_start: float = field(default=0.0, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "locator": self.locator,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "kind": self.kind,
            "stages": [s.to_dict() for s in self.stages],
            "siblings_fetched": self.siblings_fetched,
            "document_hash": self.document_hash,
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
