"""Domain layer: errors and schemas."""

from .errors import (
    BundleProtocolError,
    ContentStoreError,
    DanglingReferenceError,
    ErrorCodes,
    HydrationError,
    InvalidLocatorError,
    InvalidRequestError,
    NotFoundError,
    SchemaError,
    UnsupportedKindError,
)
from .schemas import (
    AssetKind,
    BundleAsset,
    BundleItem,
    BuildResult,
    ContentLocator,
    ManifestKind,
    OrderPolicy,
)

__all__ = [
    "BundleProtocolError",
    "ContentStoreError",
    "DanglingReferenceError",
    "ErrorCodes",
    "HydrationError",
    "InvalidLocatorError",
    "InvalidRequestError",
    "NotFoundError",
    "SchemaError",
    "UnsupportedKindError",
    "AssetKind",
    "BundleAsset",
    "BundleItem",
    "BuildResult",
    "ContentLocator",
    "ManifestKind",
    "OrderPolicy",
]
