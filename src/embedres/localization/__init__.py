"""Embedded-resource localization package.

Provides the full resolution stack: type aliases, blob tables, payload
readers, resource sets, the loader, and the resolution cache.

Submodules:
    types        - PEP 695 type aliases (LocaleCode, CanonicalKey, BlobName, ...)
    providers    - BlobProvider protocol, MappingBlobProvider, PackageBlobProvider
    readers      - ResourceReader protocol, MoCatalogReader, JsonResourceReader
    resource_set - ResourceSet with explicit lifecycle state
    loading      - BlobNaming, ResourceSetLoader, ResourceLoadResult,
                   LoadSummary, FallbackInfo
    manager      - EmbeddedResourceManager (resolution cache + accessors)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from embedres.enums import LoadStatus, ResourceSetState
from embedres.localization.loading import (
    BlobNaming,
    FallbackInfo,
    LoadSummary,
    ResourceLoadResult,
    ResourceSetLoader,
)
from embedres.localization.manager import EmbeddedResourceManager
from embedres.localization.providers import (
    BlobProvider,
    MappingBlobProvider,
    PackageBlobProvider,
)
from embedres.localization.readers import (
    JsonResourceReader,
    MoCatalogReader,
    ResourceReader,
)
from embedres.localization.resource_set import ResourceSet
from embedres.localization.types import (
    BlobName,
    CanonicalKey,
    LocaleCode,
    LocaleProvider,
    ResourceName,
    ResourceValue,
)

__all__ = [
    # Resolution cache
    "EmbeddedResourceManager",
    # Loading
    "BlobNaming",
    "ResourceSetLoader",
    "ResourceSet",
    "ResourceSetState",
    # Blob tables
    "BlobProvider",
    "MappingBlobProvider",
    "PackageBlobProvider",
    # Payload readers
    "ResourceReader",
    "MoCatalogReader",
    "JsonResourceReader",
    # Load tracking and fallback observability
    "LoadStatus",
    "LoadSummary",
    "ResourceLoadResult",
    "FallbackInfo",
    # Type aliases for user code type annotations
    "BlobName",
    "CanonicalKey",
    "LocaleCode",
    "LocaleProvider",
    "ResourceName",
    "ResourceValue",
]
