"""embedres - localized resources embedded in a single distributable.

Resolves localized strings and typed objects packaged as binary blobs
inside the application itself (package data, wheels, zipapps) instead of
per-locale side files. Picks the right blob for a requested or ambient
locale, falls back through the locale hierarchy, caches the active set and
swaps it safely when the locale changes. Safe to call from many threads.

Public API:
    EmbeddedResourceManager - Resolution cache with get_string/get_object
    BlobNaming - Candidate blob naming for one resource family
    MappingBlobProvider / PackageBlobProvider - Blob tables
    MoCatalogReader / JsonResourceReader - Payload readers
    AmbientLocale - Context-local current-locale provider
    normalize_locale_key - Canonical blob key for a locale identifier

Exceptions:
    EmbeddedResourceError - Base exception class
    ResourceFormatError - Unparseable payload
    StaleResourceSetError - Lookup against a released ResourceSet

Submodules:
    embedres.localization - Providers, readers, loader, resource sets, manager
    embedres.locale_utils - Canonical keys, parent chains, system locale
    embedres.runtime.locale_context - AmbientLocale
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .errors import EmbeddedResourceError, ResourceFormatError, StaleResourceSetError
from .locale_utils import normalize_locale_key
from .localization import (
    BlobNaming,
    EmbeddedResourceManager,
    JsonResourceReader,
    MappingBlobProvider,
    MoCatalogReader,
    PackageBlobProvider,
    ResourceSet,
)
from .runtime import AmbientLocale

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("embedres")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AmbientLocale",
    "BlobNaming",
    "EmbeddedResourceError",
    "EmbeddedResourceManager",
    "JsonResourceReader",
    "MappingBlobProvider",
    "MoCatalogReader",
    "PackageBlobProvider",
    "ResourceFormatError",
    "ResourceSet",
    "StaleResourceSetError",
    "__version__",
    "normalize_locale_key",
]
