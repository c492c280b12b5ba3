"""Exception hierarchy for embedded resource handling.

None of these exceptions reach callers of the manager accessors: the
resolution path degrades every failure to an absent value. They surface
from the lower layers (readers, direct ResourceSet use) and are caught
and recorded by the loader.

Hierarchy:
    EmbeddedResourceError (base)
    ├─ ResourceFormatError (payload could not be parsed; also a ValueError)
    └─ StaleResourceSetError (lookup against a released set)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = [
    "EmbeddedResourceError",
    "ResourceFormatError",
    "StaleResourceSetError",
]


class EmbeddedResourceError(Exception):
    """Base exception for all embedres errors."""


class ResourceFormatError(EmbeddedResourceError, ValueError):
    """Blob payload could not be parsed into a name -> value mapping.

    Subclasses ValueError so loaders that catch ``(OSError, ValueError)``
    treat it like any other malformed input.

    Attributes:
        blob_name: Name of the blob that failed to parse (empty if unknown)
    """

    def __init__(self, message: str, *, blob_name: str = "") -> None:
        """Initialize ResourceFormatError.

        Args:
            message: Human-readable description of the failure
            blob_name: Name of the offending blob
        """
        super().__init__(message)
        self.blob_name = blob_name


class StaleResourceSetError(EmbeddedResourceError):
    """Lookup attempted against a ResourceSet that has been released.

    Raised only by the public ResourceSet.get_string/get_object methods.
    EmbeddedResourceManager detects staleness with a state check and
    never lets this exception escape.

    Attributes:
        source_key: Canonical key the set was loaded for (None = default)
    """

    def __init__(self, message: str, *, source_key: str | None = None) -> None:
        """Initialize StaleResourceSetError.

        Args:
            message: Human-readable description
            source_key: Canonical key of the released set
        """
        super().__init__(message)
        self.source_key = source_key
