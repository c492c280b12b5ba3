"""ResourceSet: a parsed blob with an explicit lifecycle state.

A ResourceSet wraps the name -> value mapping parsed from exactly one blob.
Its state tag (ResourceSetState) makes staleness a cheap check instead of
an error-handling path: once released, the mapping is gone and every
lookup is invalid.

Thread Safety:
    State transitions are driven by EmbeddedResourceManager under its lock.
    Readers outside that lock go through the ``entries`` property, which
    reads one attribute: a reader sees either the live mapping or None,
    never a half-released set.

Python 3.13+.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from embedres.enums import ResourceSetState
from embedres.errors import StaleResourceSetError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from embedres.localization.types import (
        BlobName,
        CanonicalKey,
        ResourceName,
        ResourceValue,
    )

__all__ = ["ResourceSet"]


class ResourceSet:
    """Parsed resource mapping loaded from one embedded blob.

    Lifecycle (forward-only):
        LOADED -> ACTIVE -> SUPERSEDED -> RELEASED

    ``release()`` is allowed from any state. Promoting a superseded or
    released set raises RuntimeError: a handle that left the cache must
    never come back.

    Example:
        >>> rs = ResourceSet("de", "App.de.mo", {"greeting": "Hallo"})
        >>> rs.get_string("greeting")
        'Hallo'
        >>> rs.release()
        >>> rs.is_live
        False
    """

    __slots__ = ("_blob_name", "_entries", "_source_key", "_state")

    def __init__(
        self,
        source_key: CanonicalKey | None,
        blob_name: BlobName,
        entries: Mapping[ResourceName, ResourceValue],
    ) -> None:
        """Initialize a LOADED resource set.

        Args:
            source_key: Canonical key the blob was loaded for (None = default set)
            blob_name: Name of the blob the entries came from
            entries: Parsed name -> value mapping (copied)
        """
        self._source_key = source_key
        self._blob_name = blob_name
        self._entries: Mapping[ResourceName, ResourceValue] | None = MappingProxyType(
            dict(entries)
        )
        self._state = ResourceSetState.LOADED

    @property
    def source_key(self) -> CanonicalKey | None:
        """Canonical key this set was loaded for (None for the default set)."""
        return self._source_key

    @property
    def blob_name(self) -> BlobName:
        """Name of the blob this set was parsed from."""
        return self._blob_name

    @property
    def state(self) -> ResourceSetState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_live(self) -> bool:
        """Liveness probe: True until the set is released."""
        return self._entries is not None

    @property
    def entries(self) -> Mapping[ResourceName, ResourceValue] | None:
        """Read-only view of the entries, or None once released."""
        return self._entries

    def _require_entries(self) -> Mapping[ResourceName, ResourceValue]:
        entries = self._entries
        if entries is None:
            msg = f"Resource set '{self._blob_name}' has been released"
            raise StaleResourceSetError(msg, source_key=self._source_key)
        return entries

    def get_object(self, name: ResourceName) -> ResourceValue | None:
        """Return the value stored under name, or None if absent.

        Raises:
            StaleResourceSetError: If the set has been released
        """
        return self._require_entries().get(name)

    def get_string(self, name: ResourceName) -> str | None:
        """Return the text stored under name, or None if absent or not text.

        Raises:
            StaleResourceSetError: If the set has been released
        """
        value = self._require_entries().get(name)
        return value if isinstance(value, str) else None

    def names(self) -> tuple[ResourceName, ...]:
        """Return all entry names.

        Raises:
            StaleResourceSetError: If the set has been released
        """
        return tuple(self._require_entries())

    def promote(self) -> None:
        """Mark the set ACTIVE (installed as the active or default set).

        Idempotent for ACTIVE sets.

        Raises:
            RuntimeError: If the set is SUPERSEDED or RELEASED
        """
        match self._state:
            case ResourceSetState.LOADED | ResourceSetState.ACTIVE:
                self._state = ResourceSetState.ACTIVE
            case _:
                msg = (
                    f"Cannot promote resource set '{self._blob_name}' "
                    f"from state {self._state}"
                )
                raise RuntimeError(msg)

    def supersede(self) -> None:
        """Mark the set SUPERSEDED (moved to the pending-release slot).

        Raises:
            RuntimeError: If the set is already RELEASED
        """
        if self._state is ResourceSetState.RELEASED:
            msg = f"Cannot supersede released resource set '{self._blob_name}'"
            raise RuntimeError(msg)
        self._state = ResourceSetState.SUPERSEDED

    def release(self) -> None:
        """Drop the entries and mark the set RELEASED. Idempotent."""
        self._entries = None
        self._state = ResourceSetState.RELEASED

    def __len__(self) -> int:
        """Number of entries (0 once released)."""
        entries = self._entries
        return len(entries) if entries is not None else 0

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"ResourceSet(source_key={self._source_key!r}, "
            f"blob={self._blob_name!r}, state={self._state}, entries={len(self)})"
        )
