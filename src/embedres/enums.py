"""Enumerations for embedres type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class LoadStatus(StrEnum):
    """Outcome of one attempt to open and parse a candidate blob.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Blob found and parsed."""

    NOT_FOUND = "not_found"
    """No blob with this name in the table (expected for most candidates)."""

    ERROR = "error"
    """Blob present but unreadable or unparseable."""


class ResourceSetState(StrEnum):
    """Lifecycle state of a ResourceSet handle.

    Transitions are forward-only:

        LOADED -> ACTIVE -> SUPERSEDED -> RELEASED

    Any state may jump straight to RELEASED (teardown). A RELEASED handle
    is never promoted again; stale references must trigger a fresh load.
    """

    LOADED = "loaded"
    """Parsed by the loader, not yet installed in the cache."""

    ACTIVE = "active"
    """Installed as the active or the memoized default set."""

    SUPERSEDED = "superseded"
    """Displaced by a newer active set; waiting in the pending-release slot."""

    RELEASED = "released"
    """Mapping dropped. Every lookup against this handle is invalid."""


__all__ = [
    "LoadStatus",
    "ResourceSetState",
]
