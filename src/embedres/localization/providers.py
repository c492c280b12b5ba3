"""Blob tables: where embedded payloads come from.

A blob table is a read-only mapping from blob name to binary payload,
produced at build time and shipped inside the distributable. Python ships
such data as package resources, reachable through importlib.resources
whether the package is installed as a directory, a wheel or a zip archive.

Components:
    BlobProvider - Protocol for blob tables (structural typing)
    MappingBlobProvider - In-memory table (tests, generated modules)
    PackageBlobProvider - Package-data table via importlib.resources

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping
    from importlib.resources.abc import Traversable

    from embedres.localization.types import BlobName

__all__ = [
    "BlobProvider",
    "MappingBlobProvider",
    "PackageBlobProvider",
]


class BlobProvider(Protocol):
    """Protocol for read-only blob tables.

    This is a Protocol (structural typing) rather than ABC so any object
    with matching methods can serve as a table.

    Example:
        >>> class ZipProvider:
        ...     def __init__(self, archive: zipfile.ZipFile) -> None:
        ...         self._archive = archive
        ...     def read_blob(self, name: str) -> bytes:
        ...         try:
        ...             return self._archive.read(name)
        ...         except KeyError:
        ...             raise FileNotFoundError(name) from None
        ...     def blob_names(self) -> tuple[str, ...]:
        ...         return tuple(self._archive.namelist())
    """

    def read_blob(self, name: BlobName) -> bytes:
        """Return the payload stored under name.

        Raises:
            FileNotFoundError: If the table has no blob with this name
            OSError: If the blob exists but cannot be read
            ValueError: If name is not a valid blob name
        """
        ...

    def blob_names(self) -> tuple[BlobName, ...]:
        """Return every blob name in the table (debug listing)."""
        ...


@dataclass(frozen=True, slots=True)
class MappingBlobProvider:
    """Blob table backed by an in-memory mapping.

    The mapping is copied at construction; later changes to the caller's
    dict are not observed.

    Example:
        >>> provider = MappingBlobProvider({"App.de.mo": payload})
        >>> provider.blob_names()
        ('App.de.mo',)
    """

    blobs: Mapping[BlobName, bytes]

    def __post_init__(self) -> None:
        """Freeze a private copy of the table."""
        object.__setattr__(self, "blobs", dict(self.blobs))

    def read_blob(self, name: BlobName) -> bytes:
        """Return the payload stored under name.

        Raises:
            FileNotFoundError: If name is not in the table
        """
        try:
            return bytes(self.blobs[name])
        except KeyError:
            msg = f"No embedded blob named '{name}'"
            raise FileNotFoundError(msg) from None

    def blob_names(self) -> tuple[BlobName, ...]:
        """Return all blob names in sorted order."""
        return tuple(sorted(self.blobs))


@dataclass(frozen=True, slots=True)
class PackageBlobProvider:
    """Blob table backed by package data files.

    Blobs are the regular files directly inside the anchor directory; the
    file name is the blob name. Works for packages installed as plain
    directories, wheels and zip imports alike.

    Security:
        Blob names containing path separators or ".." are rejected, so a
        lookup can never escape the anchor directory.

    Example:
        >>> provider = PackageBlobProvider("myapp.resources")
        >>> provider.read_blob("myapp.MainForm.de.mo")

    Attributes:
        anchor: Package name (resolved with importlib.resources.files) or a
                Traversable / pathlib.Path pointing at the blob directory
    """

    anchor: str | Traversable
    _root: Traversable = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Resolve the anchor once at construction (fail-fast).

        Raises:
            ModuleNotFoundError: If anchor names a package that does not exist
        """
        root = resources.files(self.anchor) if isinstance(self.anchor, str) else self.anchor
        object.__setattr__(self, "_root", root)

    @staticmethod
    def _validate_name(name: BlobName) -> None:
        """Reject names that could address anything outside the anchor.

        Raises:
            ValueError: If name is empty or contains path components
        """
        if not name:
            msg = "Blob name cannot be empty"
            raise ValueError(msg)
        if "/" in name or "\\" in name:
            msg = f"Path separators not allowed in blob name: '{name}'"
            raise ValueError(msg)
        if ".." in name:
            msg = f"Path traversal sequences not allowed in blob name: '{name}'"
            raise ValueError(msg)

    def read_blob(self, name: BlobName) -> bytes:
        """Read one blob from the anchor directory.

        Raises:
            ValueError: If name contains path components
            FileNotFoundError: If no such file exists
            OSError: If the file cannot be read
        """
        self._validate_name(name)
        entry = self._root.joinpath(name)
        if not entry.is_file():
            msg = f"No embedded blob named '{name}'"
            raise FileNotFoundError(msg)
        return entry.read_bytes()

    def blob_names(self) -> tuple[BlobName, ...]:
        """Return the names of all files in the anchor directory, sorted."""
        return tuple(sorted(entry.name for entry in self._root.iterdir() if entry.is_file()))
