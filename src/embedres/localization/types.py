"""Type aliases for the embedded-resource domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable

__all__ = [
    "BlobName",
    "CanonicalKey",
    "LocaleCode",
    "LocaleProvider",
    "ResourceName",
    "ResourceValue",
]

type LocaleCode = str
"""Locale identifier as supplied by callers (e.g., 'de-DE', 'zh_Hans', 'fr')."""

type CanonicalKey = str
"""Normalized key naming a locale bucket in the blob table (e.g., 'de', 'zh-CN')."""

type BlobName = str
"""Name of one embedded payload (e.g., 'PDFBinder.MainForm.de.mo')."""

type ResourceName = str
"""Name of one entry inside a resource set (e.g., 'btnAdd.Text')."""

type ResourceValue = str | bytes | tuple[str, ...]
"""Entry value: text, binary data, or the forms of a plural message."""

type LocaleProvider = Callable[[], LocaleCode | None]
"""Zero-argument callable returning the ambient locale (None = default bucket)."""
