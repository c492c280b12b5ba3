"""Resource set loading: candidate blob names, open/parse, load tracking.

Given a canonical key (or None for the default set), the loader generates
the candidate blob names, tries each in order and returns the first set
that opens and parses. Every miss is silent and non-fatal.

Components:
    BlobNaming - Immutable naming configuration for one resource family
    ResourceSetLoader - Candidate walk over a BlobProvider + ResourceReader
    ResourceLoadResult - Immutable result of a single candidate attempt
    LoadSummary - Immutable aggregate of candidate attempts (diagnostics)
    FallbackInfo - Immutable record of a locale fallback event

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from embedres.constants import DEFAULT_BLOB_SUFFIX
from embedres.enums import LoadStatus
from embedres.locale_utils import SECONDARY_LOCALE_KEYS
from embedres.localization.readers import MoCatalogReader
from embedres.localization.resource_set import ResourceSet

if TYPE_CHECKING:
    from collections.abc import Mapping

    from embedres.localization.providers import BlobProvider
    from embedres.localization.readers import ResourceReader
    from embedres.localization.types import BlobName, CanonicalKey, LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Configuration
    "BlobNaming",
    # Loader
    "ResourceSetLoader",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
    # Fallback observability
    "FallbackInfo",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BlobNaming:
    """Naming conventions for the blobs of one resource family.

    Different packaging pipelines name the same logical blob differently.
    For canonical key ``K`` the loader tries, in order:

    1. short logical form:  ``{logical_name}.{K}{suffix}``
    2. fully qualified form: ``{qualified_name}.{K}{suffix}``
    3. namespaced form:     ``{namespace}.{base_name}.{K}{suffix}``

    For the default set the ``.{K}`` segment is omitted. Names that
    coincide are tried once.

    Example:
        >>> naming = BlobNaming("MainForm", "pdfbinder.ui", logical_name="PDFBinder.MainForm")
        >>> naming.candidate_names("de")
        ('PDFBinder.MainForm.de.mo', 'pdfbinder.ui.MainForm.de.mo')

    Attributes:
        base_name: Resource family name (e.g. "MainForm")
        namespace: Dotted namespace the family lives in (e.g. "pdfbinder.ui")
        logical_name: Prefix of the short logical form (default: base_name)
        qualified_name: Prefix of the fully qualified form
            (default: "{namespace}.{base_name}")
        suffix: Blob name suffix including the dot (default: ".mo")
    """

    base_name: str
    namespace: str
    logical_name: str | None = None
    qualified_name: str | None = None
    suffix: str = DEFAULT_BLOB_SUFFIX

    def __post_init__(self) -> None:
        """Validate naming components at construction time.

        Raises:
            ValueError: If a name component is empty or contains whitespace,
                or suffix does not start with "."
        """
        for label, value in (
            ("base_name", self.base_name),
            ("namespace", self.namespace),
            ("logical_name", self.logical_name),
            ("qualified_name", self.qualified_name),
        ):
            if value is None:
                continue
            if not value or value != value.strip() or any(ch.isspace() for ch in value):
                msg = f"{label} must be a non-empty name without whitespace, got {value!r}"
                raise ValueError(msg)
        if self.suffix and not self.suffix.startswith("."):
            msg = f"suffix must start with '.', got {self.suffix!r}"
            raise ValueError(msg)

    def candidate_names(self, key: CanonicalKey | None) -> tuple[BlobName, ...]:
        """Return the ordered, de-duplicated candidate blob names for key."""
        segment = f".{key}" if key else ""
        logical = self.logical_name or self.base_name
        qualified = self.qualified_name or f"{self.namespace}.{self.base_name}"
        names = (
            f"{logical}{segment}{self.suffix}",
            f"{qualified}{segment}{self.suffix}",
            f"{self.namespace}.{self.base_name}{segment}{self.suffix}",
        )
        # dict.fromkeys() removes duplicates while maintaining insertion order
        return tuple(dict.fromkeys(names))


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of trying one candidate blob.

    Attributes:
        key: Canonical key being loaded (None = default set)
        blob_name: Candidate blob name that was tried
        status: Load status (success, not_found, error)
        error: Exception if status is ERROR, None otherwise
        entry_count: Number of parsed entries if status is SUCCESS
    """

    key: CanonicalKey | None
    blob_name: BlobName
    status: LoadStatus
    error: Exception | None = None
    entry_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if the blob opened and parsed."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the blob is absent from the table."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the blob exists but failed to read or parse."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of candidate attempts for one key.

    Produced by ResourceSetLoader.diagnose(), which tries every candidate
    instead of stopping at the first success. The first successful result
    is the blob load() would pick.

    Example:
        >>> summary = loader.diagnose("zh-Hans")
        >>> summary.selected_blob
        'App.zh-CN.mo'
        >>> [r.blob_name for r in summary.get_not_found()]
        ['App.zh-Hans.mo', 'myapp.App.zh-Hans.mo', 'myapp.App.zh-CN.mo']
    """

    key: CanonicalKey | None
    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(key={self.key!r}, total={self.total_attempted}, "
            f"ok={self.successful}, not_found={self.not_found}, errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of candidates tried."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of candidates that opened and parsed."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of candidates absent from the table."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of candidates that failed to read or parse."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def has_errors(self) -> bool:
        """Check if any candidate failed with an error."""
        return self.errors > 0

    @property
    def selected_blob(self) -> BlobName | None:
        """Blob load() would select, or None if nothing loads."""
        for result in self.results:
            if result.is_success:
                return result.blob_name
        return None

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the blob was absent."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[ResourceLoadResult, ...]:
        """Get all successful results."""
        return tuple(r for r in self.results if r.is_success)


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the on_fallback callback when EmbeddedResourceManager
    resolves a locale with a parent locale's set or the default set.

    Attributes:
        requested_locale: Locale identifier the caller asked for
        requested_key: Its canonical key
        resolved_key: Canonical key of the set actually used (None = default set)
        blob_name: Blob the used set was parsed from

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.requested_locale}: using {info.blob_name}")
        >>> manager = EmbeddedResourceManager(provider, naming, on_fallback=log_fallback)
    """

    requested_locale: LocaleCode | None
    requested_key: CanonicalKey | None
    resolved_key: CanonicalKey | None
    blob_name: BlobName


class ResourceSetLoader:
    """Opens and parses the blob for a canonical key.

    Candidate order: every candidate name of the key, then every candidate
    name of each secondary key (SECONDARY_LOCALE_KEYS, e.g. zh-Hans ->
    zh-CN). The first blob that opens and parses wins. A missing blob or
    any exception from the provider or reader is logged at debug level
    and the candidate is skipped; load() itself never raises.

    Stateless apart from its collaborators; safe to call from any thread.
    """

    __slots__ = ("_naming", "_provider", "_reader", "_secondary_keys")

    def __init__(
        self,
        provider: BlobProvider,
        naming: BlobNaming,
        *,
        reader: ResourceReader | None = None,
        secondary_keys: Mapping[CanonicalKey, tuple[CanonicalKey, ...]] | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            provider: Blob table to read payloads from
            naming: Candidate naming configuration
            reader: Payload parser (default: MoCatalogReader)
            secondary_keys: Extra keys to try per key after all primary
                candidates fail (default: SECONDARY_LOCALE_KEYS)
        """
        self._provider = provider
        self._naming = naming
        self._reader: ResourceReader = reader if reader is not None else MoCatalogReader()
        self._secondary_keys = (
            secondary_keys if secondary_keys is not None else SECONDARY_LOCALE_KEYS
        )

    @property
    def naming(self) -> BlobNaming:
        """Candidate naming configuration."""
        return self._naming

    def _pass_keys(self, key: CanonicalKey | None) -> tuple[CanonicalKey | None, ...]:
        if not key:
            return (None,)
        return (key, *self._secondary_keys.get(key, ()))

    def candidate_names(self, key: CanonicalKey | None) -> tuple[BlobName, ...]:
        """Return every blob name load(key) may try, in order."""
        names: list[BlobName] = []
        for pass_key in self._pass_keys(key):
            names.extend(self._naming.candidate_names(pass_key))
        return tuple(dict.fromkeys(names))

    def blob_names(self) -> tuple[BlobName, ...]:
        """Debug listing of every blob in the underlying table."""
        return self._provider.blob_names()

    def _try_open(
        self, key: CanonicalKey | None, blob_name: BlobName
    ) -> tuple[ResourceLoadResult, ResourceSet | None]:
        """Try one candidate and record the outcome."""
        try:
            payload = self._provider.read_blob(blob_name)
            resource_set = ResourceSet(key, blob_name, self._reader.read(payload, blob_name))
        except FileNotFoundError:
            return ResourceLoadResult(key, blob_name, LoadStatus.NOT_FOUND), None
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Any provider or reader failure only disqualifies this candidate
            logger.debug("Skipping unreadable blob %s: %r", blob_name, e)
            return ResourceLoadResult(key, blob_name, LoadStatus.ERROR, error=e), None

        result = ResourceLoadResult(
            key, blob_name, LoadStatus.SUCCESS, entry_count=len(resource_set)
        )
        return result, resource_set

    def load(self, key: CanonicalKey | None) -> ResourceSet | None:
        """Load the resource set for key.

        Args:
            key: Canonical key, or None for the default set

        Returns:
            New LOADED ResourceSet, or None if no candidate opens
        """
        for blob_name in self.candidate_names(key):
            _result, resource_set = self._try_open(key, blob_name)
            if resource_set is not None:
                logger.debug("Loaded %s for key %r", blob_name, key)
                return resource_set
        logger.debug("No loadable blob for key %r", key)
        return None

    def diagnose(self, key: CanonicalKey | None) -> LoadSummary:
        """Try every candidate for key and report each outcome.

        Sets parsed along the way are released immediately; nothing is
        cached.
        """
        results: list[ResourceLoadResult] = []
        for blob_name in self.candidate_names(key):
            result, resource_set = self._try_open(key, blob_name)
            if resource_set is not None:
                resource_set.release()
            results.append(result)
        return LoadSummary(key=key, results=tuple(results))
