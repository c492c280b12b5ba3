"""Resolution cache for embedded localized resources.

EmbeddedResourceManager picks the resource set for a requested (or ambient)
locale, walks the fallback chain when the exact locale has no blob, keeps
the result cached, and swaps the cache safely when the locale changes.

Cache slots:
    active          - set bound to the last resolved canonical key
    default         - memoized set with no locale suffix (loaded at most once)
    pending release - set displaced by the last swap, released on the next one

Key architectural decisions:
- One threading.Lock guards all three slots. A full resolve, including the
  parent-chain walk, runs inside a single acquisition; the walk is an
  iterative loop, so nothing relies on lock reentrancy.
- A displaced active set is not released immediately: readers may still
  hold it. It waits in the pending-release slot until the next swap.
- Lookups happen outside the lock. A reader whose set was released in the
  meantime sees the state change, re-resolves once and retries once.
- Nothing on the accessor path raises for missing names or missing blobs;
  every failure degrades to None.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from embedres.locale_utils import get_system_locale, locale_chain, normalize_locale_key
from embedres.localization.loading import FallbackInfo, ResourceSetLoader

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from embedres.localization.loading import BlobNaming, LoadSummary
    from embedres.localization.providers import BlobProvider
    from embedres.localization.readers import ResourceReader
    from embedres.localization.resource_set import ResourceSet
    from embedres.localization.types import (
        BlobName,
        CanonicalKey,
        LocaleCode,
        LocaleProvider,
        ResourceName,
        ResourceValue,
    )

__all__ = ["EmbeddedResourceManager"]

logger = logging.getLogger(__name__)


def _lookup(
    resource_set: ResourceSet | None, name: ResourceName
) -> tuple[bool, ResourceValue | None]:
    """Look name up without raising.

    Returns:
        (live, value): live is False when there is no set or it was released.
    """
    if resource_set is None:
        return False, None
    entries = resource_set.entries
    if entries is None:
        return False, None
    return True, entries.get(name)


class EmbeddedResourceManager:
    """Thread-safe resolver for localized resources embedded as blobs.

    Example - package data:
        >>> naming = BlobNaming("MainForm", "pdfbinder")
        >>> manager = EmbeddedResourceManager(
        ...     PackageBlobProvider("pdfbinder.resources"), naming
        ... )
        >>> manager.get_string("btnAdd.Text", "de-DE")
        'Hinzufügen'

    Example - ambient locale:
        >>> ambient = AmbientLocale(default="en")
        >>> manager = EmbeddedResourceManager(provider, naming, locale_provider=ambient)
        >>> with ambient.use("ja"):
        ...     manager.get_string("title")

    Fallback chain for one resolve:
        exact canonical key -> canonical keys of the parent locales -> default set
    """

    __slots__ = (
        "_active",
        "_active_key",
        "_default",
        "_default_attempted",
        "_loader",
        "_locale_provider",
        "_lock",
        "_on_fallback",
        "_pending_release",
        "_stats",
    )

    def __init__(
        self,
        provider: BlobProvider,
        naming: BlobNaming,
        *,
        reader: ResourceReader | None = None,
        locale_provider: LocaleProvider | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        secondary_keys: Mapping[CanonicalKey, tuple[CanonicalKey, ...]] | None = None,
    ) -> None:
        """Initialize an empty cache.

        Nothing is loaded until the first resolve.

        Args:
            provider: Blob table holding the embedded payloads
            naming: Candidate blob naming for this resource family
            reader: Payload parser (default: MoCatalogReader)
            locale_provider: Zero-argument callable returning the ambient
                locale, used when an accessor gets no locale
                (default: get_system_locale)
            on_fallback: Optional callback invoked when a locale resolves to
                a parent locale's set or the default set
            secondary_keys: Extra keys the loader tries after a key's own
                candidates fail (default: zh-Hans -> zh-CN)
        """
        self._loader = ResourceSetLoader(
            provider, naming, reader=reader, secondary_keys=secondary_keys
        )
        self._locale_provider: LocaleProvider = (
            locale_provider if locale_provider is not None else get_system_locale
        )
        self._on_fallback = on_fallback
        self._lock = threading.Lock()

        self._active: ResourceSet | None = None
        self._active_key: CanonicalKey | None = None
        self._default: ResourceSet | None = None
        self._default_attempted = False
        self._pending_release: ResourceSet | None = None

        self._stats: dict[str, int] = dict.fromkeys(
            (
                "loads",
                "fast_path_hits",
                "swaps",
                "releases",
                "release_failures",
                "recoveries",
            ),
            0,
        )

    # ------------------------------------------------------------------
    # Resolution cache
    # ------------------------------------------------------------------

    def resolve(
        self, locale: LocaleCode | None, *, try_parents: bool = True
    ) -> ResourceSet | None:
        """Return the live resource set for locale, loading it if needed.

        Runs entirely inside the cache lock. The on_fallback callback, if
        any, is invoked after the lock is released.

        Args:
            locale: Locale identifier, or None for the default set
            try_parents: Walk parent locales before falling back to default

        Returns:
            The installed active set, or None if nothing is loadable,
            not even the default set
        """
        with self._lock:
            resource_set, fallback = self._resolve_locked(locale, try_parents=try_parents)
        if fallback is not None and self._on_fallback is not None:
            self._on_fallback(fallback)
        return resource_set

    def _resolve_locked(
        self, locale: LocaleCode | None, *, try_parents: bool
    ) -> tuple[ResourceSet | None, FallbackInfo | None]:
        """Resolve under the lock. Caller must hold self._lock."""
        key = normalize_locale_key(locale)

        # Fast path: same key, set still live
        active = self._active
        if active is not None and key == self._active_key and active.is_live:
            self._stats["fast_path_hits"] += 1
            return active, None

        found: ResourceSet | None = None
        for candidate_key in self._candidate_keys(locale, try_parents=try_parents):
            found = self._load_or_reuse(candidate_key)
            if found is not None:
                break

        if found is None:
            found = self._default_locked()
        if found is None:
            logger.debug("Nothing loadable for locale %r, not even the default set", locale)
            return None, None

        self._install(found, key)

        fallback = None
        if key is not None and found.source_key != key:
            fallback = FallbackInfo(
                requested_locale=locale,
                requested_key=key,
                resolved_key=found.source_key,
                blob_name=found.blob_name,
            )
        return found, fallback

    @staticmethod
    def _candidate_keys(
        locale: LocaleCode | None, *, try_parents: bool
    ) -> tuple[CanonicalKey, ...]:
        """Canonical keys to try in order, duplicates and "no locale" removed."""
        chain = locale_chain(locale) if try_parents else (locale,)
        keys = (normalize_locale_key(identifier) for identifier in chain)
        return tuple(dict.fromkeys(key for key in keys if key is not None))

    def _load_or_reuse(self, key: CanonicalKey) -> ResourceSet | None:
        """Reuse the active set if it was loaded for key, else load. Lock held."""
        active = self._active
        if active is not None and active.source_key == key and active.is_live:
            return active
        self._stats["loads"] += 1
        return self._loader.load(key)

    def _default_locked(self) -> ResourceSet | None:
        """Return the memoized default set, loading it on first need. Lock held.

        A default set that was released is never handed out again: the slot
        is cleared and loaded afresh.
        """
        default = self._default
        if default is not None and not default.is_live:
            logger.debug("Default resource set was released; reloading")
            self._default = None
            self._default_attempted = False

        if not self._default_attempted:
            self._default_attempted = True
            self._stats["loads"] += 1
            default = self._loader.load(None)
            if default is not None:
                default.promote()
                logger.info("Memoized default resource set from %s", default.blob_name)
            else:
                logger.info("No default resource set available")
            self._default = default

        return self._default

    def _install(self, found: ResourceSet, key: CanonicalKey | None) -> None:
        """Make found the active set for key. Lock held.

        The outgoing active set moves to pending release only now that its
        replacement is in hand; the previous pending set is released first.
        The default set is never demoted.
        """
        outgoing = self._active
        if outgoing is not None and outgoing is not found:
            if outgoing is not self._default and outgoing.is_live:
                pending = self._pending_release
                self._pending_release = None
                if pending is not None:
                    self._release_quietly(pending)
                outgoing.supersede()
                self._pending_release = outgoing
            self._stats["swaps"] += 1
            logger.debug(
                "Swapped active resource set %s -> %s",
                outgoing.blob_name,
                found.blob_name,
            )

        found.promote()
        self._active = found
        self._active_key = key

    def _release_quietly(self, resource_set: ResourceSet) -> None:
        """Release a set; failures are logged and swallowed. Lock held."""
        try:
            resource_set.release()
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Never aborts the resolve or teardown in progress
            self._stats["release_failures"] += 1
            logger.warning("Failed to release resource set %s: %s", resource_set.blob_name, e)
        else:
            self._stats["releases"] += 1

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _current_locale(self) -> LocaleCode | None:
        """Ask the locale provider; a failing provider means "no locale"."""
        try:
            return self._locale_provider()
        except (LookupError, OSError, RuntimeError, ValueError) as e:
            logger.warning("Locale provider failed, using default resources: %s", e)
            return None

    def _get_value(
        self, name: ResourceName, locale: LocaleCode | None
    ) -> ResourceValue | None:
        """Resolve, look up, recover once from a stale set, then try default."""
        resource_set = self.resolve(locale)
        if resource_set is not None:
            live, value = _lookup(resource_set, name)
            if not live:
                # Released between resolve and lookup: re-resolve and retry once
                with self._lock:
                    self._stats["recoveries"] += 1
                resource_set = self.resolve(locale)
                live, value = _lookup(resource_set, name)
            if live and value is not None:
                return value

        return self._get_default_value(name)

    def _get_default_value(self, name: ResourceName) -> ResourceValue | None:
        """Look name up in the default set with one-shot stale recovery."""
        with self._lock:
            default = self._default_locked()
        live, value = _lookup(default, name)
        if default is not None and not live:
            with self._lock:
                self._stats["recoveries"] += 1
                default = self._default_locked()
            live, value = _lookup(default, name)
        return value if live else None

    def get_object(
        self, name: ResourceName, locale: LocaleCode | None = None
    ) -> ResourceValue | None:
        """Return the value for name in locale (text, bytes or plural forms).

        Args:
            name: Resource name
            locale: Locale identifier; None asks the locale provider

        Returns:
            The value, or None if no set in the fallback chain has it
        """
        if locale is None:
            locale = self._current_locale()
        return self._get_value(name, locale)

    def get_string(self, name: ResourceName, locale: LocaleCode | None = None) -> str | None:
        """Return the text for name in locale.

        Args:
            name: Resource name
            locale: Locale identifier; None asks the locale provider

        Returns:
            The text, or None if absent. Non-text values (bytes, plural
            forms) also yield None.
        """
        value = self.get_object(name, locale)
        if value is None or isinstance(value, str):
            return value
        logger.warning(
            "Resource '%s' is %s, not text; use get_object()", name, type(value).__name__
        )
        return None

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def release_all(self) -> None:
        """Release every cached set and empty all slots.

        Safe to call any number of times. The next resolve reloads from
        scratch, exactly like a freshly constructed manager.
        """
        with self._lock:
            released = {
                id(resource_set): resource_set
                for resource_set in (self._active, self._default, self._pending_release)
                if resource_set is not None
            }
            self._active = None
            self._active_key = None
            self._default = None
            self._default_attempted = False
            self._pending_release = None
            for resource_set in released.values():
                self._release_quietly(resource_set)
        if released:
            logger.info("Released %d cached resource set(s)", len(released))

    def __enter__(self) -> EmbeddedResourceManager:
        """Enter context manager.

        Returns:
            Self
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Release all cached sets on exit. Does not suppress exceptions."""
        self.release_all()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def active_locale_key(self) -> CanonicalKey | None:
        """Canonical key of the last successful resolve (None if none)."""
        with self._lock:
            return self._active_key

    @property
    def current_resource_set(self) -> ResourceSet | None:
        """The active set, for debugging."""
        with self._lock:
            return self._active

    @property
    def loader(self) -> ResourceSetLoader:
        """The underlying loader."""
        return self._loader

    def list_blob_names(self) -> tuple[BlobName, ...]:
        """Debug listing of every blob name in the table."""
        return self._loader.blob_names()

    def diagnose_locale(self, locale: LocaleCode | None) -> LoadSummary:
        """Report every candidate blob tried for locale's canonical key.

        Does not touch the cache.
        """
        return self._loader.diagnose(normalize_locale_key(locale))

    def get_cache_stats(self) -> dict[str, int | bool | str | None]:
        """Get cache counters and slot occupancy.

        Keys:
            - loads (int): Loader invocations (cache misses)
            - fast_path_hits (int): Resolves served without touching the loader
            - swaps (int): Active-set replacements
            - releases (int): Sets released (swaps and teardown)
            - release_failures (int): Releases that raised (swallowed)
            - recoveries (int): Stale-handle re-resolves on the accessor path
            - active_key (str | None): Canonical key of the active set
            - has_active / has_default / has_pending (bool): Slot occupancy

        Thread-safe point-in-time snapshot.
        """
        with self._lock:
            stats: dict[str, int | bool | str | None] = dict(self._stats)
            stats["active_key"] = self._active_key
            stats["has_active"] = self._active is not None
            stats["has_default"] = self._default is not None
            stats["has_pending"] = self._pending_release is not None
            return stats

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"EmbeddedResourceManager(naming={self._loader.naming!r}, "
            f"active_key={self._active_key!r})"
        )
