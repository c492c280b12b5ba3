"""Locale utilities: canonical blob keys, parent chains, system locale.

Centralizes locale handling used by the loader and the resolution cache.
Three concerns live here:

- normalize_locale_key: map an arbitrary identifier onto the canonical key
  used to name embedded blobs (fixed, case-insensitive table).
- parent_locale / locale_chain: CLDR parent computation via Babel, used to
  walk the fallback chain (exact -> parent -> ... -> default).
- get_system_locale: OS/environment detection for the ambient locale.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from embedres.constants import (
    DEFAULT_LOCALE_FALLBACK,
    MAX_LOCALE_CACHE_SIZE,
    MAX_PARENT_CHAIN_DEPTH,
    ROOT_LOCALE,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from embedres.localization.types import CanonicalKey, LocaleCode

__all__ = [
    "CANONICAL_LOCALE_KEYS",
    "SECONDARY_LOCALE_KEYS",
    "SIMPLIFIED_CHINESE_KEY",
    "clear_locale_cache",
    "get_system_locale",
    "locale_chain",
    "normalize_locale",
    "normalize_locale_key",
    "parent_locale",
]

SIMPLIFIED_CHINESE_KEY: CanonicalKey = "zh-Hans"
"""Canonical key of the simplified-script Chinese bucket."""

# Keys are lowercase with hyphen separators; lookups fold case and "_".
# These values must match the key segment of the packaged blob names.
CANONICAL_LOCALE_KEYS: Mapping[str, CanonicalKey] = {
    "en": "en",
    "en-us": "en",
    "de": "de",
    "de-de": "de",
    "ja": "ja",
    "ja-jp": "ja",
    "fr": "fr",
    "fr-fr": "fr",
    "zh-cn": "zh-CN",
    "zh-hans": SIMPLIFIED_CHINESE_KEY,
    "zh": "zh",
    "zh-tw": "zh",
    "zh-hant": "zh",
}

# Keys whose blobs are commonly packaged under a different name. The loader
# retries with these after every candidate of the primary key has failed.
SECONDARY_LOCALE_KEYS: Mapping[CanonicalKey, tuple[CanonicalKey, ...]] = {
    SIMPLIFIED_CHINESE_KEY: ("zh-CN",),
}


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("zh-Hans-CN")
        'zh_Hans_CN'
    """
    return locale_code.replace("-", "_")


def normalize_locale_key(identifier: LocaleCode | None) -> CanonicalKey | None:
    """Map a locale identifier onto the canonical key used for blob lookup.

    Matching is case-insensitive and treats "-" and "_" alike, so "EN_us",
    "en-US" and "en-us" all map to "en". Identifiers missing from
    CANONICAL_LOCALE_KEYS are returned unchanged (minus surrounding
    whitespace); they simply fail to load and fall through to the default.

    Args:
        identifier: Any locale identifier, or None

    Returns:
        Canonical key, or None for "no locale" (None, empty or blank input)

    Example:
        >>> normalize_locale_key("zh-hans")
        'zh-Hans'
        >>> normalize_locale_key("pt-BR")
        'pt-BR'
        >>> normalize_locale_key("") is None
        True
    """
    if identifier is None:
        return None
    stripped = identifier.strip()
    if not stripped:
        return None
    return CANONICAL_LOCALE_KEYS.get(stripped.lower().replace("_", "-"), stripped)


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def parent_locale(identifier: LocaleCode | None) -> LocaleCode | None:
    """Return the CLDR parent of a locale identifier.

    Drops the most specific subtag (variant, then territory, then script).
    CLDR parent exceptions (e.g. es_AR -> es_419) take precedence. A bare
    language, the root locale and unparseable identifiers have no parent.
    The separator style of the input ("-" or "_") is preserved.

    Thread-safe via lru_cache internal locking.

    Args:
        identifier: Locale identifier (BCP-47 or POSIX)

    Returns:
        Parent identifier, or None when the parent is the invariant locale

    Example:
        >>> parent_locale("de-AT")
        'de'
        >>> parent_locale("zh_Hant_TW")
        'zh_Hant'
        >>> parent_locale("en") is None
        True
    """
    if identifier is None or not identifier.strip():
        return None

    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel.core import get_global, get_locale_identifier, parse_locale  # noqa: PLC0415

    code = identifier.strip()
    sep = "-" if "-" in code else "_"
    posix = normalize_locale(code)

    exception = get_global("parent_exceptions").get(posix)
    if exception is not None:
        return None if exception == ROOT_LOCALE else exception.replace("_", sep)

    try:
        language, territory, script, variant = parse_locale(posix)[:4]
    except ValueError:
        return None

    if variant:
        parts = (language, territory, script, None)
    elif territory:
        parts = (language, None, script, None)
    elif script:
        parts = (language, None, None, None)
    else:
        return None
    return get_locale_identifier(parts, sep=sep)


def locale_chain(identifier: LocaleCode | None) -> tuple[LocaleCode, ...]:
    """Return the identifier followed by its parents, most specific first.

    The invariant locale is never included. Chains stop on repetition and
    at MAX_PARENT_CHAIN_DEPTH entries.

    Example:
        >>> locale_chain("zh-Hans-CN")
        ('zh-Hans-CN', 'zh-Hans', 'zh')
        >>> locale_chain(None)
        ()
    """
    if identifier is None or not identifier.strip():
        return ()

    chain = [identifier.strip()]
    while len(chain) < MAX_PARENT_CHAIN_DEPTH:
        parent = parent_locale(chain[-1])
        if parent is None or parent in chain:
            break
        chain.append(parent)
    return tuple(chain)


def clear_locale_cache() -> None:
    """Clear memoized parent-locale computations."""
    parent_locale.cache_clear()


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales and strips encoding suffixes.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return DEFAULT_LOCALE_FALLBACK.

    Returns:
        Detected locale code in POSIX format (e.g. "de_DE").

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return normalize_locale(system_locale.split(".")[0])
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX", ""):
            return normalize_locale(value.split(".")[0])

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE_FALLBACK
