"""Shared constants for embedres.

Centralized configuration constants used by the loader, the resolution
cache and the locale utilities. Placing constants here avoids circular
imports and provides a single source of truth.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Blob naming
    "DEFAULT_BLOB_SUFFIX",
    "JSON_BLOB_SUFFIX",
    # Locale handling
    "DEFAULT_LOCALE_FALLBACK",
    "MAX_LOCALE_CACHE_SIZE",
    "MAX_PARENT_CHAIN_DEPTH",
    "ROOT_LOCALE",
    # Payload limits
    "MAX_BLOB_SIZE",
]

# ============================================================================
# BLOB NAMING
# ============================================================================

# Compiled gettext catalogs are the default embedded payload.
DEFAULT_BLOB_SUFFIX: str = ".mo"

JSON_BLOB_SUFFIX: str = ".json"

# ============================================================================
# LOCALE HANDLING
# ============================================================================

# Returned by get_system_locale() when neither the OS nor the environment
# names a usable locale.
DEFAULT_LOCALE_FALLBACK: str = "en_US"

# CLDR name of the invariant locale. A parent of "root" means "no parent".
ROOT_LOCALE: str = "root"

# Upper bound on parent-chain length. Real chains are at most four entries
# (language_Script_TERRITORY_variant); the bound guards against cyclic
# parent data.
MAX_PARENT_CHAIN_DEPTH: int = 8

# Maximum memoized parent-locale computations (lru_cache bound).
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# PAYLOAD LIMITS
# ============================================================================

# Largest blob a reader accepts (16 MiB). Embedded catalogs are far smaller;
# anything bigger is a packaging error.
MAX_BLOB_SIZE: int = 16 * 1024 * 1024
