"""Hypothesis strategies for embedres property-based testing.

Usage:
    from tests.strategies import locale_identifiers, resource_tables
"""

from .localization import (
    KNOWN_LOCALES,
    UNKNOWN_LOCALES,
    locale_identifiers,
    locale_switch_sequences,
    resource_names,
    resource_tables,
)

__all__ = [
    "KNOWN_LOCALES",
    "UNKNOWN_LOCALES",
    "locale_identifiers",
    "locale_switch_sequences",
    "resource_names",
    "resource_tables",
]
