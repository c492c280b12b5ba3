"""Runtime collaborators for the resolution cache.

Exports:
    AmbientLocale: Context-local current-locale provider

Python 3.13+.
"""

from .locale_context import AmbientLocale

__all__ = ["AmbientLocale"]
