"""Ambient locale provider backed by a context variable.

The resolution cache never reads a hidden global to learn the current
locale; it calls an injected zero-argument provider. AmbientLocale is the
stock provider: each thread (and each asyncio task) sees its own value,
falling back to a fixed default and then to the system locale.

Python 3.13+.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from embedres.locale_utils import get_system_locale

if TYPE_CHECKING:
    from collections.abc import Generator
    from contextvars import Token

    from embedres.localization.types import LocaleCode

__all__ = ["AmbientLocale"]

logger = logging.getLogger(__name__)


class AmbientLocale:
    """Context-local "current UI locale".

    Resolution order for ``current()`` (also ``__call__``):
    1. Value set in the current context via ``set()`` / ``use()``
    2. ``default`` given at construction
    3. ``get_system_locale()``

    Example:
        >>> ambient = AmbientLocale(default="en")
        >>> ambient()
        'en'
        >>> with ambient.use("de-DE"):
        ...     ambient()
        'de-DE'
        >>> manager = EmbeddedResourceManager(provider, naming, locale_provider=ambient)
    """

    __slots__ = ("_default", "_var")

    def __init__(self, default: LocaleCode | None = None) -> None:
        """Initialize the provider.

        Args:
            default: Locale used when the context holds no value. None
                defers to the system locale.
        """
        self._default = default
        self._var: ContextVar[LocaleCode | None] = ContextVar(
            f"embedres_ambient_locale_{id(self):x}", default=None
        )

    def current(self) -> LocaleCode:
        """Return the locale in effect for the calling context."""
        value = self._var.get()
        if value is not None:
            return value
        if self._default is not None:
            return self._default
        return get_system_locale()

    __call__ = current

    def set(self, locale: LocaleCode | None) -> Token[LocaleCode | None]:
        """Set the locale for the calling context.

        Returns:
            Token for ``reset()``
        """
        logger.debug("Ambient locale set to %r", locale)
        return self._var.set(locale)

    def reset(self, token: Token[LocaleCode | None]) -> None:
        """Restore the value that was in effect before ``set()``."""
        self._var.reset(token)

    @contextmanager
    def use(self, locale: LocaleCode | None) -> Generator[None]:
        """Temporarily set the locale for the calling context.

        Example:
            >>> with ambient.use("ja"):
            ...     manager.get_string("title")
        """
        token = self.set(locale)
        try:
            yield
        finally:
            self.reset(token)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"AmbientLocale(current={self._var.get()!r}, default={self._default!r})"
