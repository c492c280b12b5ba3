"""Payload readers: turn one blob into a name -> value mapping.

The blob layout is opaque to the resolution cache; a reader is the only
component that knows it. Two formats are supported out of the box:

- MoCatalogReader: compiled GNU gettext catalogs (.mo), parsed with Babel.
  This is the default, since gettext tooling is what most Python build
  pipelines already produce.
- JsonResourceReader: UTF-8 JSON objects, for payloads that need binary
  values (icons, images) next to text.

Both raise ResourceFormatError for payloads they cannot parse; the loader
treats that as a failed candidate and moves on.

Python 3.13+.
"""

from __future__ import annotations

import base64
import binascii
import io
import json
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from embedres.constants import MAX_BLOB_SIZE
from embedres.errors import ResourceFormatError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from babel.messages.catalog import Catalog

    from embedres.localization.types import BlobName, ResourceName, ResourceValue

__all__ = [
    "JsonResourceReader",
    "MoCatalogReader",
    "ResourceReader",
]


class ResourceReader(Protocol):
    """Protocol for payload parsers."""

    def read(self, payload: bytes, blob_name: BlobName = "") -> Mapping[ResourceName, ResourceValue]:
        """Parse payload into a name -> value mapping.

        Args:
            payload: Raw blob bytes
            blob_name: Blob name, used in error messages only

        Raises:
            ResourceFormatError: If payload is not in the expected format
        """
        ...


def _check_size(payload: bytes, blob_name: BlobName) -> None:
    if len(payload) > MAX_BLOB_SIZE:
        msg = (
            f"Blob '{blob_name}' is {len(payload)} bytes, "
            f"exceeding the {MAX_BLOB_SIZE}-byte limit"
        )
        raise ResourceFormatError(msg, blob_name=blob_name)


@dataclass(frozen=True, slots=True)
class MoCatalogReader:
    """Reader for compiled gettext catalogs.

    Mapping rules:
        - The catalog header (empty msgid) is skipped.
        - Plural messages map the singular msgid to a tuple of all forms.
        - Messages with a msgctxt are keyed "{msgctxt}.{msgid}", so a
          context of "btnAdd" and msgid "Text" becomes "btnAdd.Text".

    Example:
        >>> reader = MoCatalogReader()
        >>> reader.read(mo_bytes, "App.de.mo")["greeting"]
        'Hallo'
    """

    def read(self, payload: bytes, blob_name: BlobName = "") -> dict[ResourceName, ResourceValue]:
        """Parse a .mo payload.

        Raises:
            ResourceFormatError: If payload is not a valid .mo file
        """
        _check_size(payload, blob_name)

        # Lazy import: keeps Babel's CLDR loading off the import path
        from babel.messages.mofile import read_mo  # noqa: PLC0415

        try:
            catalog = read_mo(io.BytesIO(payload))
            return _catalog_entries(catalog)
        # LookupError: the header names a charset Python has no codec for
        except (OSError, ValueError, LookupError, struct.error) as e:
            msg = f"Malformed gettext catalog in blob '{blob_name}': {e}"
            raise ResourceFormatError(msg, blob_name=blob_name) from e


def _catalog_entries(catalog: Catalog) -> dict[ResourceName, ResourceValue]:
    entries: dict[ResourceName, ResourceValue] = {}
    for message in catalog:
        if not message.id:
            continue
        msgid = message.id[0] if isinstance(message.id, (tuple, list)) else message.id
        context = message.context
        if isinstance(context, bytes):
            context = context.decode(catalog.charset)
        name = f"{context}.{msgid}" if context else msgid
        string = message.string
        entries[name] = tuple(string) if isinstance(string, (tuple, list)) else string
    return entries


@dataclass(frozen=True, slots=True)
class JsonResourceReader:
    """Reader for JSON resource payloads.

    The payload must be a UTF-8 JSON object. Values may be:
        - a string (text),
        - a list of strings (plural forms, returned as a tuple),
        - {"type": "binary", "data": "<base64>"} (returned as bytes).
    """

    def read(self, payload: bytes, blob_name: BlobName = "") -> dict[ResourceName, ResourceValue]:
        """Parse a JSON payload.

        Raises:
            ResourceFormatError: If payload is not a JSON object of supported values
        """
        _check_size(payload, blob_name)

        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            msg = f"Malformed JSON in blob '{blob_name}': {e}"
            raise ResourceFormatError(msg, blob_name=blob_name) from e

        if not isinstance(data, dict):
            msg = f"Blob '{blob_name}' must hold a JSON object, got {type(data).__name__}"
            raise ResourceFormatError(msg, blob_name=blob_name)

        return {
            name: self._decode_value(name, raw, blob_name) for name, raw in data.items()
        }

    @staticmethod
    def _decode_value(name: ResourceName, raw: object, blob_name: BlobName) -> ResourceValue:
        match raw:
            case str():
                return raw
            case list() if all(isinstance(form, str) for form in raw):
                return tuple(raw)
            case {"type": "binary", "data": str() as data}:
                try:
                    return base64.b64decode(data, validate=True)
                except binascii.Error as e:
                    msg = f"Invalid base64 for '{name}' in blob '{blob_name}': {e}"
                    raise ResourceFormatError(msg, blob_name=blob_name) from e
            case _:
                msg = (
                    f"Unsupported value for '{name}' in blob '{blob_name}': "
                    f"{type(raw).__name__}"
                )
                raise ResourceFormatError(msg, blob_name=blob_name)
