"""EmbeddedResourceManager Example - Locale Fallback and Cache Swaps.

Demonstrates resolving localized UI strings packaged as embedded blobs:

1. Exact, parent-locale and default-set fallback
2. Simplified Chinese served from the zh-CN blob
3. Ambient locale with AmbientLocale
4. Observing fallbacks and cache behaviour

Blobs are compiled in memory with Babel here; a real application ships
them as package data and uses PackageBlobProvider("myapp.resources").

Python 3.13+.
"""

from __future__ import annotations

import io
import logging

from babel.messages.catalog import Catalog
from babel.messages.mofile import write_mo

from embedres import AmbientLocale, BlobNaming, EmbeddedResourceManager, MappingBlobProvider
from embedres.localization import FallbackInfo

TRANSLATIONS = {
    "PDFBinder.MainForm.mo": {"title": "PDF Binder", "btnAdd.Text": "Add", "btnBind.Text": "Bind"},
    "PDFBinder.MainForm.de.mo": {"title": "PDF-Binder", "btnAdd.Text": "Hinzufügen"},
    "PDFBinder.MainForm.fr.mo": {"title": "Relieur PDF", "btnAdd.Text": "Ajouter"},
    "PDFBinder.MainForm.zh-CN.mo": {"title": "PDF 装订器", "btnAdd.Text": "添加"},
}


def compile_blob(entries: dict[str, str]) -> bytes:
    catalog = Catalog()
    for msgid, text in entries.items():
        catalog.add(msgid, text)
    buffer = io.BytesIO()
    write_mo(buffer, catalog)
    return buffer.getvalue()


def build_manager(**kwargs: object) -> EmbeddedResourceManager:
    provider = MappingBlobProvider(
        {name: compile_blob(entries) for name, entries in TRANSLATIONS.items()}
    )
    naming = BlobNaming("MainForm", "pdfbinder", logical_name="PDFBinder.MainForm")
    return EmbeddedResourceManager(provider, naming, **kwargs)  # type: ignore[arg-type]


def example_1_fallback_chain() -> None:
    """Example 1: exact -> parent -> default."""
    print("=" * 60)
    print("Example 1: Fallback Chain")
    print("=" * 60)

    with build_manager() as manager:
        for locale in ("de-DE", "de-AT", "fr", "pt-BR"):
            print(f"  {locale:6} btnAdd.Text  = {manager.get_string('btnAdd.Text', locale)}")
        # Missing in the German blob: served from the default set
        print(f"  de     btnBind.Text = {manager.get_string('btnBind.Text', 'de')}")


def example_2_simplified_chinese() -> None:
    """Example 2: zh-Hans has no blob of its own."""
    print("\n" + "=" * 60)
    print("Example 2: zh-Hans -> zh-CN")
    print("=" * 60)

    with build_manager() as manager:
        print(f"  zh-Hans title = {manager.get_string('title', 'zh-Hans')}")
        summary = manager.diagnose_locale("zh-Hans")
        print(f"  {summary}")
        print(f"  selected blob: {summary.selected_blob}")


def example_3_ambient_locale() -> None:
    """Example 3: accessors without an explicit locale."""
    print("\n" + "=" * 60)
    print("Example 3: Ambient Locale")
    print("=" * 60)

    ambient = AmbientLocale(default="en")
    with build_manager(locale_provider=ambient) as manager:
        print(f"  default: {manager.get_string('title')}")
        with ambient.use("fr-FR"):
            print(f"  fr-FR:   {manager.get_string('title')}")


def example_4_observability() -> None:
    """Example 4: fallback callback and cache statistics."""
    print("\n" + "=" * 60)
    print("Example 4: Fallbacks and Cache Stats")
    print("=" * 60)

    def report(info: FallbackInfo) -> None:
        print(f"  fallback: {info.requested_locale} -> {info.resolved_key or '<default>'}")

    with build_manager(on_fallback=report) as manager:
        for locale in ("de-CH", "de-CH", "ja", "fr", "de"):
            manager.get_string("title", locale)
        for key, value in manager.get_cache_stats().items():
            print(f"  {key}: {value}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    example_1_fallback_chain()
    example_2_simplified_chinese()
    example_3_ambient_locale()
    example_4_observability()
