"""Tests for resource set loading.

Covers:
- BlobNaming: candidate forms, de-duplication, validation
- ResourceSetLoader: candidate order, secondary keys, skipped failures
- LoadSummary / ResourceLoadResult via diagnose()
"""

from __future__ import annotations

import json

import pytest

from embedres.enums import LoadStatus, ResourceSetState
from embedres.errors import ResourceFormatError
from embedres.localization import (
    BlobNaming,
    JsonResourceReader,
    LoadSummary,
    MappingBlobProvider,
    ResourceLoadResult,
    ResourceSetLoader,
)
from tests.helpers.blobs import CountingBlobProvider, FailingReader, build_mo, with_charset

# =============================================================================
# BlobNaming
# =============================================================================


class TestBlobNaming:
    """Candidate blob name generation."""

    def test_three_distinct_forms(self) -> None:
        naming = BlobNaming(
            "MainForm",
            "pdfbinder",
            logical_name="PDFBinder.MainForm",
            qualified_name="pdfbinder.ui.MainForm",
        )
        assert naming.candidate_names("de") == (
            "PDFBinder.MainForm.de.mo",
            "pdfbinder.ui.MainForm.de.mo",
            "pdfbinder.MainForm.de.mo",
        )

    def test_default_set_omits_key_segment(self, naming: BlobNaming) -> None:
        assert naming.candidate_names(None) == (
            "PDFBinder.MainForm.mo",
            "pdfbinder.MainForm.mo",
        )

    def test_coinciding_forms_tried_once(self) -> None:
        naming = BlobNaming("MainForm", "pdfbinder")
        assert naming.candidate_names("ja") == ("MainForm.ja.mo", "pdfbinder.MainForm.ja.mo")

    def test_all_forms_identical(self) -> None:
        naming = BlobNaming("App", "ns", logical_name="ns.App")
        assert naming.candidate_names("fr") == ("ns.App.fr.mo",)

    def test_custom_suffix(self) -> None:
        naming = BlobNaming("App", "ns", suffix=".json")
        assert naming.candidate_names("zh-CN") == ("App.zh-CN.json", "ns.App.zh-CN.json")

    def test_empty_suffix(self) -> None:
        naming = BlobNaming("App", "ns", suffix="")
        assert naming.candidate_names(None) == ("App", "ns.App")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"base_name": "", "namespace": "ns"},
            {"base_name": "App", "namespace": ""},
            {"base_name": "Main Form", "namespace": "ns"},
            {"base_name": "App", "namespace": " ns"},
            {"base_name": "App", "namespace": "ns", "logical_name": ""},
            {"base_name": "App", "namespace": "ns", "qualified_name": "a\tb"},
        ],
    )
    def test_invalid_components(self, kwargs: dict[str, str]) -> None:
        with pytest.raises(ValueError, match="non-empty name without whitespace"):
            BlobNaming(**kwargs)

    def test_suffix_needs_dot(self) -> None:
        with pytest.raises(ValueError, match="suffix must start with"):
            BlobNaming("App", "ns", suffix="mo")


# =============================================================================
# ResourceSetLoader
# =============================================================================


class TestLoaderCandidates:
    """Candidate order including secondary keys."""

    def test_primary_only(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        loader = ResourceSetLoader(provider, naming)
        assert loader.candidate_names("de") == naming.candidate_names("de")

    def test_secondary_after_primary(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        loader = ResourceSetLoader(provider, naming)
        assert loader.candidate_names("zh-Hans") == (
            "PDFBinder.MainForm.zh-Hans.mo",
            "pdfbinder.MainForm.zh-Hans.mo",
            "PDFBinder.MainForm.zh-CN.mo",
            "pdfbinder.MainForm.zh-CN.mo",
        )

    def test_custom_secondary_keys(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        loader = ResourceSetLoader(provider, naming, secondary_keys={"pt-BR": ("pt",)})
        assert loader.candidate_names("pt-BR")[-1] == "pdfbinder.MainForm.pt.mo"
        assert loader.candidate_names("zh-Hans") == naming.candidate_names("zh-Hans")

    def test_default_has_no_secondary_pass(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        loader = ResourceSetLoader(provider, naming)
        assert loader.candidate_names(None) == naming.candidate_names(None)


class TestLoaderLoad:
    """Opening and parsing candidates."""

    def test_loads_first_form(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        rs = ResourceSetLoader(provider, naming).load("de")
        assert rs is not None
        assert rs.blob_name == "PDFBinder.MainForm.de.mo"
        assert rs.source_key == "de"
        assert rs.state is ResourceSetState.LOADED
        assert rs.get_string("btnAdd.Text") == "Hinzufügen"

    def test_loads_namespaced_form(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        rs = ResourceSetLoader(provider, naming).load("ja")
        assert rs is not None
        assert rs.blob_name == "pdfbinder.MainForm.ja.mo"

    def test_loads_default_set(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        rs = ResourceSetLoader(provider, naming).load(None)
        assert rs is not None
        assert rs.source_key is None
        assert rs.get_string("only.default") == "D"

    def test_simplified_chinese_secondary_fallback(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        """zh-Hans has no blob of its own; the zh-CN blob is used."""
        rs = ResourceSetLoader(provider, naming).load("zh-Hans")
        assert rs is not None
        assert rs.blob_name == "PDFBinder.MainForm.zh-CN.mo"
        assert rs.source_key == "zh-Hans"
        assert rs.get_string("btnAdd.Text") == "添加"

    def test_missing_key(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        assert ResourceSetLoader(provider, naming).load("pt-BR") is None

    def test_every_load_is_fresh(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        loader = ResourceSetLoader(provider, naming)
        assert loader.load("fr") is not loader.load("fr")

    def test_read_error_skipped(self, standard_blobs: dict[str, bytes], naming: BlobNaming) -> None:
        blobs = dict(standard_blobs)
        blobs["pdfbinder.MainForm.de.mo"] = build_mo({"title": "second"})
        provider = CountingBlobProvider(blobs, failing=["PDFBinder.MainForm.de.mo"])
        rs = ResourceSetLoader(provider, naming).load("de")
        assert rs is not None
        assert rs.blob_name == "pdfbinder.MainForm.de.mo"

    def test_parse_error_skipped(self, standard_blobs: dict[str, bytes], naming: BlobNaming) -> None:
        blobs = dict(standard_blobs)
        blobs["PDFBinder.MainForm.fr.mo"] = b"not a catalog"
        blobs["pdfbinder.MainForm.fr.mo"] = build_mo({"title": "Relieur"})
        rs = ResourceSetLoader(MappingBlobProvider(blobs), naming).load("fr")
        assert rs is not None
        assert rs.get_string("title") == "Relieur"

    def test_unknown_charset_skipped(
        self, standard_blobs: dict[str, bytes], naming: BlobNaming
    ) -> None:
        blobs = dict(standard_blobs)
        blobs["PDFBinder.MainForm.de.mo"] = with_charset(build_mo({"title": "Titel"}), "xx-bd")
        loader = ResourceSetLoader(MappingBlobProvider(blobs), naming)
        assert loader.load("de") is None
        rs = loader.load(None)
        assert rs is not None
        assert rs.get_string("title") == "PDF Binder"

    @pytest.mark.parametrize(
        "error", [KeyError("broken index"), TypeError("bad entry"), RuntimeError("boom")]
    )
    def test_any_reader_exception_skipped(
        self, provider: MappingBlobProvider, naming: BlobNaming, error: Exception
    ) -> None:
        reader = FailingReader(error, ["PDFBinder.MainForm.de.mo"])
        loader = ResourceSetLoader(provider, naming, reader=reader)
        assert loader.load("de") is None
        assert loader.load("fr") is not None

    def test_unusable_entries_skipped(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        """A reader returning something that is not a mapping disqualifies the blob."""

        class NotAMapping:
            def read(self, payload: bytes, blob_name: str = "") -> object:
                return 42

        loader = ResourceSetLoader(provider, naming, reader=NotAMapping())  # type: ignore[arg-type]
        assert loader.load("de") is None

    def test_all_candidates_broken(self, naming: BlobNaming) -> None:
        provider = MappingBlobProvider(
            {"PDFBinder.MainForm.fr.mo": b"junk", "pdfbinder.MainForm.fr.mo": b"junk"}
        )
        assert ResourceSetLoader(provider, naming).load("fr") is None

    def test_stops_at_first_success(
        self, counting_provider: CountingBlobProvider, naming: BlobNaming
    ) -> None:
        ResourceSetLoader(counting_provider, naming).load("de")
        assert counting_provider.reads == {"PDFBinder.MainForm.de.mo": 1}

    def test_json_reader(self) -> None:
        naming = BlobNaming("App", "ns", suffix=".json")
        provider = MappingBlobProvider({"App.de.json": json.dumps({"a": "b"}).encode()})
        rs = ResourceSetLoader(provider, naming, reader=JsonResourceReader()).load("de")
        assert rs is not None
        assert rs.get_string("a") == "b"

    def test_blob_names(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        loader = ResourceSetLoader(provider, naming)
        assert loader.blob_names() == provider.blob_names()
        assert loader.naming is naming


# =============================================================================
# diagnose() / LoadSummary
# =============================================================================


class TestDiagnose:
    """Per-candidate load reporting."""

    def test_secondary_fallback_summary(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        summary = ResourceSetLoader(provider, naming).diagnose("zh-Hans")
        assert summary.key == "zh-Hans"
        assert summary.total_attempted == 4
        assert summary.successful == 1
        assert summary.not_found == 3
        assert summary.errors == 0
        assert not summary.has_errors
        assert summary.selected_blob == "PDFBinder.MainForm.zh-CN.mo"

    def test_errors_recorded(self, standard_blobs: dict[str, bytes], naming: BlobNaming) -> None:
        blobs = dict(standard_blobs)
        blobs["PDFBinder.MainForm.fr.mo"] = b"junk"
        summary = ResourceSetLoader(MappingBlobProvider(blobs), naming).diagnose("fr")
        assert summary.has_errors
        (error,) = summary.get_errors()
        assert error.blob_name == "PDFBinder.MainForm.fr.mo"
        assert isinstance(error.error, ResourceFormatError)
        assert summary.selected_blob is None

    def test_io_error_recorded(self, standard_blobs: dict[str, bytes], naming: BlobNaming) -> None:
        provider = CountingBlobProvider(standard_blobs, failing=["PDFBinder.MainForm.de.mo"])
        summary = ResourceSetLoader(provider, naming).diagnose("de")
        (error,) = summary.get_errors()
        assert isinstance(error.error, OSError)

    def test_reader_exception_recorded(
        self, provider: MappingBlobProvider, naming: BlobNaming
    ) -> None:
        reader = FailingReader(KeyError("broken index"), ["PDFBinder.MainForm.de.mo"])
        summary = ResourceSetLoader(provider, naming, reader=reader).diagnose("de")
        (error,) = summary.get_errors()
        assert error.status == LoadStatus.ERROR
        assert isinstance(error.error, KeyError)
        assert summary.selected_blob is None

    def test_tries_every_candidate(self, standard_blobs: dict[str, bytes], naming: BlobNaming) -> None:
        blobs = dict(standard_blobs)
        blobs["pdfbinder.MainForm.de.mo"] = build_mo({"title": "second"})
        summary = ResourceSetLoader(MappingBlobProvider(blobs), naming).diagnose("de")
        assert summary.successful == 2
        assert summary.selected_blob == "PDFBinder.MainForm.de.mo"
        assert [r.entry_count for r in summary.get_successful()] == [2, 1]

    def test_not_found_listing(self, provider: MappingBlobProvider, naming: BlobNaming) -> None:
        summary = ResourceSetLoader(provider, naming).diagnose("pt-BR")
        assert [r.blob_name for r in summary.get_not_found()] == [
            "PDFBinder.MainForm.pt-BR.mo",
            "pdfbinder.MainForm.pt-BR.mo",
        ]
        assert "not_found=2" in repr(summary)


class TestResourceLoadResult:
    """Status predicates."""

    @pytest.mark.parametrize(
        ("status", "flags"),
        [
            (LoadStatus.SUCCESS, (True, False, False)),
            (LoadStatus.NOT_FOUND, (False, True, False)),
            (LoadStatus.ERROR, (False, False, True)),
        ],
    )
    def test_predicates(self, status: LoadStatus, flags: tuple[bool, bool, bool]) -> None:
        result = ResourceLoadResult("de", "App.de.mo", status)
        assert (result.is_success, result.is_not_found, result.is_error) == flags

    def test_empty_summary(self) -> None:
        summary = LoadSummary(key=None, results=())
        assert summary.total_attempted == 0
        assert summary.selected_blob is None
