"""Pytest configuration for the embedres test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 200 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Deadlines are disabled: the first example of a run pays for loading
Babel's CLDR data.

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
Run them via: pytest -m fuzz
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from embedres.locale_utils import clear_locale_cache
from embedres.localization import BlobNaming, MappingBlobProvider
from tests.helpers.blobs import NAMING, STANDARD_BLOBS, CountingBlobProvider, build_mo

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

settings.register_profile(
    "dev",
    max_examples=200,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    deadline=None,
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    deadline=None,
    print_blob=True,
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    deadline=None,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested with -m fuzz."""
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_locale_cache() -> None:
    """Start every test with an empty parent-locale memo."""
    clear_locale_cache()


@pytest.fixture
def naming() -> BlobNaming:
    """Blob naming shared by the standard blob table."""
    return NAMING


@pytest.fixture
def standard_blobs() -> dict[str, bytes]:
    """Compiled .mo payloads for the standard locales plus the default set."""
    return {name: build_mo(entries) for name, entries in STANDARD_BLOBS.items()}


@pytest.fixture
def provider(standard_blobs: dict[str, bytes]) -> MappingBlobProvider:
    """In-memory blob table with the standard blobs."""
    return MappingBlobProvider(standard_blobs)


@pytest.fixture
def counting_provider(standard_blobs: dict[str, bytes]) -> CountingBlobProvider:
    """Standard blob table that counts read_blob calls."""
    return CountingBlobProvider(standard_blobs)
