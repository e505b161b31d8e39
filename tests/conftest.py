"""Pytest configuration for wols tests.

This file is automatically loaded by pytest and sets up test fixtures
and configuration that are shared across all test modules.
"""

from collections.abc import Iterator
from typing import Any

import pytest
from dotenv import load_dotenv

from wols.aliases import reset_platform_types, reset_type_aliases
from wols.compact_url import reset_species_codes, reset_stage_codes
from wols.migration import clear_migrations
from wols.models import WOLS_CONTEXT, WOLS_VERSION

# Load .env file so tests see the same configuration as the CLI
# This runs before any tests are collected
load_dotenv()


@pytest.fixture(autouse=True)
def reset_registries() -> Iterator[None]:
    """Restore every process-wide registry around each test."""
    reset_type_aliases()
    reset_platform_types()
    reset_species_codes()
    reset_stage_codes()
    clear_migrations()
    yield
    reset_type_aliases()
    reset_platform_types()
    reset_species_codes()
    reset_stage_codes()
    clear_migrations()


@pytest.fixture
def valid_specimen_data() -> dict[str, Any]:
    """Minimal valid specimen in wire form."""
    return {
        "@context": WOLS_CONTEXT,
        "@type": "Specimen",
        "id": "wemush:abc123",
        "version": WOLS_VERSION,
        "type": "CULTURE",
        "species": "Pleurotus ostreatus",
    }
