"""Shared fixtures for glossa tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from glossa import Catalog, Localizer, load_catalog, load_catalog_from_dict

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def xcstrings_path() -> Path:
    """Path to the sample Xcode String Catalog."""
    return FIXTURES / "Localizable.xcstrings"


@pytest.fixture
def sample_data() -> dict[str, Any]:
    """Catalog data in the dictionary layout."""
    return {
        "default_locale": "en",
        "locales": {
            "en": {
                "greeting_message": "Hello there!",
                "save_button": "Save",
                "numberOfSongs": {
                    "one": "%lld song",
                    "other": "%lld songs",
                },
                "numberOfItems": "%1$lld items, KES %2$@",
                "bread": "%lf slices of bread",
                "home": {
                    "title": "Welcome home.",
                    "subtitle": "Home is fine",
                },
            },
            "fr": {
                "greeting_message": "Bonjour !",
                "numberOfSongs": {
                    "one": "%lld chanson",
                    "other": "%lld chansons",
                },
            },
            "ru": {
                "numberOfSongs": {
                    "one": "%lld песня",
                    "few": "%lld песни",
                    "many": "%lld песен",
                    "other": "%lld песни",
                },
            },
        },
        "comments": {
            "save_button": "Label of the save button",
        },
    }


@pytest.fixture
def sample_catalog(sample_data: dict[str, Any]) -> Catalog:
    return load_catalog_from_dict(sample_data)


@pytest.fixture
def xcstrings_catalog(xcstrings_path: Path) -> Catalog:
    return load_catalog(xcstrings_path)


@pytest.fixture
def localizer(sample_catalog: Catalog) -> Localizer:
    return Localizer(sample_catalog)
