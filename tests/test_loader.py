"""Tests for catalog loading from dictionaries, files and String Catalogs."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from glossa import (
    CatalogLoadError,
    CatalogLoader,
    PluralCategory,
    load_catalog,
    load_catalog_from_dict,
    load_catalog_from_xcstrings,
)


# =============================================================================
# Dictionary Layout Tests
# =============================================================================


class TestLoadDict:
    """Test the dictionary layout."""

    def test_nested_keys_flattened(self, sample_catalog):
        """Test nested message groups become dotted keys."""
        assert sample_catalog.get_entry("en", "home.title").template == "Welcome home."
        assert sample_catalog.get_entry("en", "home.subtitle").template == "Home is fine"
        assert sample_catalog.get_entry("en", "home") is None

    def test_plural_maps_detected(self, sample_catalog):
        """Test mappings of plural categories become plural entries."""
        entry = sample_catalog.get_entry("ru", "numberOfSongs")
        assert entry.is_plural
        assert entry.variants[PluralCategory.MANY] == "%lld песен"

    def test_comments_attached(self, sample_catalog):
        assert sample_catalog.get_entry("en", "save_button").comment == "Label of the save button"
        assert sample_catalog.get_entry("en", "greeting_message").comment is None

    def test_default_locale(self):
        """Test the loader's default applies when the data names none."""
        catalog = load_catalog_from_dict({"locales": {"fr": {"hello": "Salut"}}}, default_locale="fr")
        assert catalog.default_locale == "fr"

    def test_default_locale_from_data(self, sample_data):
        sample_data["default_locale"] = "fr"
        assert load_catalog_from_dict(sample_data).default_locale == "fr"

    def test_metadata(self):
        catalog = load_catalog_from_dict({"locales": {"en": {}}, "metadata": {"version": "2"}})
        assert catalog.metadata["version"] == "2"

    def test_plural_map_without_other_rejected(self):
        """Test plural maps must provide 'other'."""
        data = {"locales": {"en": {"numberOfSongs": {"one": "%lld song", "few": "%lld songs"}}}}
        with pytest.raises(CatalogLoadError, match="other"):
            load_catalog_from_dict(data)

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"default_locale": "en"},
            {"locales": ["en"]},
            {"locales": {"en": "Hello"}},
            {"locales": {"en": {"count": 3}}},
        ],
    )
    def test_invalid_shapes(self, data):
        with pytest.raises(CatalogLoadError):
            load_catalog_from_dict(data)


# =============================================================================
# File Tests
# =============================================================================


class TestLoadFile:
    """Test loading JSON and YAML files."""

    def test_json(self, sample_data, tmp_path: Path):
        path = tmp_path / "messages.json"
        path.write_text(json.dumps(sample_data), encoding="utf-8")

        catalog = load_catalog(path)

        assert catalog.get_entry("fr", "greeting_message").template == "Bonjour !"
        assert catalog.metadata["source"] == str(path)

    @pytest.mark.parametrize("suffix", [".yaml", ".yml"])
    def test_yaml(self, sample_data, tmp_path: Path, suffix):
        path = tmp_path / f"messages{suffix}"
        path.write_text(yaml.safe_dump(sample_data, allow_unicode=True), encoding="utf-8")

        catalog = load_catalog(path)

        assert catalog.get_entry("en", "numberOfSongs").variants[PluralCategory.ONE] == "%lld song"
        assert catalog.get_entry("en", "home.title").template == "Welcome home."

    def test_load_logs_summary(self, sample_data, tmp_path: Path, caplog):
        path = tmp_path / "messages.json"
        path.write_text(json.dumps(sample_data), encoding="utf-8")

        with caplog.at_level("INFO", logger="glossa.loader"):
            load_catalog(path)

        assert "Loaded catalog" in caplog.text

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CatalogLoadError, match="not found") as exc_info:
            load_catalog(tmp_path / "absent.json")
        assert exc_info.value.source == str(tmp_path / "absent.json")

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "messages.po"
        path.write_text("msgid \"\"", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="Unsupported"):
            load_catalog(path)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="JSON"):
            load_catalog(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("locales: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="YAML"):
            load_catalog(path)


# =============================================================================
# String Catalog Tests
# =============================================================================


class TestLoadXCStrings:
    """Test Xcode String Catalog documents."""

    def test_source_language_is_default(self, xcstrings_catalog):
        assert xcstrings_catalog.default_locale == "en"
        assert set(xcstrings_catalog.locales) == {"en", "fr"}

    def test_string_units(self, xcstrings_catalog):
        assert xcstrings_catalog.get_entry("en", "greeting_message").template == "Hello there!"
        assert xcstrings_catalog.get_entry("fr", "save_button").template == "Enregistrer"

    def test_plural_variations(self, xcstrings_catalog):
        entry = xcstrings_catalog.get_entry("fr", "numberOfSongs")
        assert entry.is_plural
        assert entry.variants[PluralCategory.ONE] == "%lld chanson"
        assert entry.variants[PluralCategory.OTHER] == "%lld chansons"

    def test_key_without_source_localization(self, xcstrings_catalog):
        """Test keys with no source-language value resolve to themselves."""
        assert xcstrings_catalog.get_entry("en", "Hello, world!").template == "Hello, world!"
        assert xcstrings_catalog.get_entry("en", "Cancel").template == "Cancel"
        assert xcstrings_catalog.get_entry("fr", "Cancel").template == "Annuler"
        assert xcstrings_catalog.get_entry("en", "").template == ""

    def test_comment(self, xcstrings_catalog):
        entry = xcstrings_catalog.get_entry("fr", "currency")
        assert entry.comment == "Currency code shown next to prices"

    def test_unsupported_variations_skipped(self, xcstrings_path, caplog):
        """Test device variations are skipped with a warning."""
        with caplog.at_level("WARNING", logger="glossa.loader"):
            catalog = load_catalog(xcstrings_path)

        assert catalog.get_entry("fr", "welcome_message") is None
        assert "device" in caplog.text

    def test_substitutions_skipped(self, xcstrings_path, caplog):
        """Test substituted templates are not loaded, so the locale falls back."""
        with caplog.at_level("WARNING", logger="glossa.loader"):
            catalog = load_catalog(xcstrings_path)

        assert catalog.get_entry("fr", "songsInPlaylist") is None
        assert catalog.get_entry("en", "songsInPlaylist").template == "%lld songs"
        assert "substitutions" in caplog.text

    def test_source_language_substitutions_use_key(self):
        catalog = load_catalog_from_xcstrings(
            {
                "sourceLanguage": "en",
                "strings": {
                    "songs": {
                        "localizations": {
                            "en": {
                                "stringUnit": {"value": "%#@songs@"},
                                "substitutions": {"songs": {"formatSpecifier": "lld"}},
                            },
                        },
                    },
                },
            }
        )
        assert catalog.get_entry("en", "songs").template == "songs"

    def test_metadata(self, xcstrings_catalog, xcstrings_path):
        assert xcstrings_catalog.metadata["format"] == "xcstrings"
        assert xcstrings_catalog.metadata["version"] == "1.0"
        assert xcstrings_catalog.metadata["source"] == str(xcstrings_path)

    def test_json_suffix_detected(self, xcstrings_path, tmp_path: Path):
        """Test a String Catalog saved as .json is recognized."""
        path = tmp_path / "Localizable.json"
        path.write_text(xcstrings_path.read_text(encoding="utf-8"), encoding="utf-8")

        catalog = load_catalog(path)

        assert catalog.metadata["format"] == "xcstrings"
        assert catalog.get_entry("fr", "greeting_message").template == "Bonjour !"

    def test_from_parsed_document(self):
        catalog = load_catalog_from_xcstrings(
            {
                "sourceLanguage": "de",
                "strings": {
                    "ok": {"localizations": {"de": {"stringUnit": {"value": "Gut"}}}},
                },
            }
        )
        assert catalog.default_locale == "de"
        assert catalog.get_entry("de", "ok").template == "Gut"

    def test_plural_without_other_rejected(self):
        data = {
            "sourceLanguage": "en",
            "strings": {
                "numberOfSongs": {
                    "localizations": {
                        "en": {"variations": {"plural": {"one": {"stringUnit": {"value": "%lld song"}}}}},
                    },
                },
            },
        }
        with pytest.raises(CatalogLoadError, match="numberOfSongs"):
            CatalogLoader().load_xcstrings(data)

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"sourceLanguage": "en", "strings": []},
            {"sourceLanguage": "en", "strings": {"k": "x"}},
            {"sourceLanguage": "en", "strings": {"k": {"localizations": ["en"]}}},
            {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": "x"}}}},
            {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": {"stringUnit": "x"}}}}},
            {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": {"stringUnit": {"value": 3}}}}}},
            {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": {"variations": "plural"}}}}},
            {
                "sourceLanguage": "en",
                "strings": {"k": {"localizations": {"en": {"variations": {"plural": {"other": "x"}}}}}},
            },
        ],
    )
    def test_malformed_documents_rejected(self, data):
        with pytest.raises(CatalogLoadError):
            load_catalog_from_xcstrings(data)
