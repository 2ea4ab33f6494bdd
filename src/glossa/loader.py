"""Catalog loader for serialized translation sources.

This module shapes external data into the ``Catalog`` model. Supported
sources are plain dictionaries, JSON and YAML files, and Xcode String
Catalog (``.xcstrings``) documents.

Dictionary / JSON / YAML layout::

    default_locale: en
    locales:
      en:
        greeting_message: "Hello!"
        numberOfSongs:
          one: "%lld song"
          other: "%lld songs"
        home:
          title: "Welcome home."     # flattened to "home.title"
      fr:
        greeting_message: "Bonjour !"

Example:
    loader = CatalogLoader()
    catalog = loader.load_file(Path("Localizable.xcstrings"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from glossa.catalog import Catalog
from glossa.exceptions import CatalogError, CatalogLoadError
from glossa.types import Entry, PluralCategory

logger = logging.getLogger(__name__)

_PLURAL_KEYS = frozenset(category.value for category in PluralCategory)


class CatalogLoader:
    """Loader for external catalog sources.

    Example:
        loader = CatalogLoader(default_locale="en")

        catalog = loader.load_file(Path("locales/app.yaml"))
        catalog = loader.load_dict({"locales": {"en": {"hello": "Hello"}}})
    """

    def __init__(self, default_locale: str = "en") -> None:
        """Initialize loader.

        Args:
            default_locale: Default locale for sources that do not name one.
        """
        self._default_locale = default_locale

    def load_file(self, path: Path) -> Catalog:
        """Load a catalog file.

        Args:
            path: Path to a .json, .yaml/.yml or .xcstrings file.

        Returns:
            Loaded Catalog.

        Raises:
            CatalogLoadError: If the file is missing, unreadable, in an
                unsupported format, or does not describe a valid catalog.
        """
        path = Path(path)
        if not path.is_file():
            raise CatalogLoadError("Catalog file not found", source=path)

        suffix = path.suffix.lower()
        if suffix == ".xcstrings":
            catalog = self.load_xcstrings(self._read_json(path), source=path)
        elif suffix == ".json":
            data = self._read_json(path)
            if _looks_like_xcstrings(data):
                catalog = self.load_xcstrings(data, source=path)
            else:
                catalog = self.load_dict(data, source=path)
        elif suffix in (".yaml", ".yml"):
            catalog = self.load_dict(self._read_yaml(path), source=path)
        else:
            raise CatalogLoadError(f"Unsupported catalog file format: {suffix}", source=path)

        logger.info(
            "Loaded catalog from %s: %d locale(s), %d key(s)",
            path,
            len(catalog.locales),
            len(catalog.keys()),
        )
        return catalog

    def _read_json(self, path: Path) -> Any:
        """Read a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CatalogLoadError(f"Cannot read JSON: {e}", source=path) from e

    def _read_yaml(self, path: Path) -> Any:
        """Read a YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise CatalogLoadError(f"Cannot read YAML: {e}", source=path) from e

    # -------------------------------------------------------------------------
    # Dictionary layout
    # -------------------------------------------------------------------------

    def load_dict(self, data: Any, source: str | Path | None = None) -> Catalog:
        """Build a catalog from the dictionary layout.

        Args:
            data: Parsed catalog data.
            source: Origin of the data, recorded in metadata and errors.

        Returns:
            Catalog.

        Raises:
            CatalogLoadError: If the data does not have the expected shape.
        """
        if not isinstance(data, Mapping):
            raise CatalogLoadError("Catalog data must be a mapping", source=source)

        locales_data = data.get("locales")
        if not isinstance(locales_data, Mapping):
            raise CatalogLoadError("Catalog data needs a 'locales' mapping", source=source)

        comments = data.get("comments") or {}
        locales: dict[str, dict[str, Entry]] = {}

        for locale, messages in locales_data.items():
            if not isinstance(messages, Mapping):
                raise CatalogLoadError(
                    f"Messages of locale {locale!r} must be a mapping",
                    source=source,
                )
            flat = self._flatten_messages(messages)
            try:
                locales[str(locale)] = {
                    key: _entry_from_value(value, comments.get(key))
                    for key, value in flat.items()
                }
            except CatalogError as e:
                raise CatalogLoadError(f"Invalid entry in locale {locale!r}: {e}", source=source) from e

        metadata = dict(data.get("metadata") or {})
        if source is not None:
            metadata.setdefault("source", str(source))

        return self._build(
            locales,
            str(data.get("default_locale") or self._default_locale),
            metadata,
            source,
        )

    def _flatten_messages(
        self,
        nested: Mapping[str, Any],
        prefix: str = "",
    ) -> dict[str, Any]:
        """Flatten nested message structure.

        Plural maps (every key a plural category) are kept as values.

        Example:
            Input:  {"home": {"title": "..."}}
            Output: {"home.title": "..."}
        """
        flat: dict[str, Any] = {}

        for key, value in nested.items():
            full_key = f"{prefix}.{key}" if prefix else str(key)

            if isinstance(value, Mapping) and not _is_plural_map(value):
                flat.update(self._flatten_messages(value, full_key))
            else:
                flat[full_key] = value

        return flat

    # -------------------------------------------------------------------------
    # Xcode String Catalog
    # -------------------------------------------------------------------------

    def load_xcstrings(self, data: Any, source: str | Path | None = None) -> Catalog:
        """Build a catalog from an Xcode String Catalog document.

        A key without a localization in the source language resolves to
        the key itself, matching how the platform treats such entries.

        Args:
            data: Parsed .xcstrings JSON.
            source: Origin of the data, recorded in metadata and errors.

        Returns:
            Catalog whose default locale is the document's sourceLanguage.

        Raises:
            CatalogLoadError: If the document is malformed.
        """
        strings = data.get("strings", {}) if isinstance(data, Mapping) else None
        if not isinstance(strings, Mapping):
            raise CatalogLoadError("String Catalog must contain a 'strings' mapping", source=source)

        source_language = str(data.get("sourceLanguage") or self._default_locale)
        locales: dict[str, dict[str, Entry]] = {source_language: {}}

        for key, item in strings.items():
            item = item or {}
            if not isinstance(item, Mapping):
                raise CatalogLoadError(f"String {key!r} must be an object", source=source)
            comment = item.get("comment")
            localizations = item.get("localizations") or {}
            if not isinstance(localizations, Mapping):
                raise CatalogLoadError(f"Localizations of {key!r} must be an object", source=source)

            for locale, localization in localizations.items():
                try:
                    entry = self._parse_localization(key, locale, localization, comment)
                except CatalogError as e:
                    raise CatalogLoadError(
                        f"Invalid localization {locale!r} of {key!r}: {e}",
                        source=source,
                    ) from e
                if entry is not None:
                    locales.setdefault(locale, {})[key] = entry

            if key not in locales[source_language]:
                locales[source_language][key] = Entry.single(key, comment=comment)

        metadata: dict[str, Any] = {"format": "xcstrings"}
        if "version" in data:
            metadata["version"] = data["version"]
        if source is not None:
            metadata["source"] = str(source)

        return self._build(locales, source_language, metadata, source)

    def _parse_localization(
        self,
        key: str,
        locale: str,
        localization: Mapping[str, Any],
        comment: str | None,
    ) -> Entry | None:
        """Convert one localization object to an entry.

        Returns None when the localization only uses features that are not
        supported (substitutions, non-plural variations), so lookups for
        this locale fall back.
        """
        if not isinstance(localization, Mapping):
            raise CatalogError("localization must be an object")

        # Substituted templates ("%#@songs@") cannot be rendered without them
        if "substitutions" in localization:
            logger.warning("Ignoring substitutions of %r in %r", key, locale)
            return None

        variations = localization.get("variations") or {}
        if not isinstance(variations, Mapping):
            raise CatalogError("variations must be an object")
        for kind in variations:
            if kind != "plural":
                logger.warning("Ignoring %r variations of %r in %r", kind, key, locale)

        plural = variations.get("plural")
        if plural:
            if not isinstance(plural, Mapping):
                raise CatalogError("plural variations must be an object")
            forms = {}
            for category, form in plural.items():
                value = _unit_value(form)
                if value is not None:
                    forms[category] = value
            return Entry.plural(forms, comment=comment)

        value = _unit_value(localization)
        if value is not None:
            return Entry.single(value, comment=comment)

        return None

    # -------------------------------------------------------------------------

    def _build(
        self,
        locales: dict[str, dict[str, Entry]],
        default_locale: str,
        metadata: dict[str, Any],
        source: str | Path | None,
    ) -> Catalog:
        try:
            return Catalog(locales=locales, default_locale=default_locale, metadata=metadata)
        except (CatalogError, ValueError) as e:
            raise CatalogLoadError(str(e), source=source) from e


def _is_plural_map(value: Mapping[str, Any]) -> bool:
    return bool(value) and all(
        isinstance(k, str) and k.lower() in _PLURAL_KEYS and isinstance(v, str)
        for k, v in value.items()
    )


def _unit_value(container: Any) -> str | None:
    """Get ``stringUnit.value`` from a localization or plural form."""
    if not isinstance(container, Mapping):
        raise CatalogError("expected an object with a 'stringUnit'")
    unit = container.get("stringUnit") or {}
    if not isinstance(unit, Mapping):
        raise CatalogError("stringUnit must be an object")
    value = unit.get("value")
    if value is not None and not isinstance(value, str):
        raise CatalogError("stringUnit value must be a string")
    return value


def _looks_like_xcstrings(data: Any) -> bool:
    return isinstance(data, Mapping) and "strings" in data and "sourceLanguage" in data


def _entry_from_value(value: Any, comment: str | None = None) -> Entry:
    if isinstance(value, str):
        return Entry.single(value, comment=comment)
    if isinstance(value, Mapping):
        return Entry.plural(value, comment=comment)
    raise CatalogError(f"Unsupported message value: {value!r}")


def load_catalog(path: Path | str, default_locale: str = "en") -> Catalog:
    """Load a catalog from a file.

    Args:
        path: Path to a .json, .yaml/.yml or .xcstrings file.
        default_locale: Default locale when the file does not name one.

    Returns:
        Loaded catalog.
    """
    return CatalogLoader(default_locale).load_file(Path(path))


def load_catalog_from_dict(data: Mapping[str, Any], default_locale: str = "en") -> Catalog:
    """Build a catalog from the dictionary layout."""
    return CatalogLoader(default_locale).load_dict(data)


def load_catalog_from_xcstrings(data: Mapping[str, Any]) -> Catalog:
    """Build a catalog from a parsed Xcode String Catalog document."""
    return CatalogLoader().load_xcstrings(data)
