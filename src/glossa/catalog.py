"""Immutable message catalog and locale-aware lookup.

A ``Catalog`` maps locale codes to keys to ``Entry`` values. It is built
once and never mutated afterwards; every mapping it exposes is a read-only
proxy, so a single instance can be shared by any number of threads.

``CatalogStore`` performs lookups against a catalog, walking the fallback
chain: exact locale, shorter locale prefixes, then the default locale.

Example:
    catalog = (
        Catalog.builder("en")
        .add("en", "greeting_message", "Hello!")
        .add_plural("en", "numberOfSongs", one="%lld song", other="%lld songs")
        .add("fr", "greeting_message", "Bonjour !")
        .build()
    )

    store = CatalogStore(catalog)
    store.lookup("numberOfSongs", "fr-CA")  # falls back to "en"
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from glossa.exceptions import CatalogError, KeyNotFoundError
from glossa.locale import get_fallback_chain, normalize_locale
from glossa.types import Entry, PluralCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    """Translation catalog for all locales.

    Attributes:
        locales: Locale code to key to entry mapping.
        default_locale: Locale used when a key is missing elsewhere.
        metadata: Additional catalog metadata (source, version, ...).
    """

    locales: Mapping[str, Mapping[str, Entry]] = field(default_factory=dict)
    default_locale: str = "en"
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen: dict[str, Mapping[str, Entry]] = {}
        for locale, messages in self.locales.items():
            code = normalize_locale(locale)
            entries = dict(frozen.get(code, {}))
            for key, value in messages.items():
                try:
                    entries[key] = Entry.from_value(value)
                except CatalogError as e:
                    raise CatalogError(
                        f"Invalid entry {key!r} in locale {code!r}: {e}",
                        key=key,
                        locale=code,
                    ) from e
            frozen[code] = MappingProxyType(entries)

        object.__setattr__(self, "locales", MappingProxyType(frozen))
        object.__setattr__(self, "default_locale", normalize_locale(self.default_locale))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

        if frozen and self.default_locale not in frozen:
            logger.warning(
                "Default locale %r has no messages; missing keys cannot fall back",
                self.default_locale,
            )

    def __contains__(self, locale: str) -> bool:
        return normalize_locale(locale) in self.locales

    def __iter__(self) -> Iterator[str]:
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    def get_entry(self, locale: str, key: str) -> Entry | None:
        """Get an entry from exactly one locale, without fallback."""
        messages = self.locales.get(normalize_locale(locale))
        if messages is None:
            return None
        return messages.get(key)

    def has(self, key: str, locale: str | None = None) -> bool:
        """Check if a key is defined in a locale (default: the default locale)."""
        return self.get_entry(locale or self.default_locale, key) is not None

    def keys(self, locale: str | None = None) -> list[str]:
        """Get the keys of one locale, or of all locales combined."""
        if locale is not None:
            return list(self.locales.get(normalize_locale(locale), {}))

        seen: dict[str, None] = {}
        for messages in self.locales.values():
            seen.update(dict.fromkeys(messages))
        return list(seen)

    def missing_keys(self, locale: str) -> list[str]:
        """Get default-locale keys that a locale does not define.

        Every locale is expected to carry the same keys as the default
        locale; anything reported here resolves through fallback instead.
        """
        code = normalize_locale(locale)
        present = self.locales.get(code, {})
        defaults = self.locales.get(self.default_locale, {})
        return [key for key in defaults if key not in present]

    def audit(self) -> dict[str, list[str]]:
        """Report missing keys for every non-default locale."""
        report: dict[str, list[str]] = {}
        for locale in self.locales:
            if locale == self.default_locale:
                continue
            missing = self.missing_keys(locale)
            if missing:
                logger.warning(
                    "Locale %r is missing %d key(s) of %r",
                    locale,
                    len(missing),
                    self.default_locale,
                )
                report[locale] = missing
        return report

    def merge(self, other: "Catalog") -> "Catalog":
        """Merge with another catalog.

        Args:
            other: Catalog to merge (takes precedence).

        Returns:
            New merged catalog.
        """
        locales: dict[str, dict[str, Entry]] = {
            locale: dict(messages) for locale, messages in self.locales.items()
        }
        for locale, messages in other.locales.items():
            locales.setdefault(locale, {}).update(messages)

        return Catalog(
            locales=locales,
            default_locale=other.default_locale,
            metadata={**self.metadata, **other.metadata},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the dictionary shape accepted by the loader."""
        locales: dict[str, dict[str, Any]] = {}
        comments: dict[str, str] = {}
        for locale, messages in self.locales.items():
            locales[locale] = {key: entry.to_value() for key, entry in messages.items()}
            for key, entry in messages.items():
                if entry.comment:
                    comments.setdefault(key, entry.comment)

        data: dict[str, Any] = {
            "default_locale": self.default_locale,
            "locales": locales,
            "metadata": dict(self.metadata),
        }
        if comments:
            data["comments"] = comments
        return data

    def to_json(self, path: Path) -> None:
        """Save to JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)

    @classmethod
    def builder(cls, default_locale: str = "en") -> "CatalogBuilder":
        """Create a catalog builder."""
        return CatalogBuilder(default_locale)


class CatalogBuilder:
    """Fluent builder for Catalog."""

    def __init__(self, default_locale: str = "en") -> None:
        self._default_locale = default_locale
        self._locales: dict[str, dict[str, Entry]] = {}
        self._metadata: dict[str, Any] = {}

    def add(
        self,
        locale: str,
        key: str,
        value: Entry | str | Mapping[str, str],
        comment: str | None = None,
    ) -> "CatalogBuilder":
        """Add a message."""
        entry = Entry.from_value(value)
        if comment is not None:
            entry = Entry(template=entry.template, variants=dict(entry.variants), comment=comment)
        self._locales.setdefault(normalize_locale(locale), {})[key] = entry
        return self

    def add_plural(
        self,
        locale: str,
        key: str,
        comment: str | None = None,
        **variants: str,
    ) -> "CatalogBuilder":
        """Add a plural message from category keyword arguments."""
        entry = Entry.plural(
            {PluralCategory.parse(category): text for category, text in variants.items()},
            comment=comment,
        )
        self._locales.setdefault(normalize_locale(locale), {})[key] = entry
        return self

    def add_locale(
        self,
        locale: str,
        messages: Mapping[str, Entry | str | Mapping[str, str]],
    ) -> "CatalogBuilder":
        """Add every message of one locale."""
        for key, value in messages.items():
            self.add(locale, key, value)
        return self

    def with_metadata(self, **metadata: Any) -> "CatalogBuilder":
        """Add metadata."""
        self._metadata.update(metadata)
        return self

    def build(self) -> Catalog:
        """Build the catalog."""
        return Catalog(
            locales={locale: dict(messages) for locale, messages in self._locales.items()},
            default_locale=self._default_locale,
            metadata=self._metadata.copy(),
        )


class CatalogStore:
    """Locale-aware lookup over an immutable catalog.

    Example:
        store = CatalogStore(catalog)
        entry = store.lookup("greeting_message", "en-GB")
    """

    def __init__(self, catalog: Catalog, default_locale: str | None = None) -> None:
        """Initialize store.

        Args:
            catalog: Catalog to read from.
            default_locale: Overrides the catalog's default locale.
        """
        self._catalog = catalog
        self._default_locale = (
            normalize_locale(default_locale) if default_locale else catalog.default_locale
        )

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def default_locale(self) -> str:
        return self._default_locale

    def locales(self) -> list[str]:
        """Get all locales defined in the catalog."""
        return list(self._catalog.locales)

    def keys(self, locale: str | None = None) -> list[str]:
        return self._catalog.keys(locale)

    def has(self, key: str, locale: str | None = None) -> bool:
        """Check if a key resolves for a locale, fallback included."""
        for candidate in self.fallback_chain(locale or self._default_locale):
            if self._catalog.get_entry(candidate, key) is not None:
                return True
        return False

    def missing_keys(self, locale: str) -> list[str]:
        return self._catalog.missing_keys(locale)

    def fallback_chain(self, locale: str) -> list[str]:
        """Get the locales tried, in order, when looking up in a locale."""
        return get_fallback_chain(locale, self._default_locale)

    def lookup(self, key: str, locale: str | None = None) -> Entry:
        """Look up an entry.

        Args:
            key: Message key.
            locale: Requested locale (default: the default locale).

        Returns:
            The entry from the first locale in the fallback chain defining it.

        Raises:
            KeyNotFoundError: If no locale in the chain defines the key.
        """
        requested = locale or self._default_locale
        chain = self.fallback_chain(requested)

        for candidate in chain:
            entry = self._catalog.get_entry(candidate, key)
            if entry is not None:
                if candidate != chain[0]:
                    logger.debug("Key %r resolved from %r for locale %r", key, candidate, requested)
                return entry

        raise KeyNotFoundError(key, requested, chain)
