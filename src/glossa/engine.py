"""Resolution API.

``Localizer`` resolves a key, locale, optional quantity and argument list
into a formatted string:

    lookup (CatalogStore) -> select (PluralResolver) -> render (FormatEngine)

The catalog is injected at construction and never mutated. Hot reload
swaps the whole catalog reference at once; each ``resolve`` call reads
that reference exactly once, so concurrent readers need no locking and
never see a half-updated catalog.

Example:
    localizer = Localizer(load_catalog("Localizable.xcstrings"))

    localizer.resolve("numberOfSongs", "en", quantity=1, args=[1])
    # -> "1 song"
    localizer.resolve("numberOfItems", "en", args=[4, "400"])
    # -> "4 items, KES 400"
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Sequence

from glossa.catalog import Catalog, CatalogStore
from glossa.config import EngineConfig
from glossa.formatting import FormatEngine
from glossa.loader import load_catalog
from glossa.plurals import PluralResolver, PluralRule, get_plural_rule
from glossa.types import Arg, Entry, FloatArg, IntArg, coerce_arg

logger = logging.getLogger(__name__)


class Localizer:
    """Localized string resolution engine.

    Thread-safe: any number of threads may call ``resolve`` while another
    thread calls ``swap_catalog``.
    """

    def __init__(
        self,
        catalog: Catalog,
        config: EngineConfig | None = None,
        plural_rule: PluralRule | None = None,
    ) -> None:
        """Initialize localizer.

        Args:
            catalog: Loaded catalog.
            config: Engine configuration (defaults when None).
            plural_rule: Plural strategy overriding ``config.plural_rule``.
        """
        self._config = config or EngineConfig()
        self._plurals = PluralResolver(plural_rule or get_plural_rule(self._config.plural_rule))
        self._formatter = FormatEngine(
            float_precision=self._config.float_precision,
            group_digits=self._config.group_digits,
            localize_numbers=self._config.localize_numbers,
        )
        self._store = CatalogStore(catalog, self._config.default_locale)
        self._swap_lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str | Path, config: EngineConfig | None = None) -> "Localizer":
        """Create a localizer from a catalog file."""
        config = config or EngineConfig()
        return cls(load_catalog(path, default_locale=config.default_locale or "en"), config)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def catalog(self) -> Catalog:
        return self._store.catalog

    @property
    def store(self) -> CatalogStore:
        return self._store

    @property
    def default_locale(self) -> str:
        return self._store.default_locale

    def swap_catalog(self, catalog: Catalog) -> Catalog:
        """Atomically replace the catalog.

        Args:
            catalog: New catalog.

        Returns:
            The previous catalog.
        """
        store = CatalogStore(catalog, self._config.default_locale)
        # Serializes writers only; readers never take this lock
        with self._swap_lock:
            previous = self._store
            self._store = store

        logger.info(
            "Swapped catalog: %d locale(s), %d key(s)",
            len(catalog.locales),
            len(catalog.keys()),
        )
        return previous.catalog

    def lookup(self, key: str, locale: str | None = None) -> Entry:
        """Look up the entry for a key (see ``CatalogStore.lookup``)."""
        return self._store.lookup(key, locale)

    def select(self, entry: Entry, quantity: float | int | None, locale: str | None = None) -> str:
        """Select an entry's template for a quantity (see ``PluralResolver.select``)."""
        return self._plurals.select(entry, quantity, locale or self.default_locale)

    def render(
        self,
        template: str,
        args: Sequence[Arg | int | float | str] | None = None,
        locale: str | None = None,
    ) -> str:
        """Render a template (see ``FormatEngine.render``)."""
        return self._formatter.render(template, args, locale)

    def resolve(
        self,
        key: str,
        locale: str | None = None,
        quantity: float | int | None = None,
        args: Sequence[Arg | int | float | str] | None = None,
    ) -> str:
        """Resolve a key to a formatted, pluralized string.

        Args:
            key: Message key.
            locale: Requested locale (default: the default locale).
            quantity: Count driving plural selection. For plural entries,
                when omitted, the first numeric argument is used.
            args: Format arguments, tagged Args or plain int/float/str.

        Returns:
            The formatted string.

        Raises:
            KeyNotFoundError: If the key is not in the locale chain.
            MissingPluralVariantError: If no plural template applies.
            FormatError: If the template cannot be rendered with the args.
        """
        store = self._store
        requested = locale or store.default_locale
        entry = store.lookup(key, requested)

        values = [coerce_arg(arg) for arg in (args or ())]
        if entry.is_plural and quantity is None:
            quantity = _first_quantity(values)

        template = self._plurals.select(entry, quantity, requested, key=key)
        if entry.is_plural:
            logger.debug("Key %r with quantity %r in %r selected %r", key, quantity, requested, template)

        return self._formatter.render(template, values, requested)

    def has(self, key: str, locale: str | None = None) -> bool:
        """Check if a key resolves for a locale."""
        return self._store.has(key, locale)


def _first_quantity(values: Sequence[Arg]) -> float | int | None:
    for value in values:
        if isinstance(value, (IntArg, FloatArg)):
            return value.value
    return None
