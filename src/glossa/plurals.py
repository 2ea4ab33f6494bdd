"""Plural category selection.

The plural rule is a pluggable strategy. Three rules are provided:

- ``OneOtherRule``: "one" for exactly 1, "other" for everything else.
  This is the default.
- ``CLDRPluralRules``: CLDR cardinal rule text for common languages,
  compiled by Babel.
- ``BabelPluralRule``: full CLDR data through Babel.

Example:
    resolver = PluralResolver(CLDRPluralRules())
    entry = Entry.plural({"one": "%lld song", "other": "%lld songs"})
    resolver.select(entry, 3, "en")  # "%lld songs"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Callable, Mapping, Protocol, runtime_checkable

from babel import Locale
from babel.core import UnknownLocaleError
from babel.plural import PluralRule as CompiledPluralRule
from babel.plural import extract_operands

from glossa.exceptions import MissingPluralVariantError
from glossa.locale import language_of
from glossa.types import Entry, PluralCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluralOperands:
    """CLDR plural operands of a number.

    See: https://unicode.org/reports/tr35/tr35-numbers.html#Operands

    Example:
        PluralOperands.from_number(1.5)
        # PluralOperands(n=Decimal('1.5'), i=1, v=1, w=1, f=5, t=5)
    """

    n: int | Decimal  # absolute value
    i: int  # integer digits
    v: int  # visible fraction digits, with trailing zeros
    w: int  # visible fraction digits, without trailing zeros
    f: int  # fraction digits, with trailing zeros
    t: int  # fraction digits, without trailing zeros

    @classmethod
    def from_number(cls, number: float | int | Decimal) -> "PluralOperands":
        n, i, v, w, f, t, *_ = extract_operands(number)
        return cls(n=n, i=i, v=v, w=w, f=f, t=t)


@runtime_checkable
class PluralRule(Protocol):
    """Strategy mapping a quantity to a plural category for a locale."""

    def category(self, quantity: float | int, locale: str) -> PluralCategory:
        ...


class OneOtherRule:
    """Two-form rule: "one" iff the quantity equals 1, "other" otherwise."""

    def category(self, quantity: float | int, locale: str) -> PluralCategory:
        return PluralCategory.ONE if quantity == 1 else PluralCategory.OTHER


# A language rule maps a quantity to a category (or its name)
LanguageRule = Callable[[float | int], "PluralCategory | str"]

# CLDR cardinal rule text per group of languages; "other" is implied.
# https://www.unicode.org/cldr/charts/latest/supplemental/language_plural_rules.html
_CLDR_RULES: list[tuple[tuple[str, ...], dict[str, str]]] = [
    (
        ("en", "de", "nl", "it", "ca", "sv", "fi", "et", "sw"),
        {"one": "i = 1 and v = 0"},
    ),
    (("es", "no", "nb", "hu", "tr", "el"), {"one": "n = 1"}),
    (("da",), {"one": "n = 1 or t != 0 and i = 0,1"}),
    (("fr",), {"one": "i = 0,1"}),
    (("pt",), {"one": "i = 0..1"}),
    (
        ("ru", "uk", "be"),
        {
            "one": "v = 0 and i % 10 = 1 and i % 100 != 11",
            "few": "v = 0 and i % 10 = 2..4 and i % 100 != 12..14",
            "many": "v = 0 and i % 10 = 0 or v = 0 and i % 10 = 5..9 or v = 0 and i % 100 = 11..14",
        },
    ),
    (
        ("hr", "sr", "bs"),
        {
            "one": "v = 0 and i % 10 = 1 and i % 100 != 11 or f % 10 = 1 and f % 100 != 11",
            "few": "v = 0 and i % 10 = 2..4 and i % 100 != 12..14 or f % 10 = 2..4 and f % 100 != 12..14",
        },
    ),
    (
        ("pl",),
        {
            "one": "i = 1 and v = 0",
            "few": "v = 0 and i % 10 = 2..4 and i % 100 != 12..14",
            "many": "v = 0 and i != 1 and i % 10 = 0..1 or v = 0 and i % 10 = 5..9 or v = 0 and i % 100 = 12..14",
        },
    ),
    (
        ("cs", "sk"),
        {"one": "i = 1 and v = 0", "few": "i = 2..4 and v = 0", "many": "v != 0"},
    ),
    (
        ("ar",),
        {
            "zero": "n = 0",
            "one": "n = 1",
            "two": "n = 2",
            "few": "n % 100 = 3..10",
            "many": "n % 100 = 11..99",
        },
    ),
    (("he",), {"one": "i = 1 and v = 0", "two": "i = 2 and v = 0"}),
    (
        ("ro",),
        {"one": "i = 1 and v = 0", "few": "v != 0 or n = 0 or n != 1 and n % 100 = 1..19"},
    ),
    (("ja", "ko", "zh", "vi", "th", "id", "ms"), {}),
]


class CLDRPluralRules:
    """CLDR cardinal rules for a fixed set of languages, selected by language subtag.

    Rules are written in CLDR rule syntax and compiled by Babel, so adding a
    language needs only its rule text. Languages without a rule fall back to
    ``OneOtherRule``.

    Example:
        rules = CLDRPluralRules()
        rules.category(5, "ru")  # PluralCategory.MANY
        rules.register_rule("lt", {"one": "n % 10 = 1 and n % 100 != 11..19"})
    """

    def __init__(self) -> None:
        self._rules: dict[str, LanguageRule] = {}
        self._fallback = OneOtherRule()
        for languages, rule_text in _CLDR_RULES:
            compiled = CompiledPluralRule(rule_text)
            for language in languages:
                self._rules[language] = compiled

    def category(self, quantity: float | int, locale: str) -> PluralCategory:
        """Get the plural category of a quantity.

        Args:
            quantity: The number.
            locale: Locale code (e.g., "en", "ru-RU").

        Returns:
            Plural category.
        """
        rule = self._rules.get(language_of(locale))
        if rule is None:
            return self._fallback.category(quantity, locale)
        return PluralCategory(rule(quantity))

    def get_supported_languages(self) -> list[str]:
        """Get supported language codes."""
        return list(self._rules)

    def register_rule(self, language: str, rule: LanguageRule | Mapping[str, str]) -> None:
        """Register a rule for a language.

        Args:
            language: Language subtag.
            rule: CLDR rule text per category, or a callable returning
                the category of a quantity.

        Raises:
            ValueError: If the rule text names an unknown category.
            babel.plural.RuleError: If the rule text cannot be parsed.
        """
        if isinstance(rule, Mapping):
            rule = CompiledPluralRule(rule)
        self._rules[language.lower()] = rule


@lru_cache(maxsize=256)
def _babel_locale(locale: str) -> Locale:
    return Locale.parse(locale, sep="-")


class BabelPluralRule:
    """CLDR plural rules for every locale Babel knows.

    Unknown locales fall back to ``OneOtherRule``.
    """

    def __init__(self) -> None:
        self._fallback = OneOtherRule()

    def category(self, quantity: float | int, locale: str) -> PluralCategory:
        try:
            babel_locale = _babel_locale(locale)
        except (UnknownLocaleError, ValueError):
            logger.debug("No CLDR plural data for %r, using one/other", locale)
            return self._fallback.category(quantity, locale)
        return PluralCategory(babel_locale.plural_form(abs(quantity)))


_RULES: dict[str, Callable[[], PluralRule]] = {
    "one_other": OneOtherRule,
    "cldr": CLDRPluralRules,
    "babel": BabelPluralRule,
}


def get_plural_rule(name: str) -> PluralRule:
    """Create a plural rule by name ("one_other", "cldr" or "babel").

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return _RULES[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown plural rule {name!r}; expected one of {sorted(_RULES)}"
        ) from None


def available_plural_rules() -> list[str]:
    """Get the names accepted by ``get_plural_rule``."""
    return sorted(_RULES)


class PluralResolver:
    """Selects the template of an entry for a quantity.

    Example:
        resolver = PluralResolver()
        resolver.select(entry, 1, "en")  # the "one" variant
    """

    def __init__(self, rule: PluralRule | None = None) -> None:
        self._rule = rule or OneOtherRule()

    @property
    def rule(self) -> PluralRule:
        return self._rule

    def category(self, quantity: float | int | None, locale: str) -> PluralCategory:
        """Get the plural category of a quantity; None selects "other"."""
        if quantity is None:
            return PluralCategory.OTHER
        return self._rule.category(quantity, locale)

    def select(
        self,
        entry: Entry,
        quantity: float | int | None,
        locale: str,
        key: str | None = None,
    ) -> str:
        """Select the template for a quantity.

        Args:
            entry: Catalog entry.
            quantity: Count driving plural selection (ignored for single templates).
            locale: Locale whose plural rule applies.
            key: Entry key, only used in error messages.

        Returns:
            The template.

        Raises:
            MissingPluralVariantError: If neither the computed category nor
                "other" has a template.
        """
        if entry.template is not None:
            return entry.template

        category = self.category(quantity, locale)
        template = entry.variants.get(category)
        if template is None:
            template = entry.variants.get(PluralCategory.OTHER)
            if template is None:
                raise MissingPluralVariantError(category.value, locale, key)
            logger.debug(
                "No %r variant for %r in %r, using 'other'",
                category.value,
                key,
                locale,
            )
        return template
