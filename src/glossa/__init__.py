"""glossa - Localized string resolution engine.

Resolves a key, locale, quantity and argument list into a formatted,
pluralized string, from an immutable catalog loaded once at startup:
- Locale fallback (en-GB -> en -> default locale)
- Pluggable plural rules (one/other, CLDR tables, Babel)
- printf-style positional and implicit format specifiers
- Catalogs from dictionaries, JSON, YAML and Xcode String Catalogs

Example:
    from glossa import Localizer, load_catalog

    localizer = Localizer(load_catalog("Localizable.xcstrings"))

    localizer.resolve("numberOfSongs", "en", quantity=2, args=[2])
    # -> "2 songs"
"""

from glossa.catalog import Catalog, CatalogBuilder, CatalogStore
from glossa.config import EngineConfig
from glossa.engine import Localizer
from glossa.exceptions import (
    ArgumentCountMismatchError,
    ArgumentTypeError,
    CatalogError,
    CatalogLoadError,
    ConfigError,
    ConfigValidationError,
    FormatError,
    GlossaError,
    InvalidLocaleError,
    KeyNotFoundError,
    MalformedTemplateError,
    MissingPluralVariantError,
    ResolutionError,
    UnsupportedSpecifierError,
)
from glossa.formatting import FormatEngine, LocaleFormats, parse_template, render
from glossa.loader import (
    CatalogLoader,
    load_catalog,
    load_catalog_from_dict,
    load_catalog_from_xcstrings,
)
from glossa.locale import LocaleInfo, get_fallback_chain, normalize_locale
from glossa.plurals import (
    BabelPluralRule,
    CLDRPluralRules,
    OneOtherRule,
    PluralOperands,
    PluralResolver,
    PluralRule,
    get_plural_rule,
)
from glossa.types import (
    Arg,
    Entry,
    FloatArg,
    FormatSpecifier,
    IntArg,
    PluralCategory,
    SpecifierKind,
    StringArg,
    coerce_arg,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Localizer",
    "EngineConfig",
    # Catalog
    "Catalog",
    "CatalogBuilder",
    "CatalogStore",
    "CatalogLoader",
    "load_catalog",
    "load_catalog_from_dict",
    "load_catalog_from_xcstrings",
    # Locales
    "LocaleInfo",
    "get_fallback_chain",
    "normalize_locale",
    # Plurals
    "PluralCategory",
    "PluralOperands",
    "PluralResolver",
    "PluralRule",
    "OneOtherRule",
    "CLDRPluralRules",
    "BabelPluralRule",
    "get_plural_rule",
    # Formatting
    "FormatEngine",
    "LocaleFormats",
    "parse_template",
    "render",
    # Types
    "Entry",
    "FormatSpecifier",
    "SpecifierKind",
    "Arg",
    "IntArg",
    "FloatArg",
    "StringArg",
    "coerce_arg",
    # Errors
    "GlossaError",
    "CatalogError",
    "CatalogLoadError",
    "InvalidLocaleError",
    "ResolutionError",
    "KeyNotFoundError",
    "MissingPluralVariantError",
    "FormatError",
    "MalformedTemplateError",
    "ArgumentCountMismatchError",
    "UnsupportedSpecifierError",
    "ArgumentTypeError",
    "ConfigError",
    "ConfigValidationError",
]
