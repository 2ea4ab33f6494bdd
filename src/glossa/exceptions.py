"""Exception hierarchy for glossa.

Every failure the engine can produce is a typed subclass of
``GlossaError``. Errors carry the offending key, locale, template or
position as attributes so callers can react without parsing messages.

Hierarchy:
    GlossaError
    ├── CatalogError
    │   └── CatalogLoadError
    ├── InvalidLocaleError
    ├── ResolutionError
    │   ├── KeyNotFoundError
    │   └── MissingPluralVariantError
    ├── FormatError
    │   ├── MalformedTemplateError
    │   ├── ArgumentCountMismatchError
    │   ├── UnsupportedSpecifierError
    │   └── ArgumentTypeError
    └── ConfigError
        └── ConfigValidationError
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


class GlossaError(Exception):
    """Base exception for all glossa errors."""

    pass


# =============================================================================
# Catalog Errors
# =============================================================================


class CatalogError(GlossaError):
    """The catalog data does not satisfy the catalog model."""

    def __init__(self, message: str, *, key: str | None = None, locale: str | None = None) -> None:
        self.key = key
        self.locale = locale
        super().__init__(message)


class CatalogLoadError(CatalogError):
    """A serialized catalog could not be read or parsed."""

    def __init__(self, message: str, *, source: str | Path | None = None) -> None:
        self.source = str(source) if source is not None else None
        if self.source:
            message = f"{message} (source: {self.source})"
        super().__init__(message)


# =============================================================================
# Locale Errors
# =============================================================================


class InvalidLocaleError(GlossaError, ValueError):
    """A locale code has no language subtag."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid locale code: {code!r}")


# =============================================================================
# Resolution Errors
# =============================================================================


class ResolutionError(GlossaError):
    """Base class for lookup and plural selection failures."""

    pass


class KeyNotFoundError(ResolutionError, LookupError):
    """Key is absent from the requested locale chain and the default locale."""

    def __init__(self, key: str, locale: str, tried: Sequence[str] = ()) -> None:
        self.key = key
        self.locale = locale
        self.tried = tuple(tried)
        chain = " -> ".join(self.tried) if self.tried else locale
        super().__init__(f"Key {key!r} not found for locale {locale!r} (tried: {chain})")


class MissingPluralVariantError(ResolutionError, LookupError):
    """Neither the computed plural category nor "other" has a template."""

    def __init__(self, category: str, locale: str, key: str | None = None) -> None:
        self.category = category
        self.locale = locale
        self.key = key
        subject = f"entry {key!r}" if key else "entry"
        super().__init__(
            f"No {category!r} or 'other' variant in {subject} for locale {locale!r}"
        )


# =============================================================================
# Format Errors
# =============================================================================


class FormatError(GlossaError, ValueError):
    """Base class for template parsing and rendering failures."""

    def __init__(self, message: str, *, template: str | None = None) -> None:
        self.template = template
        super().__init__(message)


class MalformedTemplateError(FormatError):
    """Template cannot be parsed, e.g. positional and implicit specifiers are mixed."""

    def __init__(self, reason: str, template: str, offset: int | None = None) -> None:
        self.reason = reason
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Malformed template{where}: {reason}: {template!r}", template=template)


class ArgumentCountMismatchError(FormatError):
    """Fewer arguments were supplied than the template requires."""

    def __init__(self, expected: int, actual: int, template: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Template requires {expected} argument(s), got {actual}: {template!r}",
            template=template,
        )


class UnsupportedSpecifierError(FormatError):
    """A specifier uses a conversion character the engine does not know."""

    def __init__(self, specifier: str, template: str, offset: int | None = None) -> None:
        self.specifier = specifier
        self.offset = offset
        super().__init__(
            f"Unsupported format specifier {specifier!r} in {template!r}",
            template=template,
        )


class ArgumentTypeError(FormatError, TypeError):
    """An argument does not match the kind its specifier expects."""

    def __init__(self, message: str, *, value: Any = None, template: str | None = None) -> None:
        self.value = value
        super().__init__(message, template=template)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(GlossaError):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")
