"""Core value types shared by the catalog, plural and formatting modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

from glossa.exceptions import ArgumentTypeError, CatalogError


class PluralCategory(str, Enum):
    """CLDR plural categories."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "PluralCategory | str") -> "PluralCategory":
        """Convert a category name to a PluralCategory.

        Raises:
            ValueError: If the name is not a CLDR category.
        """
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class SpecifierKind(str, Enum):
    """Kind of value a format specifier substitutes."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"


# =============================================================================
# Catalog Entries
# =============================================================================


@dataclass(frozen=True)
class Entry:
    """A localized value for one key in one locale.

    Either a single ``template`` or a mapping of plural ``variants``.
    A plural entry must always provide the "other" variant.

    Attributes:
        template: Single string template (None for plural entries).
        variants: Plural category to template mapping.
        comment: Optional note for translators.
    """

    template: str | None = None
    variants: Mapping[PluralCategory, str] = field(default_factory=dict)
    comment: str | None = None

    def __post_init__(self) -> None:
        if self.template is not None and self.variants:
            raise CatalogError("An entry is either a single template or plural variants, not both")

        if self.template is None:
            if not self.variants:
                raise CatalogError("An entry needs a template or plural variants")

            variants: dict[PluralCategory, str] = {}
            for category, text in self.variants.items():
                try:
                    parsed = PluralCategory.parse(category)
                except ValueError:
                    raise CatalogError(f"Unknown plural category: {category!r}") from None
                if not isinstance(text, str):
                    raise CatalogError(f"Plural variant {parsed.value!r} must be a string")
                variants[parsed] = text

            if PluralCategory.OTHER not in variants:
                raise CatalogError("Plural entries must define the 'other' variant")

            object.__setattr__(self, "variants", MappingProxyType(variants))
        elif not isinstance(self.template, str):
            raise CatalogError("Entry template must be a string")
        else:
            object.__setattr__(self, "variants", MappingProxyType({}))

    @property
    def is_plural(self) -> bool:
        """Check if the entry has plural variants."""
        return bool(self.variants)

    @classmethod
    def single(cls, template: str, comment: str | None = None) -> "Entry":
        """Create a single-template entry."""
        return cls(template=template, comment=comment)

    @classmethod
    def plural(
        cls,
        variants: Mapping[PluralCategory | str, str],
        comment: str | None = None,
    ) -> "Entry":
        """Create a plural entry."""
        return cls(variants=dict(variants), comment=comment)

    @classmethod
    def from_value(cls, value: "str | Mapping[str, str] | Entry") -> "Entry":
        """Build an entry from a plain string or a category mapping."""
        if isinstance(value, Entry):
            return value
        if isinstance(value, str):
            return cls.single(value)
        if isinstance(value, Mapping):
            return cls.plural(value)
        raise CatalogError(f"Cannot build an entry from {type(value).__name__}")

    def to_value(self) -> str | dict[str, str]:
        """Convert back to a plain string or category mapping."""
        if self.template is not None:
            return self.template
        return {category.value: text for category, text in self.variants.items()}


# =============================================================================
# Format Specifiers
# =============================================================================


@dataclass(frozen=True)
class FormatSpecifier:
    """One parsed substitution point in a template.

    Attributes:
        kind: Value kind the specifier expects.
        conversion: Conversion character (e.g. "d", "f", "@").
        ordinal: 1-based order of appearance among specifiers.
        position: Explicit 1-based argument position, or None.
        flags: printf flags ("-", "+", " ", "0", "'").
        width: Minimum field width.
        precision: Digits after the decimal point for floats.
        length: Length modifier (e.g. "ll", "l"); ignored when rendering.
        start: Offset of the specifier in the template.
        end: Offset one past the specifier.
        text: Raw specifier text.
    """

    kind: SpecifierKind
    conversion: str
    ordinal: int
    position: int | None = None
    flags: str = ""
    width: int | None = None
    precision: int | None = None
    length: str = ""
    start: int = 0
    end: int = 0
    text: str = ""

    @property
    def is_positional(self) -> bool:
        return self.position is not None

    @property
    def argument_index(self) -> int:
        """0-based index of the argument this specifier consumes."""
        return (self.position if self.position is not None else self.ordinal) - 1


# =============================================================================
# Arguments
# =============================================================================


@dataclass(frozen=True)
class IntArg:
    """Integer argument."""

    value: int

    @property
    def kind(self) -> SpecifierKind:
        return SpecifierKind.INTEGER


@dataclass(frozen=True)
class FloatArg:
    """Floating-point argument."""

    value: float

    @property
    def kind(self) -> SpecifierKind:
        return SpecifierKind.FLOAT


@dataclass(frozen=True)
class StringArg:
    """String argument."""

    value: str

    @property
    def kind(self) -> SpecifierKind:
        return SpecifierKind.STRING


Arg = Union[IntArg, FloatArg, StringArg]


def coerce_arg(value: Any) -> Arg:
    """Wrap a plain Python value in its tagged argument type.

    Args:
        value: An Arg, int, float or str.

    Returns:
        The tagged argument.

    Raises:
        ArgumentTypeError: For booleans and unsupported types.

    Example:
        coerce_arg(4)       # IntArg(value=4)
        coerce_arg("400")   # StringArg(value='400')
    """
    if isinstance(value, (IntArg, FloatArg, StringArg)):
        return value
    # bool is an int subclass, but "%d" of True is almost always a bug
    if isinstance(value, bool):
        raise ArgumentTypeError("Boolean arguments are not supported", value=value)
    if isinstance(value, int):
        return IntArg(value)
    if isinstance(value, float):
        return FloatArg(value)
    if isinstance(value, str):
        return StringArg(value)
    raise ArgumentTypeError(
        f"Unsupported argument type: {type(value).__name__}",
        value=value,
    )
