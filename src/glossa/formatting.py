"""Format specifier parsing and rendering.

Templates use printf-style specifiers as found in String Catalogs::

    %[position$][flags][width][.precision][length]conversion

Conversions:
    d i u        integer  ("%d", "%lld", "%1$lld")
    f F e E g G  float    ("%f", "%lf", "%.2f")
    @ s          string   ("%@", "%2$@")
    %%           a literal "%"

Flags are "-" (left-justify), "+" and " " (sign), "0" (zero pad) and
"'" (locale digit grouping). Length modifiers are accepted and ignored.
Specifiers in one template are either all positional or all implicit.

Example:
    engine = FormatEngine()
    engine.render("%1$lld items, KES %2$@", [4, "400"])
    # -> "4 items, KES 400"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from glossa.exceptions import (
    ArgumentCountMismatchError,
    ArgumentTypeError,
    MalformedTemplateError,
    UnsupportedSpecifierError,
)
from glossa.locale import LocaleInfo
from glossa.types import (
    Arg,
    FormatSpecifier,
    IntArg,
    SpecifierKind,
    StringArg,
    coerce_arg,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Locale Number Symbols
# =============================================================================


@dataclass(frozen=True)
class LocaleFormats:
    """Locale-specific number symbols.

    Attributes:
        decimal_separator: Decimal point character.
        thousands_separator: Thousands grouping character.
    """

    decimal_separator: str = "."
    thousands_separator: str = ","


_LOCALE_FORMATS: dict[str, LocaleFormats] = {
    "en": LocaleFormats(),
    "en-IN": LocaleFormats(),
    "ko": LocaleFormats(),
    "ja": LocaleFormats(),
    "zh": LocaleFormats(),
    "th": LocaleFormats(),
    "ar": LocaleFormats(),
    "sw": LocaleFormats(),
    "de": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "de-CH": LocaleFormats(decimal_separator=".", thousands_separator="’"),
    "fr": LocaleFormats(decimal_separator=",", thousands_separator=" "),
    "es": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "pt": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "it": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "nl": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "ru": LocaleFormats(decimal_separator=",", thousands_separator=" "),
    "pl": LocaleFormats(decimal_separator=",", thousands_separator=" "),
    "sv": LocaleFormats(decimal_separator=",", thousands_separator=" "),
    "vi": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "id": LocaleFormats(decimal_separator=",", thousands_separator="."),
    "tr": LocaleFormats(decimal_separator=",", thousands_separator="."),
}


def get_locale_formats(locale: str | None) -> LocaleFormats:
    """Get number symbols for a locale.

    Args:
        locale: Locale code (None for the neutral "." / "," symbols).

    Returns:
        LocaleFormats instance.
    """
    if locale:
        for candidate in LocaleInfo(locale).truncations():
            if candidate in _LOCALE_FORMATS:
                return _LOCALE_FORMATS[candidate]
    return _LOCALE_FORMATS["en"]


def register_locale_formats(locale: str, formats: LocaleFormats) -> None:
    """Register number symbols for a locale."""
    _LOCALE_FORMATS[LocaleInfo(locale).code] = formats


# =============================================================================
# Parsing
# =============================================================================


_SPECIFIER_RE = re.compile(
    r"""
    %
    (?:(?P<position>\d+)\$)?
    (?P<flags>[-+ 0']*)
    (?P<width>\d+)?
    (?:\.(?P<precision>\d*))?
    (?P<length>hh|h|ll|l|q|L|z|t|j)?
    (?P<conversion>.)?
    """,
    re.VERBOSE | re.DOTALL,
)

_CONVERSIONS: dict[str, SpecifierKind] = {
    "d": SpecifierKind.INTEGER,
    "i": SpecifierKind.INTEGER,
    "u": SpecifierKind.INTEGER,
    "f": SpecifierKind.FLOAT,
    "F": SpecifierKind.FLOAT,
    "e": SpecifierKind.FLOAT,
    "E": SpecifierKind.FLOAT,
    "g": SpecifierKind.FLOAT,
    "G": SpecifierKind.FLOAT,
    "@": SpecifierKind.STRING,
    "s": SpecifierKind.STRING,
}


@lru_cache(maxsize=1024)
def parse_template(template: str) -> tuple[FormatSpecifier, ...]:
    """Parse the format specifiers of a template, left to right.

    Args:
        template: Template string.

    Returns:
        Specifiers in order of appearance ("%%" is not a specifier).

    Raises:
        MalformedTemplateError: On a truncated specifier, position 0, or
            a mix of positional and implicit specifiers.
        UnsupportedSpecifierError: On an unknown conversion character.
    """
    specifiers: list[FormatSpecifier] = []
    index = template.find("%")

    while index != -1:
        if template.startswith("%%", index):
            index = template.find("%", index + 2)
            continue

        match = _SPECIFIER_RE.match(template, index)
        conversion = match.group("conversion")
        if conversion is None:
            raise MalformedTemplateError("incomplete format specifier", template, index)

        text = match.group(0)
        kind = _CONVERSIONS.get(conversion)
        if kind is None:
            raise UnsupportedSpecifierError(text, template, index)

        position = match.group("position")
        if position is not None and int(position) == 0:
            raise MalformedTemplateError("argument positions start at 1", template, index)

        precision = match.group("precision")
        width = match.group("width")
        specifiers.append(
            FormatSpecifier(
                kind=kind,
                conversion=conversion,
                ordinal=len(specifiers) + 1,
                position=int(position) if position is not None else None,
                flags=match.group("flags"),
                width=int(width) if width else None,
                # "%.f" means precision 0, as in printf
                precision=(int(precision) if precision else 0) if precision is not None else None,
                length=match.group("length") or "",
                start=index,
                end=match.end(),
                text=text,
            )
        )
        index = template.find("%", match.end())

    positional = sum(1 for spec in specifiers if spec.is_positional)
    if 0 < positional < len(specifiers):
        raise MalformedTemplateError(
            "positional and non-positional specifiers are mixed",
            template,
        )

    return tuple(specifiers)


def required_argument_count(specifiers: Sequence[FormatSpecifier]) -> int:
    """Get the number of arguments a parsed template consumes."""
    if not specifiers:
        return 0
    if specifiers[0].is_positional:
        return max(spec.position for spec in specifiers)  # type: ignore[type-var]
    return len(specifiers)


# =============================================================================
# Rendering
# =============================================================================


def _group_digits(digits: str, separator: str) -> str:
    """Insert a separator every three digits from the right."""
    if len(digits) <= 3:
        return digits
    parts = []
    while len(digits) > 3:
        parts.append(digits[-3:])
        digits = digits[:-3]
    parts.append(digits)
    return separator.join(reversed(parts))


def _pad(sign: str, body: str, spec: FormatSpecifier, numeric: bool) -> str:
    """Apply width, justification and zero padding."""
    text = f"{sign}{body}"
    if spec.width is None or len(text) >= spec.width:
        return text
    if "-" in spec.flags:
        return text.ljust(spec.width)
    if numeric and "0" in spec.flags:
        return f"{sign}{body.rjust(spec.width - len(sign), '0')}"
    return text.rjust(spec.width)


def _sign(negative: bool, flags: str) -> str:
    if negative:
        return "-"
    if "+" in flags:
        return "+"
    if " " in flags:
        return " "
    return ""


class FormatEngine:
    """Expands format specifiers against an argument list.

    Example:
        engine = FormatEngine(float_precision=2)
        engine.render("%lf slices", [4.5])  # "4.50 slices"
    """

    def __init__(
        self,
        float_precision: int = 2,
        group_digits: bool = False,
        localize_numbers: bool = False,
    ) -> None:
        """Initialize engine.

        Args:
            float_precision: Precision of float specifiers that declare none.
            group_digits: Group integer digits without the "'" flag.
            localize_numbers: Use the locale's decimal separator for floats.
        """
        self.float_precision = float_precision
        self.group_digits = group_digits
        self.localize_numbers = localize_numbers

    def parse(self, template: str) -> tuple[FormatSpecifier, ...]:
        """Parse the specifiers of a template."""
        return parse_template(template)

    def render(
        self,
        template: str,
        args: Sequence[Arg | int | float | str] | None = None,
        locale: str | None = None,
    ) -> str:
        """Render a template.

        Args:
            template: Template string.
            args: Arguments, as tagged Args or plain int/float/str values.
            locale: Locale whose number symbols apply.

        Returns:
            The formatted string.

        Raises:
            MalformedTemplateError: If the template cannot be parsed.
            UnsupportedSpecifierError: On an unknown conversion.
            ArgumentCountMismatchError: If too few arguments are given.
            ArgumentTypeError: If an argument does not fit its specifier.
        """
        specifiers = parse_template(template)
        values = [coerce_arg(arg) for arg in (args or ())]

        required = required_argument_count(specifiers)
        if len(values) < required:
            raise ArgumentCountMismatchError(required, len(values), template)
        if len(values) > required:
            logger.debug(
                "Ignoring %d extra argument(s) for template %r",
                len(values) - required,
                template,
            )

        if not specifiers:
            return template.replace("%%", "%")

        formats = get_locale_formats(locale)
        pieces: list[str] = []
        cursor = 0
        for spec in specifiers:
            pieces.append(template[cursor:spec.start].replace("%%", "%"))
            pieces.append(self._render_one(spec, values[spec.argument_index], formats, template))
            cursor = spec.end
        pieces.append(template[cursor:].replace("%%", "%"))
        return "".join(pieces)

    def _render_one(
        self,
        spec: FormatSpecifier,
        arg: Arg,
        formats: LocaleFormats,
        template: str,
    ) -> str:
        if spec.kind is SpecifierKind.INTEGER:
            return self._render_integer(spec, arg, formats, template)
        if spec.kind is SpecifierKind.FLOAT:
            return self._render_float(spec, arg, formats, template)
        return self._render_string(spec, arg)

    def _render_integer(
        self,
        spec: FormatSpecifier,
        arg: Arg,
        formats: LocaleFormats,
        template: str,
    ) -> str:
        if not isinstance(arg, IntArg):
            raise ArgumentTypeError(
                f"Specifier {spec.text!r} expects an integer, got {arg.kind.value}",
                value=arg.value,
                template=template,
            )

        digits = str(abs(arg.value))
        if self.group_digits or "'" in spec.flags:
            digits = _group_digits(digits, formats.thousands_separator)
        return _pad(_sign(arg.value < 0, spec.flags), digits, spec, numeric=True)

    def _render_float(
        self,
        spec: FormatSpecifier,
        arg: Arg,
        formats: LocaleFormats,
        template: str,
    ) -> str:
        if isinstance(arg, StringArg):
            raise ArgumentTypeError(
                f"Specifier {spec.text!r} expects a number, got string",
                value=arg.value,
                template=template,
            )

        value = float(arg.value)
        precision = spec.precision if spec.precision is not None else self.float_precision
        body = format(abs(value), f".{precision}{spec.conversion}")

        integer_part, dot, fraction = body.partition(".")
        if "'" in spec.flags and integer_part.isdigit():
            integer_part = _group_digits(integer_part, formats.thousands_separator)
        if dot and self.localize_numbers:
            dot = formats.decimal_separator
        body = f"{integer_part}{dot}{fraction}"

        negative = value < 0 or (value == 0 and str(value).startswith("-"))
        return _pad(_sign(negative, spec.flags), body, spec, numeric=True)

    def _render_string(self, spec: FormatSpecifier, arg: Arg) -> str:
        text = arg.value if isinstance(arg, StringArg) else str(arg.value)
        if spec.precision is not None and spec.conversion == "s":
            text = text[:spec.precision]
        return _pad("", text, spec, numeric=False)


def render(template: str, args: Sequence[Any] | None = None, locale: str | None = None) -> str:
    """Render a template with a default-configured engine."""
    return _default_engine.render(template, args, locale)


_default_engine = FormatEngine()
