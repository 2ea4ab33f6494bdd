"""Locale identifiers and fallback chains.

Locale codes are accepted with either separator ("en_GB" or "en-GB") and
normalized to the hyphenated form used by String Catalogs.
"""

from __future__ import annotations

from glossa.exceptions import InvalidLocaleError


def normalize_locale(code: str) -> str:
    """Normalize a locale code ("en_GB" -> "en-GB").

    Raises:
        InvalidLocaleError: If the code is empty or only separators.
    """
    normalized = code.strip().replace("_", "-")
    if not normalized.strip("-"):
        raise InvalidLocaleError(code)
    return normalized


class LocaleInfo:
    """Parsed locale identifier."""

    def __init__(self, code: str):
        """Initialize locale info.

        Args:
            code: Locale code (e.g., "en", "en-GB", "zh-Hans-CN")
        """
        self.code = normalize_locale(code)
        self.subtags = tuple(part for part in self.code.split("-") if part)
        self.language = self.subtags[0].lower()

        # "zh-Hans" has a script, "en-GB" a region, "zh-Hans-CN" both
        self.script = ""
        self.region = ""
        for part in self.subtags[1:]:
            if len(part) == 4 and part.isalpha() and not self.script:
                self.script = part.title()
            elif (len(part) == 2 and part.isalpha()) or (len(part) == 3 and part.isdigit()):
                self.region = part.upper()

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"LocaleInfo({self.code!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LocaleInfo):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)

    def truncations(self) -> list[str]:
        """Get the code followed by progressively shorter prefixes.

        Example:
            LocaleInfo("zh-Hans-CN").truncations()
            # ["zh-Hans-CN", "zh-Hans", "zh"]
        """
        return ["-".join(self.subtags[:size]) for size in range(len(self.subtags), 0, -1)]


def get_fallback_chain(locale: str, default_locale: str | None = None) -> list[str]:
    """Get the fallback chain for a locale.

    The chain goes from specific to general, ending with the default:
    en-GB -> en -> default

    Args:
        locale: Starting locale.
        default_locale: Locale tried last.

    Returns:
        List of normalized locale codes to try in order.
    """
    chain = LocaleInfo(locale).truncations()

    if default_locale:
        default = normalize_locale(default_locale)
        if default not in chain:
            chain.append(default)

    return chain


def language_of(locale: str) -> str:
    """Get the language subtag of a locale code."""
    return LocaleInfo(locale).language
