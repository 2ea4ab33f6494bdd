"""Engine configuration.

Configuration can be built from defaults, a dictionary, a JSON/YAML file
or environment variables.

Example:
    GLOSSA_DEFAULT_LOCALE=en
    GLOSSA_PLURAL_RULE=cldr
    GLOSSA_FLOAT_PRECISION=2

    config = EngineConfig.from_env()
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from glossa.exceptions import ConfigError, ConfigValidationError
from glossa.plurals import available_plural_rules


@dataclass(frozen=True)
class EngineConfig:
    """Settings for catalog lookup, plural selection and formatting.

    Attributes:
        default_locale: Overrides the catalog's default locale when set.
        plural_rule: Plural rule name ("one_other", "cldr" or "babel").
        float_precision: Precision of float specifiers that declare none.
        group_digits: Group integer digits with the locale separator.
        localize_numbers: Use the locale decimal separator for floats.
    """

    default_locale: str | None = None
    plural_rule: str = "one_other"
    float_precision: int = 2
    group_digits: bool = False
    localize_numbers: bool = False

    def __post_init__(self) -> None:
        errors = self.validate()
        if errors:
            raise ConfigValidationError(errors)

    def validate(self) -> list[str]:
        """Get a list of validation problems (empty when valid)."""
        errors: list[str] = []

        if self.default_locale is not None and (
            not isinstance(self.default_locale, str) or not self.default_locale.strip()
        ):
            errors.append("default_locale must be a non-empty string")

        if not isinstance(self.plural_rule, str) or self.plural_rule.strip().lower() not in available_plural_rules():
            errors.append(
                f"plural_rule must be one of {available_plural_rules()}, got {self.plural_rule!r}"
            )

        if (
            not isinstance(self.float_precision, int)
            or isinstance(self.float_precision, bool)
            or not 0 <= self.float_precision <= 20
        ):
            errors.append(f"float_precision must be an integer in [0, 20], got {self.float_precision!r}")

        for name in ("group_digits", "localize_numbers"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a boolean")

        return errors

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        """Create a copy with some fields replaced."""
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Create from a dictionary.

        Raises:
            ConfigValidationError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError([f"unknown setting: {name}" for name in unknown])
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load from a JSON or YAML file.

        Raises:
            ConfigError: If the file is missing or has an unsupported format.
            ConfigValidationError: If the settings are invalid.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        suffix = path.suffix.lower()
        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                raise ConfigError(f"Unsupported config file format: {suffix}")

        # Allow the settings to live under a top-level "glossa" section
        if isinstance(data, dict) and isinstance(data.get("glossa"), dict):
            data = data["glossa"]
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        prefix: str = "GLOSSA",
        environ: Mapping[str, str] | None = None,
    ) -> "EngineConfig":
        """Load from environment variables.

        Example:
            GLOSSA_PLURAL_RULE=cldr -> plural_rule="cldr"
            GLOSSA_GROUP_DIGITS=yes -> group_digits=True

        Args:
            prefix: Environment variable prefix.
            environ: Mapping to read instead of os.environ.

        Raises:
            ConfigValidationError: If a variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        errors: list[str] = []

        for name, parser in _ENV_PARSERS.items():
            variable = f"{prefix}_{name.upper()}"
            raw = env.get(variable)
            if raw is None:
                continue
            try:
                values[name] = parser(raw.strip())
            except ValueError as e:
                errors.append(f"{variable}: {e}")

        if errors:
            raise ConfigValidationError(errors)
        return cls.from_dict(values)


def _parse_bool(value: str) -> bool:
    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _parse_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"expected an integer, got {value!r}") from None


def _parse_optional_str(value: str) -> str | None:
    # "GLOSSA_DEFAULT_LOCALE=none" clears the override
    if value.lower() in ("null", "none", ""):
        return None
    return value


_ENV_PARSERS: dict[str, Callable[[str], Any]] = {
    "default_locale": _parse_optional_str,
    "plural_rule": str,
    "float_precision": _parse_int,
    "group_digits": _parse_bool,
    "localize_numbers": _parse_bool,
}
