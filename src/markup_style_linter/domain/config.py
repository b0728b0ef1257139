"""Style configuration. Immutable value object created once per run by Infrastructure."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields

from markup_style_linter.domain.constants import (
    DECLARATION_CATEGORIES,
    DEFAULT_ATTRIBUTE_ORDER,
    DEFAULT_DECLARATION_ORDER,
    DEFAULT_FAIL_ON,
    DEFAULT_INDENT_STYLE,
    DEFAULT_INDENT_WIDTH,
    DEFAULT_MAX_FIX_PASSES,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_QUOTE_STYLE,
    OTHER_CATEGORY,
    QUOTE_CHARS,
    SEVERITY_LEVELS,
)
from markup_style_linter.domain.entities import Severity
from markup_style_linter.domain.exceptions import ConfigurationError


@dataclass(frozen=True)
class StyleConfiguration:
    """
    Immutable configuration for one run.

    Domain does not read the filesystem; Infrastructure loads a mapping
    (pyproject.toml section, YAML or TOML file) and calls from_mapping() at the
    composition root. Validation happens at construction so a bad value is
    reported once, before any file is processed.
    """

    indent_width: int = DEFAULT_INDENT_WIDTH
    indent_style: str = DEFAULT_INDENT_STYLE
    quote_style: str = DEFAULT_QUOTE_STYLE
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    attribute_order: tuple[str, ...] = DEFAULT_ATTRIBUTE_ORDER
    declaration_order: tuple[str, ...] = DEFAULT_DECLARATION_ORDER
    fail_on: str = DEFAULT_FAIL_ON
    select: tuple[str, ...] | None = None
    ignore: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    max_fix_passes: int = DEFAULT_MAX_FIX_PASSES
    jobs: int = field(default_factory=lambda: os.cpu_count() or 1)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError for malformed or contradictory values."""
        for name in ("indent_width", "max_nesting_depth", "max_fix_passes", "jobs"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"'{name}' must be an integer, got {value!r}")
        if self.indent_width < 1:
            raise ConfigurationError(f"'indent_width' must be positive, got {self.indent_width}")
        if self.max_nesting_depth < 1:
            raise ConfigurationError(
                f"'max_nesting_depth' must be positive, got {self.max_nesting_depth}"
            )
        if self.max_fix_passes < 1:
            raise ConfigurationError(f"'max_fix_passes' must be positive, got {self.max_fix_passes}")
        if self.jobs < 1:
            raise ConfigurationError(f"'jobs' must be positive, got {self.jobs}")
        if self.indent_style != "spaces":
            raise ConfigurationError(
                f"'indent_style' only supports 'spaces', got {self.indent_style!r}"
            )
        if self.quote_style not in QUOTE_CHARS:
            raise ConfigurationError(
                f"'quote_style' must be one of {sorted(QUOTE_CHARS)}, got {self.quote_style!r}"
            )
        if self.fail_on not in SEVERITY_LEVELS:
            raise ConfigurationError(
                f"'fail_on' must be one of {list(SEVERITY_LEVELS)}, got {self.fail_on!r}"
            )
        self._validate_order("attribute_order", self.attribute_order)
        if OTHER_CATEGORY not in self.attribute_order:
            raise ConfigurationError(
                f"'attribute_order' must contain the catch-all category '{OTHER_CATEGORY}'"
            )
        self._validate_order("declaration_order", self.declaration_order)
        unknown = [c for c in self.declaration_order if c not in DECLARATION_CATEGORIES]
        if unknown:
            raise ConfigurationError(
                f"'declaration_order' has unknown categories {unknown}; "
                f"expected {sorted(DECLARATION_CATEGORIES)}"
            )
        missing = DECLARATION_CATEGORIES.difference(self.declaration_order)
        if missing:
            raise ConfigurationError(
                f"'declaration_order' is missing categories {sorted(missing)}"
            )
        if self.select is not None:
            self._validate_order("select", self.select)
            both = sorted(set(self.select).intersection(self.ignore))
            if both:
                raise ConfigurationError(f"rules both selected and ignored: {both}")

    @staticmethod
    def _validate_order(name: str, values: tuple[str, ...]) -> None:
        if not values:
            raise ConfigurationError(f"'{name}' must not be empty")
        if any(not isinstance(v, str) or not v for v in values):
            raise ConfigurationError(f"'{name}' must contain non-empty strings")
        duplicates = sorted({v for v in values if values.count(v) > 1})
        if duplicates:
            raise ConfigurationError(f"'{name}' lists {duplicates} more than once")

    @property
    def quote_char(self) -> str:
        """The configured quote character."""
        return QUOTE_CHARS[self.quote_style]

    @property
    def fail_on_severity(self) -> Severity:
        return Severity(self.fail_on)

    def is_rule_active(self, rule_id: str) -> bool:
        """True unless the rule is ignored or missing from an explicit select list."""
        if rule_id in self.ignore:
            return False
        return self.select is None or rule_id in self.select

    @classmethod
    def from_mapping(cls, raw: dict[str, object] | None) -> "StyleConfiguration":
        """
        Build a configuration from a loaded document section.

        Keys may be snake_case or kebab-case; unknown keys are an error so that
        typos do not silently fall back to defaults.
        """
        if not raw:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigurationError(f"configuration must be a mapping, got {type(raw).__name__}")
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, object] = {}
        for key, value in raw.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ConfigurationError(f"unknown configuration option {key!r}")
            if name in ("attribute_order", "declaration_order", "select", "ignore", "exclude"):
                value = cls._as_tuple(name, value)
            kwargs[name] = value
        return cls(**kwargs)  # type: ignore[arg-type]

    @staticmethod
    def _as_tuple(name: str, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(str(v) for v in value)
        raise ConfigurationError(f"'{name}' must be a list of strings, got {value!r}")
