"""Rule registry and engine: which rules run for which dialect, in which order."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Protocol

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.constants import SYNTAX_RULE_ID
from markup_style_linter.domain.entities import (
    Diagnostic,
    Dialect,
    Severity,
    Token,
)
from markup_style_linter.domain.exceptions import ConfigurationError, MalformedSyntaxError
from markup_style_linter.domain.rules import LintContext, StyleRule, TokenRule, TreeRule
from markup_style_linter.domain.rules.attribute_order import AttributeOrderRule
from markup_style_linter.domain.rules.html_tags import (
    BooleanAttributeRule,
    ClosingTagRule,
    ImgAltRule,
    LowercaseNamesRule,
)
from markup_style_linter.domain.rules.indentation import IndentationRule
from markup_style_linter.domain.rules.naming import BemNamingRule
from markup_style_linter.domain.rules.quotes import QuoteStyleRule
from markup_style_linter.domain.rules.sass_structure import DeclarationOrderRule, NestingDepthRule
from markup_style_linter.domain.rules.whitespace import TrailingWhitespaceRule
from markup_style_linter.domain.syntax.html_lexer import HtmlLexer
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.domain.syntax.html_parser import HtmlParser
from markup_style_linter.domain.syntax.sass_lexer import SassLexer
from markup_style_linter.domain.syntax.sass_nodes import Stylesheet
from markup_style_linter.domain.syntax.sass_parser import SassParser
from markup_style_linter.domain.text import LineIndex


class Lexer(Protocol):
    """Structural type shared by HtmlLexer and SassLexer."""

    errors: list[MalformedSyntaxError]

    def tokens(self) -> Iterator[Token]:
        ...


class Parser(Protocol):
    """Structural type shared by HtmlParser and SassParser."""

    errors: list[MalformedSyntaxError]

    def parse(self, tokens: Iterable[Token]) -> Document | Stylesheet:
        ...


@dataclass(frozen=True)
class DialectSupport:
    """Everything one dialect needs: how to tokenize, how to parse, which rules apply."""
    dialect: Dialect
    lexer_factory: Callable[[str, LineIndex], Lexer]
    parser_factory: Callable[[LineIndex], Parser]
    rules: tuple[StyleRule, ...]


HTML_SUPPORT = DialectSupport(
    dialect=Dialect.HTML,
    lexer_factory=HtmlLexer,
    parser_factory=HtmlParser,
    rules=(
        LowercaseNamesRule(),
        ClosingTagRule(),
        BooleanAttributeRule(),
        QuoteStyleRule(),
        AttributeOrderRule(),
        ImgAltRule(),
        BemNamingRule(),
        IndentationRule(),
        TrailingWhitespaceRule(),
    ),
)

SCSS_SUPPORT = DialectSupport(
    dialect=Dialect.SCSS,
    lexer_factory=SassLexer,
    parser_factory=SassParser,
    rules=(
        NestingDepthRule(),
        DeclarationOrderRule(),
        QuoteStyleRule(),
        BemNamingRule(),
        IndentationRule(),
        TrailingWhitespaceRule(),
    ),
)

DIALECT_SUPPORT: dict[Dialect, DialectSupport] = {
    Dialect.HTML: HTML_SUPPORT,
    Dialect.SCSS: SCSS_SUPPORT,
}


def known_rules() -> dict[str, StyleRule]:
    """Every registered rule by id, first registration wins."""
    catalog: dict[str, StyleRule] = {}
    for support in DIALECT_SUPPORT.values():
        for rule in support.rules:
            catalog.setdefault(rule.rule_id, rule)
    return catalog


def rule_dialects(rule_id: str) -> list[Dialect]:
    """Dialects a rule id is registered for."""
    return [
        dialect
        for dialect, support in DIALECT_SUPPORT.items()
        if any(rule.rule_id == rule_id for rule in support.rules)
    ]


class RuleEngine:
    """
    Runs the active rules of one dialect over a LintContext.

    Active rules are the dialect's registered rules filtered by `select` and
    `ignore`. An explicit `select` list also defines the registration order.
    Each diagnostic is tagged with its rule's registration index so that the
    aggregator can break position ties deterministically.
    """

    def __init__(self, support: DialectSupport, config: StyleConfiguration) -> None:
        self.validate_rule_ids(config)
        self.support = support
        self.config = config
        self.rules: tuple[StyleRule, ...] = self._active_rules(support, config)

    @classmethod
    def for_dialect(cls, dialect: Dialect, config: StyleConfiguration) -> "RuleEngine":
        return cls(DIALECT_SUPPORT[dialect], config)

    @staticmethod
    def validate_rule_ids(config: StyleConfiguration) -> None:
        """Raise ConfigurationError for select/ignore entries that name no rule."""
        known = set(known_rules()) | {SYNTAX_RULE_ID}
        named = list(config.select or ()) + list(config.ignore)
        unknown = sorted({rule_id for rule_id in named if rule_id not in known})
        if unknown:
            raise ConfigurationError(
                f"unknown rule id(s) {unknown}; known rules: {sorted(known)}"
            )

    @staticmethod
    def _active_rules(support: DialectSupport, config: StyleConfiguration) -> tuple[StyleRule, ...]:
        if config.select is None:
            return tuple(r for r in support.rules if config.is_rule_active(r.rule_id))
        by_id = {rule.rule_id: rule for rule in support.rules}
        return tuple(by_id[rule_id] for rule_id in config.select if rule_id in by_id)

    @property
    def reports_syntax(self) -> bool:
        """Syntax diagnostics are reported unless explicitly ignored; `select` does not hide them."""
        return SYNTAX_RULE_ID not in self.config.ignore

    def run(self, context: LintContext) -> list[Diagnostic]:
        """Invoke every active rule in registration order."""
        diagnostics: list[Diagnostic] = []
        for order, rule in enumerate(self.rules):
            if isinstance(rule, TreeRule):
                found = rule.check_tree(context)
            elif isinstance(rule, TokenRule):
                found = rule.check_tokens(context)
            else:
                raise TypeError(f"rule {rule.rule_id!r} has no inspection capability")
            diagnostics.extend(replace(d, order=order) for d in found)
        return diagnostics

    def syntax_diagnostics(
        self, errors: Iterable[MalformedSyntaxError], path: str = ""
    ) -> list[Diagnostic]:
        """Convert recovery records from the lexer and parser into diagnostics."""
        if not self.reports_syntax:
            return []
        return [
            Diagnostic(
                rule_id=SYNTAX_RULE_ID,
                message=error.message,
                severity=Severity.ERROR,
                position=error.position,
                path=path,
                order=-1,
            )
            for error in errors
        ]
