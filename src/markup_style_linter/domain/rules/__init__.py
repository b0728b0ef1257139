"""Rule protocols and the per-file context rules inspect."""

from dataclasses import dataclass

__all__ = [
    "LintContext",
    "StyleRule",
    "TokenRule",
    "TreeRule",
]

from typing import Protocol, runtime_checkable

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.entities import (
    Diagnostic,
    Dialect,
    Fix,
    Severity,
    TextEdit,
    Token,
)
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.domain.syntax.sass_nodes import Stylesheet
from markup_style_linter.domain.text import LineIndex


@dataclass(frozen=True)
class LintContext:
    """Everything a rule may look at for one file. Rules never mutate it."""

    path: str
    text: str
    dialect: Dialect
    tokens: tuple[Token, ...]
    tree: Document | Stylesheet
    config: StyleConfiguration
    line_index: LineIndex

    def diagnostic(
        self,
        rule: "StyleRule",
        offset: int,
        message: str,
        *,
        edits: list[TextEdit] | None = None,
        fix_description: str = "",
        fix_failure_reason: str | None = None,
    ) -> Diagnostic:
        """Build a Diagnostic for rule at offset. Prefer over constructing one by hand."""
        fix = None
        if edits:
            fix = Fix(description=fix_description or message, edits=tuple(edits))
        return Diagnostic(
            rule_id=rule.rule_id,
            message=message,
            severity=rule.severity,
            position=self.line_index.position(offset),
            path=self.path,
            fix=fix,
            fix_failure_reason=fix_failure_reason,
        )


# -----------------------------------------------------------------------------
# Rule protocols: every rule carries the StyleRule metadata and exactly one
# inspection capability, TokenRule (token stream) or TreeRule (parsed tree).
# Rule sets are assembled per dialect in engine.DialectSupport.
# -----------------------------------------------------------------------------


class StyleRule(Protocol):
    """Metadata shared by all rules."""

    rule_id: str
    description: str
    severity: Severity
    fixable: bool
    """True if the rule can supply mechanical fixes for at least some findings."""


@runtime_checkable
class TokenRule(StyleRule, Protocol):
    """Inspects the flat token stream."""

    def check_tokens(self, context: LintContext) -> list[Diagnostic]:
        """Return diagnostics for this file's tokens."""
        ...


@runtime_checkable
class TreeRule(StyleRule, Protocol):
    """Inspects the parsed tree."""

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        """Return diagnostics for this file's tree."""
        ...
