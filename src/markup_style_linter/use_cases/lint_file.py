"""Use Case: Lint one file (tokenize -> parse -> rules -> aggregate)."""

from dataclasses import dataclass
from typing import Optional

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.constants import SYNTAX_RULE_ID
from markup_style_linter.domain.engine import RuleEngine
from markup_style_linter.domain.entities import Diagnostic, Dialect, FileReport
from markup_style_linter.domain.protocols import TelemetryPort
from markup_style_linter.domain.reporting import DiagnosticAggregator
from markup_style_linter.domain.rules import LintContext
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.domain.syntax.sass_nodes import Stylesheet
from markup_style_linter.domain.text import LineIndex


@dataclass(frozen=True)
class LintResult:
    """Diagnostics of one text plus the tree they were computed from."""
    path: str
    text: str
    dialect: Dialect
    diagnostics: tuple[Diagnostic, ...]
    tree: Document | Stylesheet

    @property
    def syntax_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.rule_id == SYNTAX_RULE_ID)

    def for_rule(self, rule_id: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.rule_id == rule_id]


class LintFileUseCase:
    """Run the full lint pipeline for one text. Holds no per-file state, so it is thread-safe."""

    def __init__(
        self,
        config: StyleConfiguration,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.config = config
        self.telemetry = telemetry
        self.engines: dict[Dialect, RuleEngine] = {
            dialect: RuleEngine.for_dialect(dialect, config) for dialect in Dialect
        }

    def lint_text(self, text: str, dialect: Dialect, path: str = "") -> LintResult:
        """Lint text as the given dialect. Malformed input yields syntax diagnostics, never exceptions."""
        engine = self.engines[dialect]
        support = engine.support
        line_index = LineIndex(text)
        lexer = support.lexer_factory(text, line_index)
        tokens = tuple(lexer.tokens())
        parser = support.parser_factory(line_index)
        tree = parser.parse(tokens)
        context = LintContext(
            path=path,
            text=text,
            dialect=dialect,
            tokens=tokens,
            tree=tree,
            config=self.config,
            line_index=line_index,
        )
        found = engine.syntax_diagnostics([*lexer.errors, *parser.errors], path)
        found.extend(engine.run(context))
        diagnostics = DiagnosticAggregator.aggregate(found)
        if self.telemetry:
            self.telemetry.debug(f"{path or '<text>'}: {len(tokens)} tokens, {len(diagnostics)} diagnostics")
        return LintResult(
            path=path,
            text=text,
            dialect=dialect,
            diagnostics=tuple(diagnostics),
            tree=tree,
        )

    def execute(self, path: str, text: str) -> FileReport:
        """Lint a file's text, choosing the dialect from its extension."""
        dialect = Dialect.from_path(path)
        if dialect is None:
            return FileReport(path=path, dialect=None, error=f"unsupported file type: {path}")
        result = self.lint_text(text, dialect, path)
        return FileReport(path=path, dialect=dialect, diagnostics=result.diagnostics)
