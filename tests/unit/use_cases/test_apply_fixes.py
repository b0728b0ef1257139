"""Unit tests for FixApplier and ApplyFixesUseCase."""

from collections import Counter
from unittest.mock import MagicMock

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.entities import (
    Diagnostic,
    Dialect,
    Fix,
    Severity,
    SourcePosition,
    TextEdit,
)
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.use_cases.apply_fixes import ApplyFixesUseCase, FixApplier
from markup_style_linter.use_cases.lint_file import LintFileUseCase, LintResult


def _diagnostic(rule_id: str, *edits: TextEdit, severity: Severity = Severity.WARNING) -> Diagnostic:
    fix = Fix("fix", tuple(edits)) if edits else None
    offset = edits[0].start if edits else 0
    return Diagnostic(
        rule_id=rule_id,
        message=f"{rule_id} finding",
        severity=severity,
        position=SourcePosition(1, offset + 1, offset),
        fix=fix,
    )


def _result(text: str, *diagnostics: Diagnostic) -> LintResult:
    return LintResult(path="t.html", text=text, dialect=Dialect.HTML, diagnostics=diagnostics, tree=Document())


def _scripted_linter(results: dict[str, LintResult]) -> MagicMock:
    """A lint use case that answers from a text -> result table."""
    lint_use_case = MagicMock()
    lint_use_case.config = StyleConfiguration(jobs=1)
    lint_use_case.lint_text.side_effect = lambda text, dialect, path="": results[text]
    return lint_use_case


class TestFixApplier:
    def test_select_defers_overlapping_fixes(self) -> None:
        first = _diagnostic("a", TextEdit(0, 5, "x"))
        overlapping = _diagnostic("b", TextEdit(3, 8, "y"))
        disjoint = _diagnostic("c", TextEdit(8, 9, "z"))
        accepted, deferred = FixApplier.select([overlapping, disjoint, first])
        assert accepted == [first, disjoint]
        assert deferred == [overlapping]

    def test_select_ignores_unfixable(self) -> None:
        accepted, deferred = FixApplier.select([_diagnostic("a")])
        assert accepted == [] and deferred == []

    def test_apply_translates_offsets(self) -> None:
        text = "<A HREF=x>"
        diagnostics = [
            _diagnostic("q", TextEdit(8, 9, '"x"')),
            _diagnostic("l", TextEdit(1, 2, "a"), TextEdit(3, 7, "href")),
        ]
        assert FixApplier.apply(text, diagnostics) == '<a href="x">'

    def test_inserts_at_same_offset_as_replacement_end(self) -> None:
        text = "<br>"
        diagnostics = [_diagnostic("c", TextEdit(3, 3, "/")), _diagnostic("l", TextEdit(1, 3, "br"))]
        assert FixApplier.apply(text, diagnostics) == "<br/>"


class TestFixText:
    def test_scenario_fix_is_verified(self, linter: LintFileUseCase) -> None:
        outcome = ApplyFixesUseCase(linter).fix_text(
            '<div class="x" id="y"><IMG SRC="a.png"></div>', Dialect.HTML
        )
        assert outcome.text == '<div class="x" id="y"><img src="a.png"/></div>'
        assert outcome.applied == 2
        assert outcome.reverted == {}
        assert [d.rule_id for d in outcome.diagnostics] == ["img-alt"]

    def test_overlapping_fixes_take_several_passes(self, linter: LintFileUseCase) -> None:
        outcome = ApplyFixesUseCase(linter).fix_text("<a href='/' class=\"x\"></a>", Dialect.HTML)
        assert outcome.text == '<a class="x" href="/"></a>'
        assert outcome.passes == 2
        assert outcome.diagnostics == ()

    def test_clean_text_is_unchanged(self, linter: LintFileUseCase) -> None:
        outcome = ApplyFixesUseCase(linter).fix_text('<p class="a">x</p>\n', Dialect.HTML)
        assert not outcome.changed
        assert outcome.applied == 0

    def test_second_run_is_a_no_op(self, linter: LintFileUseCase) -> None:
        use_case = ApplyFixesUseCase(linter)
        text = "<UL>\n\t<li data-x='1' class=a>One</li>  \n</UL>\n"
        first = use_case.fix_text(text, Dialect.HTML)
        second = use_case.fix_text(first.text, Dialect.HTML)
        assert first.changed
        assert not second.changed
        assert not any(d.fixable for d in second.diagnostics)

    def test_non_converging_rule_is_reverted(self) -> None:
        telemetry = MagicMock()
        baseline = _result("ab", _diagnostic("loop", TextEdit(0, 1, "X")))
        after = _result("Xb", _diagnostic("loop", TextEdit(0, 1, "X")))
        use_case = ApplyFixesUseCase(_scripted_linter({"ab": baseline, "Xb": after}), telemetry)
        outcome = use_case.fix_text("ab", Dialect.HTML, "t.html")
        assert outcome.text == "ab"
        assert outcome.reverted == {"loop": "fixes did not converge"}
        (diagnostic,) = outcome.diagnostics
        assert not diagnostic.fixable
        assert diagnostic.fix_failure_reason == "fixes did not converge"
        telemetry.warning.assert_called_once()

    def test_only_failing_rule_is_reverted(self) -> None:
        good = _diagnostic("good", TextEdit(1, 2, "B"))
        bad = _diagnostic("bad", TextEdit(0, 1, "X"))
        results = {
            "ab": _result("ab", bad, good),
            "XB": _result("XB", _diagnostic("bad"), _diagnostic("bad", severity=Severity.ERROR)),
            "aB": _result("aB", bad),
        }
        outcome = ApplyFixesUseCase(_scripted_linter(results)).fix_text("ab", Dialect.HTML)
        assert outcome.text == "aB"
        assert outcome.reverted == {"bad": "fixes produced new findings"}


class TestVerify:
    def test_new_syntax_errors_fail_every_applied_rule(self) -> None:
        baseline = _result("a")
        final = _result("b", _diagnostic("syntax", severity=Severity.ERROR))
        failures = ApplyFixesUseCase.verify(baseline, final, Counter({"x": 1, "y": 2}))
        assert failures == {"x": "fixes introduced syntax errors", "y": "fixes introduced syntax errors"}

    def test_structure_change_fails(self, linter: LintFileUseCase) -> None:
        baseline = linter.lint_text("<p>a</p>", Dialect.HTML)
        final = linter.lint_text("<p>b</p>", Dialect.HTML)
        failures = ApplyFixesUseCase.verify(baseline, final, Counter({"indentation": 1}))
        assert failures == {"indentation": "fixes changed the document structure"}

    def test_remaining_unfixable_findings_are_allowed(self) -> None:
        baseline = _result("a", _diagnostic("r", TextEdit(0, 1, "b")), _diagnostic("r"))
        final = _result("b", _diagnostic("r"))
        assert ApplyFixesUseCase.verify(baseline, final, Counter({"r": 1})) == {}
