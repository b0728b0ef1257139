"""Use Case: Apply safe fixes to source text and verify them."""

from bisect import bisect_left, insort
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from markup_style_linter.domain.entities import Diagnostic, Dialect, TextEdit
from markup_style_linter.domain.protocols import TelemetryPort
from markup_style_linter.domain.syntax.signature import TreeSignature
from markup_style_linter.use_cases.lint_file import LintFileUseCase, LintResult


@dataclass(frozen=True)
class FixResult:
    """Outcome of fixing one text. `text` equals `original` when nothing was applied."""
    path: str
    original: str
    text: str
    diagnostics: tuple[Diagnostic, ...]
    """Diagnostics remaining after the accepted fixes, refused fixes marked unfixable."""
    applied: int = 0
    passes: int = 0
    reverted: dict[str, str] = field(default_factory=dict)
    """Rule id -> reason, for rules whose fixes failed verification."""

    @property
    def changed(self) -> bool:
        return self.text != self.original


class FixApplier:
    """Applies Fix edits to text. Pure; no linting."""

    @staticmethod
    def select(diagnostics: list[Diagnostic]) -> tuple[list[Diagnostic], list[Diagnostic]]:
        """
        Choose non-overlapping fixes in ascending offset order.

        Returns (accepted, deferred). A fix that overlaps an accepted one is
        deferred to the next pass, when it is recomputed against the new text.
        """
        candidates = sorted(
            (d for d in diagnostics if d.fix is not None),
            key=lambda d: (d.fix.start, d.sort_key()),  # type: ignore[union-attr]
        )
        taken: list[tuple[int, int]] = []
        accepted: list[Diagnostic] = []
        deferred: list[Diagnostic] = []
        for diagnostic in candidates:
            edits = diagnostic.fix.edits  # type: ignore[union-attr]
            if any(FixApplier._collides(taken, edit) for edit in edits):
                deferred.append(diagnostic)
                continue
            for edit in edits:
                insort(taken, (edit.start, edit.end))
            accepted.append(diagnostic)
        return accepted, deferred

    @staticmethod
    def _collides(taken: list[tuple[int, int]], edit: TextEdit) -> bool:
        # Taken spans are disjoint and sorted, so only the last one starting
        # before edit.end can overlap it.
        index = bisect_left(taken, (edit.end,))
        if index == 0:
            return False
        start, end = taken[index - 1]
        return TextEdit(start, end, "").overlaps(edit)

    @staticmethod
    def apply(text: str, diagnostics: list[Diagnostic]) -> str:
        """Apply the edits of already-selected, non-overlapping fixes."""
        edits = sorted(
            (edit for d in diagnostics if d.fix is not None for edit in d.fix.edits),
            key=lambda e: (e.start, e.end),
        )
        parts: list[str] = []
        cursor = 0
        for edit in edits:
            parts.append(text[cursor:edit.start])
            parts.append(edit.replacement)
            cursor = edit.end
        parts.append(text[cursor:])
        return "".join(parts)


class ApplyFixesUseCase:
    """
    Orchestrate multi-pass autofixing with verification.

    Each pass applies every non-overlapping fix, then re-lints. After the last
    pass the result is verified against the original: every rule that applied
    fixes must leave no fixable findings and no more findings than it had
    unfixable ones, syntax findings must not grow, and the semantic tree
    signature must not change. Rules that fail are excluded and the whole run
    restarts from the original text.
    """

    def __init__(
        self,
        lint_use_case: LintFileUseCase,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.lint_use_case = lint_use_case
        self.telemetry = telemetry
        self.max_passes = lint_use_case.config.max_fix_passes

    def fix_text(self, text: str, dialect: Dialect, path: str = "") -> FixResult:
        """Fix text in memory. Never writes."""
        baseline = self.lint_use_case.lint_text(text, dialect, path)
        reverted: dict[str, str] = {}
        while True:
            final, applied, passes = self._run_passes(baseline, set(reverted))
            if not applied:
                return self._result(baseline, baseline, 0, 0, reverted)
            failures = self.verify(baseline, final, applied)
            if not failures:
                if self.telemetry:
                    self.telemetry.debug(
                        f"{path or '<text>'}: {sum(applied.values())} fix(es) verified in {passes} pass(es)"
                    )
                return self._result(baseline, final, sum(applied.values()), passes, reverted)
            for rule_id, reason in failures.items():
                if self.telemetry:
                    self.telemetry.warning(f"{path or '<text>'}: reverted {rule_id} fixes: {reason}")
                reverted[rule_id] = reason

    def _run_passes(
        self, baseline: LintResult, excluded: set[str]
    ) -> tuple[LintResult, Counter[str], int]:
        current = baseline
        applied: Counter[str] = Counter()
        passes = 0
        for _ in range(self.max_passes):
            eligible = [d for d in current.diagnostics if d.fixable and d.rule_id not in excluded]
            if not eligible:
                break
            accepted, _deferred = FixApplier.select(eligible)
            new_text = FixApplier.apply(current.text, accepted)
            if new_text == current.text:
                break
            applied.update(d.rule_id for d in accepted)
            passes += 1
            current = self.lint_use_case.lint_text(new_text, current.dialect, current.path)
        return current, applied, passes

    @staticmethod
    def verify(baseline: LintResult, final: LintResult, applied: Counter[str]) -> dict[str, str]:
        """Return rule id -> failure reason for every rule whose fixes must be reverted."""
        if final.syntax_count > baseline.syntax_count:
            reason = "fixes introduced syntax errors"
            return {rule_id: reason for rule_id in applied}
        if TreeSignature.of(final.tree) != TreeSignature.of(baseline.tree):
            reason = "fixes changed the document structure"
            return {rule_id: reason for rule_id in applied}
        failures: dict[str, str] = {}
        for rule_id in applied:
            remaining = final.for_rule(rule_id)
            if any(d.fixable for d in remaining):
                failures[rule_id] = "fixes did not converge"
                continue
            unfixable_before = sum(1 for d in baseline.for_rule(rule_id) if not d.fixable)
            if len(remaining) > unfixable_before:
                failures[rule_id] = "fixes produced new findings"
        return failures

    @staticmethod
    def _result(
        baseline: LintResult,
        final: LintResult,
        applied: int,
        passes: int,
        reverted: dict[str, str],
    ) -> FixResult:
        diagnostics = tuple(
            d.as_unfixable(reverted[d.rule_id]) if d.fixable and d.rule_id in reverted else d
            for d in final.diagnostics
        )
        return FixResult(
            path=baseline.path,
            original=baseline.text,
            text=final.text,
            diagnostics=diagnostics,
            applied=applied,
            passes=passes,
            reverted=dict(reverted),
        )
