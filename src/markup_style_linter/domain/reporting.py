"""Aggregation of per-rule findings into the final, ordered diagnostic list."""

from collections.abc import Iterable

from markup_style_linter.domain.entities import Diagnostic


class DiagnosticAggregator:
    """Dedupes and sorts diagnostics. Formatting belongs to the reporters."""

    @staticmethod
    def aggregate(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
        """
        Drop exact duplicates (same rule, offset and message) and sort by
        (line, column, severity, registration order, rule id).

        The first occurrence of a duplicate wins, so a fix is never lost to a
        fix-less copy emitted later.
        """
        seen: set[tuple[str, int, str]] = set()
        unique: list[Diagnostic] = []
        for diagnostic in diagnostics:
            key = diagnostic.identity()
            if key in seen:
                continue
            seen.add(key)
            unique.append(diagnostic)
        return sorted(unique, key=Diagnostic.sort_key)
