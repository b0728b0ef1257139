"""Report renderers: text, rich table, JSON document and JSON lines."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from markup_style_linter.domain.entities import Diagnostic, FileReport, RunReport, Severity
from markup_style_linter.domain.exceptions import ConfigurationError
from markup_style_linter.domain.protocols import ReporterProtocol

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}


class ReportSummary:
    """One-line run summary shared by the human-readable reporters."""

    @staticmethod
    def line(run: RunReport) -> str:
        counts = run.counts()
        parts = [
            f"{counts['files']} file(s)",
            f"{counts['errors']} error(s)",
            f"{counts['warnings']} warning(s)",
        ]
        if counts["file_errors"]:
            parts.append(f"{counts['file_errors']} unreadable")
        fixable = sum(1 for d in run.diagnostics if d.fixable)
        if fixable:
            parts.append(f"{fixable} fixable with `markup-style fix`")
        fixed = sum(1 for f in run.files if f.fixed)
        if fixed:
            parts.append(f"{fixed} file(s) fixed")
        return ", ".join(parts)


class TextReporter(ReporterProtocol):
    """`path:line:col: severity [rule] message`, one diagnostic per line."""

    @staticmethod
    def format_diagnostic(diagnostic: Diagnostic) -> str:
        text = (
            f"{diagnostic.path}:{diagnostic.line}:{diagnostic.column}: "
            f"{diagnostic.severity.value} [{diagnostic.rule_id}] {diagnostic.message}"
        )
        if diagnostic.fix_failure_reason:
            text += f" (not fixed: {diagnostic.fix_failure_reason})"
        return text

    def report(self, run: RunReport) -> None:
        for file_report in run.files:
            if file_report.error:
                typer.echo(f"{file_report.path}: error: {file_report.error}")
            if file_report.cancelled:
                typer.echo(f"{file_report.path}: skipped (cancelled)")
            for diagnostic in file_report.diagnostics:
                typer.echo(self.format_diagnostic(diagnostic))
        typer.echo(ReportSummary.line(run))


class TableReporter(ReporterProtocol):
    """One rich table per file with findings."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def report(self, run: RunReport) -> None:
        for file_report in run.files:
            if file_report.error:
                self.console.print(f"[bold red]{file_report.path}[/]: {file_report.error}")
                continue
            if file_report.diagnostics:
                self.console.print(self._table(file_report))
        self.console.print(ReportSummary.line(run))

    @staticmethod
    def _table(file_report: FileReport) -> Table:
        table = Table(title=file_report.path, title_justify="left")
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Severity")
        table.add_column("Rule")
        table.add_column("Message")
        table.add_column("Fix")
        for diagnostic in file_report.diagnostics:
            style = _SEVERITY_STYLES[diagnostic.severity]
            table.add_row(
                str(diagnostic.line),
                str(diagnostic.column),
                f"[{style}]{diagnostic.severity.value}[/]",
                diagnostic.rule_id,
                diagnostic.message,
                "yes" if diagnostic.fixable else "",
            )
        return table


class JsonReporter(ReporterProtocol):
    """The whole run as one JSON document."""

    def report(self, run: RunReport) -> None:
        typer.echo(json.dumps(run.to_dict(), indent=2))


class JsonLinesReporter(ReporterProtocol):
    """One JSON record per diagnostic (and per unreadable file), for tool integration."""

    def report(self, run: RunReport) -> None:
        for file_report in run.files:
            if file_report.error:
                typer.echo(json.dumps({"path": file_report.path, "error": file_report.error}))
            for diagnostic in file_report.diagnostics:
                typer.echo(json.dumps(diagnostic.to_dict()))


class ReporterFactory:
    """Maps `--format` values to reporters."""

    FORMATS: tuple[str, ...] = ("text", "table", "json", "jsonl")

    @staticmethod
    def create(fmt: str, console: Optional[Console] = None) -> ReporterProtocol:
        if fmt == "text":
            return TextReporter()
        if fmt == "table":
            return TableReporter(console)
        if fmt == "json":
            return JsonReporter()
        if fmt == "jsonl":
            return JsonLinesReporter()
        raise ConfigurationError(
            f"unknown output format {fmt!r}; choose one of {', '.join(ReporterFactory.FORMATS)}"
        )
