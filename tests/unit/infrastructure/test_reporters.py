"""Unit tests for the report renderers."""

import io
import json

import pytest
from rich.console import Console

from markup_style_linter.domain.entities import (
    Diagnostic,
    Dialect,
    Fix,
    FileReport,
    RunReport,
    Severity,
    SourcePosition,
    TextEdit,
)
from markup_style_linter.domain.exceptions import ConfigurationError
from markup_style_linter.infrastructure.reporters import (
    JsonLinesReporter,
    JsonReporter,
    ReporterFactory,
    ReportSummary,
    TableReporter,
    TextReporter,
)


def _run() -> RunReport:
    fixable = Diagnostic(
        rule_id="closing-tag",
        message="void element <br> must be self-closed",
        severity=Severity.ERROR,
        position=SourcePosition(2, 5, 10),
        path="a.html",
        fix=Fix("self-close", (TextEdit(13, 13, "/"),)),
    )
    refused = Diagnostic(
        rule_id="quote-style",
        message="use double quotes",
        severity=Severity.WARNING,
        position=SourcePosition(3, 1, 20),
        path="a.html",
        fix_failure_reason="value contains template syntax",
    )
    return RunReport(
        files=(
            FileReport("a.html", Dialect.HTML, (fixable, refused)),
            FileReport("b.scss", None, error="b.scss: permission denied"),
        )
    )


class TestTextReporter:
    def test_format_diagnostic(self) -> None:
        lines = [TextReporter.format_diagnostic(d) for d in _run().diagnostics]
        assert lines == [
            "a.html:2:5: error [closing-tag] void element <br> must be self-closed",
            "a.html:3:1: warning [quote-style] use double quotes (not fixed: value contains template syntax)",
        ]

    def test_report_ends_with_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        TextReporter().report(_run())
        out = capsys.readouterr().out.splitlines()
        assert out[0].startswith("a.html:2:5: error [closing-tag]")
        assert "b.scss: error: b.scss: permission denied" in out
        assert out[-1] == ReportSummary.line(_run())

    def test_summary_line(self) -> None:
        line = ReportSummary.line(_run())
        assert line == "2 file(s), 1 error(s), 1 warning(s), 1 unreadable, 1 fixable with `markup-style fix`"


class TestJsonReporters:
    def test_json_document(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonReporter().report(_run())
        data = json.loads(capsys.readouterr().out)
        assert data["clean"] is False
        assert data["summary"]["errors"] == 1
        assert data["files"][0]["diagnostics"][0]["fixable"] is True

    def test_json_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLinesReporter().report(_run())
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [r.get("rule_id") for r in records] == ["closing-tag", "quote-style", None]
        assert records[2] == {"path": "b.scss", "error": "b.scss: permission denied"}


class TestTableReporter:
    def test_renders_rule_ids(self) -> None:
        buffer = io.StringIO()
        TableReporter(Console(file=buffer, width=200)).report(_run())
        out = buffer.getvalue()
        assert "closing-tag" in out
        assert "permission denied" in out
        assert "1 error(s)" in out


class TestReporterFactory:
    @pytest.mark.parametrize(
        ("fmt", "cls"),
        [("text", TextReporter), ("table", TableReporter), ("json", JsonReporter), ("jsonl", JsonLinesReporter)],
    )
    def test_known_formats(self, fmt: str, cls: type) -> None:
        assert isinstance(ReporterFactory.create(fmt), cls)

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown output format 'xml'"):
            ReporterFactory.create("xml")
