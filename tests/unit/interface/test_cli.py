"""Unit tests for the Typer CLI interface."""

import io
from unittest.mock import Mock

from rich.console import Console
from typer.testing import CliRunner

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.entities import (
    Diagnostic,
    Dialect,
    FileReport,
    RunReport,
    Severity,
    SourcePosition,
)
from markup_style_linter.domain.exceptions import ConfigurationError
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.cli import (
    EXIT_CLEAN,
    EXIT_CONFIG_ERROR,
    EXIT_FINDINGS,
    CLIAppFactory,
    CLIDependencies,
)

runner = CliRunner()

CLEAN_RUN = RunReport(files=(FileReport("a.html", Dialect.HTML),))
DIRTY_RUN = RunReport(
    files=(
        FileReport(
            "a.html",
            Dialect.HTML,
            (
                Diagnostic(
                    rule_id="img-alt",
                    message="<img> is missing an alt attribute",
                    severity=Severity.WARNING,
                    position=SourcePosition(1, 1, 0),
                    path="a.html",
                ),
            ),
        ),
    )
)


def _make_mock_deps(run: RunReport = CLEAN_RUN, **overrides) -> CLIDependencies:
    """Create CLIDependencies whose batch factory records the resolved config."""
    batch = Mock()
    batch.execute.return_value = run
    config_loader = Mock()
    config_loader.load.return_value = StyleConfiguration(jobs=1)
    defaults: dict = {
        "telemetry": Mock(),
        "guidance_service": GuidanceService(),
        "config_loader": config_loader,
        "batch_factory": Mock(return_value=batch),
    }
    defaults.update(overrides)
    return CLIDependencies(**defaults)


class TestCheckCommand:
    def test_clean_run_exits_zero(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["check", "site"])
        assert result.exit_code == EXIT_CLEAN
        batch = deps.batch_factory.return_value
        batch.execute.assert_called_once_with(["site"], fix=False, dry_run=False)
        deps.telemetry.handshake.assert_called_once()

    def test_findings_exit_one(self) -> None:
        deps = _make_mock_deps(DIRTY_RUN)
        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])
        assert result.exit_code == EXIT_FINDINGS
        assert "a.html:1:1: warning [img-alt] <img> is missing an alt attribute" in result.stdout

    def test_defaults_to_current_directory(self) -> None:
        deps = _make_mock_deps()
        runner.invoke(CLIAppFactory.create_app(deps), ["check"])
        deps.batch_factory.return_value.execute.assert_called_once_with(["."], fix=False, dry_run=False)

    def test_overrides_reach_configuration(self) -> None:
        deps = _make_mock_deps()
        runner.invoke(
            CLIAppFactory.create_app(deps),
            ["check", "--fail-on", "error", "--jobs", "3", "--config", "style.yaml"],
        )
        deps.config_loader.load.assert_called_once_with("style.yaml")
        (config,) = deps.batch_factory.call_args.args
        assert config.fail_on == "error"
        assert config.jobs == 3

    def test_config_error_exits_two(self) -> None:
        deps = _make_mock_deps()
        deps.config_loader.load.side_effect = ConfigurationError("unknown configuration option 'indent'")
        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        deps.telemetry.error.assert_called_once_with(
            "Configuration error: unknown configuration option 'indent'"
        )
        deps.batch_factory.assert_not_called()

    def test_invalid_override_exits_two(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["check", "--jobs", "0"])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_unknown_format_exits_two(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["check", "--format", "xml"])
        assert result.exit_code == EXIT_CONFIG_ERROR


class TestFixCommand:
    def test_fix_writes(self) -> None:
        deps = _make_mock_deps()
        runner.invoke(CLIAppFactory.create_app(deps), ["fix", "a.html"])
        deps.batch_factory.return_value.execute.assert_called_once_with(["a.html"], fix=True, dry_run=False)

    def test_dry_run(self) -> None:
        deps = _make_mock_deps(DIRTY_RUN)
        result = runner.invoke(CLIAppFactory.create_app(deps), ["fix", "--dry-run", "a.html"])
        assert result.exit_code == EXIT_FINDINGS
        deps.batch_factory.return_value.execute.assert_called_once_with(["a.html"], fix=True, dry_run=True)


class TestRulesCommand:
    def test_lists_every_rule(self) -> None:
        buffer = io.StringIO()
        deps = _make_mock_deps(console=Console(file=buffer, width=200))
        result = runner.invoke(CLIAppFactory.create_app(deps), ["rules"])
        assert result.exit_code == 0
        out = buffer.getvalue()
        for rule_id in ("lowercase-names", "closing-tag", "declaration-order", "trailing-whitespace"):
            assert rule_id in out


class TestExplainCommand:
    def test_known_rule(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["explain", "style.indentation"])
        assert result.exit_code == 0
        assert "# Indentation (indentation)" in result.stdout
        assert "Fixable: yes" in result.stdout
        assert "How to fix:" in result.stdout

    def test_unknown_rule_exits_two(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["explain", "no-such-rule"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        deps.telemetry.error.assert_called_once()


def test_resolve_config_without_overrides_returns_loaded_config() -> None:
    deps = _make_mock_deps()
    config = CLIAppFactory.resolve_config(deps, None)
    assert config is deps.config_loader.load.return_value
    deps.config_loader.load.assert_called_once_with(None)
