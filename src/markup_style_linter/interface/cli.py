"""CLI entry points for markup-style - Thin Controller using Typer."""

import sys
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.constants import BANNER
from markup_style_linter.domain.engine import known_rules, rule_dialects
from markup_style_linter.domain.exceptions import ConfigurationError
from markup_style_linter.domain.protocols import GuidanceServiceProtocol, TelemetryPort
from markup_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from markup_style_linter.infrastructure.reporters import ReporterFactory
from markup_style_linter.use_cases.check_batch import CheckBatchUseCase

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    telemetry: TelemetryPort
    guidance_service: GuidanceServiceProtocol
    config_loader: ConfigFileLoader
    batch_factory: Callable[[StyleConfiguration], CheckBatchUseCase]
    console: Optional[Console] = None


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def resolve_config(
        deps: CLIDependencies,
        config_path: Optional[Path],
        fail_on: Optional[str] = None,
        jobs: Optional[int] = None,
    ) -> StyleConfiguration:
        """Load configuration and apply command-line overrides. Raises ConfigurationError."""
        config = deps.config_loader.load(str(config_path) if config_path else None)
        overrides: dict[str, object] = {}
        if fail_on is not None:
            overrides["fail_on"] = fail_on
        if jobs is not None:
            overrides["jobs"] = jobs
        return replace(config, **overrides) if overrides else config  # type: ignore[arg-type]

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="markup-style",
            help="markup-style: house style checks for HTML and SCSS. Run 'markup-style check' to lint; 'markup-style fix' to apply safe fixes.",
            add_completion=False,
        )

        def _session_start(verbose: bool = False) -> None:
            """Print banner then handshake. Banner goes to stderr so stdout stays machine-readable."""
            typer.echo(BANNER, err=True)
            set_verbose = getattr(deps.telemetry, "set_verbose", None)
            if callable(set_verbose):
                set_verbose(verbose)
            deps.telemetry.handshake()

        def _run(
            paths: list[Path] | None,
            output_format: str,
            config_path: Optional[Path],
            fix: bool,
            dry_run: bool = False,
            fail_on: Optional[str] = None,
            jobs: Optional[int] = None,
        ) -> None:
            try:
                reporter = ReporterFactory.create(output_format, deps.console)
                config = CLIAppFactory.resolve_config(deps, config_path, fail_on, jobs)
                batch = deps.batch_factory(config)
            except ConfigurationError as exc:
                deps.telemetry.error(f"Configuration error: {exc}")
                sys.exit(EXIT_CONFIG_ERROR)
            targets = [str(p) for p in paths] if paths else ["."]
            run = batch.execute(targets, fix=fix, dry_run=dry_run)
            reporter.report(run)
            if run.is_clean():
                sys.exit(EXIT_CLEAN)
            sys.exit(EXIT_FINDINGS)

        @app.command()
        def check(
            paths: list[Path] | None = typer.Argument(None, help="Files or directories to check (default: .)"),  # noqa: B008, RUF100
            output_format: str = typer.Option(
                "text", "--format", "-f", help="Output format: text, table, json or jsonl"),
            config: Optional[Path] = typer.Option(
                None, "--config", "-c", help="YAML or TOML config file (default: pyproject.toml / .markup-style.yaml)"),
            fail_on: Optional[str] = typer.Option(
                None, "--fail-on", help="Lowest severity that fails the run: warning or error"),
            jobs: Optional[int] = typer.Option(
                None, "--jobs", "-j", help="Worker threads (default: CPU count)"),
            verbose: bool = typer.Option(
                False, "--verbose", "-v", help="Log debug details"),
        ) -> None:
            """Check files against the house style. Exit 0 when clean, 1 on findings, 2 on configuration errors."""
            _session_start(verbose)
            _run(paths, output_format, config, fix=False, fail_on=fail_on, jobs=jobs)

        @app.command()
        def fix(
            paths: list[Path] | None = typer.Argument(None, help="Files or directories to fix (default: .)"),  # noqa: B008, RUF100
            dry_run: bool = typer.Option(
                False, "--dry-run", help="Report what would be fixed without writing files"),
            output_format: str = typer.Option(
                "text", "--format", "-f", help="Output format for remaining findings"),
            config: Optional[Path] = typer.Option(
                None, "--config", "-c", help="YAML or TOML config file"),
            jobs: Optional[int] = typer.Option(
                None, "--jobs", "-j", help="Worker threads (default: CPU count)"),
            verbose: bool = typer.Option(
                False, "--verbose", "-v", help="Log debug details"),
        ) -> None:
            """Apply safe, verified fixes in place, then report what is left."""
            _session_start(verbose)
            _run(paths, output_format, config, fix=True, dry_run=dry_run, jobs=jobs)

        @app.command()
        def rules() -> None:
            """List every rule with its dialects, severity and fixability."""
            console = deps.console or Console()
            table = Table(title="markup-style rules", title_justify="left")
            table.add_column("Rule")
            table.add_column("Dialects")
            table.add_column("Severity")
            table.add_column("Fixable")
            table.add_column("Description")
            for rule_id, rule in known_rules().items():
                dialects = ", ".join(d.value for d in rule_dialects(rule_id))
                table.add_row(
                    rule_id,
                    dialects,
                    rule.severity.value,
                    "yes" if rule.fixable else "no",
                    rule.description,
                )
            console.print(table)

        @app.command()
        def explain(
            rule_id: str = typer.Argument(..., help="Rule id, e.g. indentation or style.indentation"),
        ) -> None:
            """Explain a rule: what it checks, how to fix findings by hand, and examples."""
            key = rule_id.strip().lower().removeprefix("style.")
            entry = deps.guidance_service.get_entry(key)
            if entry is None:
                deps.telemetry.error(f"Unknown rule '{rule_id}'. Run 'markup-style rules' to list rules.")
                sys.exit(EXIT_CONFIG_ERROR)
            typer.echo(f"# {entry.get('display_name', key)} ({key})")
            if entry.get("short_description"):
                typer.echo(f"Summary: {entry['short_description']}")
            if entry.get("dialects"):
                typer.echo(f"Dialects: {', '.join(entry['dialects'])}")
            if entry.get("severity"):
                typer.echo(f"Severity: {entry['severity']}")
            typer.echo(f"Fixable: {'yes' if entry.get('fixable') else 'no'}")
            typer.echo(f"How to fix: {deps.guidance_service.get_manual_instructions(key)}")
            typer.echo(f"Guidance: {deps.guidance_service.get_proactive_guidance(key)}")
            if entry.get("example_bad"):
                typer.echo(f"Bad:  {entry['example_bad']}")
            if entry.get("example_good"):
                typer.echo(f"Good: {entry['example_good']}")

        return app
