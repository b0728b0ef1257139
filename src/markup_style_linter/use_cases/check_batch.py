"""Use Case: Check (and optionally fix) many files concurrently."""

import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from markup_style_linter.domain.entities import Dialect, FileReport, RunReport
from markup_style_linter.domain.exceptions import IOFailure
from markup_style_linter.domain.protocols import FileSystemProtocol, TelemetryPort
from markup_style_linter.use_cases.apply_fixes import ApplyFixesUseCase
from markup_style_linter.use_cases.lint_file import LintFileUseCase


class CheckBatchUseCase:
    """
    Run the per-file pipeline over a set of paths on a thread pool.

    Workers share only the immutable configuration and the stateless use
    cases. Reports come back in discovery order regardless of completion
    order. Setting the cancel event skips files that have not started yet;
    files already in progress finish normally.
    """

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        lint_use_case: LintFileUseCase,
        telemetry: TelemetryPort,
        fix_use_case: Optional[ApplyFixesUseCase] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.filesystem = filesystem
        self.lint_use_case = lint_use_case
        self.fix_use_case = fix_use_case or ApplyFixesUseCase(lint_use_case, telemetry)
        self.telemetry = telemetry
        self.config = lint_use_case.config
        self.cancel_event = cancel_event or threading.Event()

    def execute(
        self,
        paths: Sequence[str],
        fix: bool = False,
        dry_run: bool = False,
    ) -> RunReport:
        """Discover sources under paths and check (or fix) each one."""
        files = self.filesystem.discover_sources(paths, self.config.exclude)
        verb = "Fixing" if fix else "Checking"
        self.telemetry.step(f"🔍 {verb} {len(files)} file(s) with {self.config.jobs} worker(s)")
        with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
            futures = [pool.submit(self._process, path, fix, dry_run) for path in files]
            try:
                reports = tuple(future.result() for future in futures)
            except KeyboardInterrupt:
                self.telemetry.warning("Interrupted; finishing files already in progress")
                self.cancel()
                reports = tuple(future.result() for future in futures)
        cancelled = sum(1 for report in reports if report.cancelled)
        if cancelled:
            self.telemetry.warning(f"Cancelled: {cancelled} file(s) were not checked")
        return RunReport(files=reports, fail_on=self.config.fail_on_severity)

    def cancel(self) -> None:
        """Request cooperative cancellation of files not yet started."""
        self.cancel_event.set()

    def _process(self, path: str, fix: bool, dry_run: bool) -> FileReport:
        dialect = Dialect.from_path(path)
        if self.cancel_event.is_set():
            return FileReport(path=path, dialect=dialect, cancelled=True)
        if dialect is None:
            return FileReport(path=path, dialect=None, error=f"unsupported file type: {path}")
        try:
            text = self.filesystem.read_text(path)
        except IOFailure as exc:
            self.telemetry.error(str(exc))
            return FileReport(path=path, dialect=dialect, error=str(exc))

        if not fix:
            return self.lint_use_case.execute(path, text)

        outcome = self.fix_use_case.fix_text(text, dialect, path)
        if not outcome.changed or dry_run:
            if outcome.changed:
                self.telemetry.step(f"Would fix {path} ({outcome.applied} fix(es))")
            return FileReport(
                path=path,
                dialect=dialect,
                diagnostics=outcome.diagnostics,
                fixes_applied=outcome.applied,
            )
        try:
            self.filesystem.write_text(path, outcome.text)
        except IOFailure as exc:
            self.telemetry.error(str(exc))
            return FileReport(path=path, dialect=dialect, diagnostics=outcome.diagnostics, error=str(exc))
        self.telemetry.step(f"🛠️ Fixed {path} ({outcome.applied} fix(es))")
        return FileReport(
            path=path,
            dialect=dialect,
            diagnostics=outcome.diagnostics,
            fixed=True,
            fixes_applied=outcome.applied,
        )
