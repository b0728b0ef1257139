"""Shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
on the import path.
"""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.entities import Dialect
from markup_style_linter.use_cases.lint_file import LintFileUseCase, LintResult


@pytest.fixture
def config() -> StyleConfiguration:
    """Default configuration with a single worker, so runs are reproducible."""
    return StyleConfiguration(jobs=1)


@pytest.fixture
def telemetry() -> MagicMock:
    return MagicMock()


@pytest.fixture
def linter(config: StyleConfiguration) -> LintFileUseCase:
    return LintFileUseCase(config)


@pytest.fixture
def lint_html(linter: LintFileUseCase) -> Callable[[str], LintResult]:
    def _lint(text: str) -> LintResult:
        return linter.lint_text(text, Dialect.HTML, "page.html")

    return _lint


@pytest.fixture
def lint_scss(linter: LintFileUseCase) -> Callable[[str], LintResult]:
    def _lint(text: str) -> LintResult:
        return linter.lint_text(text, Dialect.SCSS, "style.scss")

    return _lint


@pytest.fixture
def lint_with() -> Callable[..., LintResult]:
    """Lint text with a configuration built from keyword options."""

    def _lint(text: str, dialect: Dialect, **options: object) -> LintResult:
        options.setdefault("jobs", 1)
        return LintFileUseCase(StyleConfiguration(**options)).lint_text(text, dialect)  # type: ignore[arg-type]

    return _lint
