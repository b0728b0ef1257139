"""Domain entities: tokens, diagnostics, fixes and per-run reports."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypedDict

from markup_style_linter.domain.constants import SOURCE_EXTENSIONS


class Dialect(Enum):
    """Source dialect. Selects the lexer, parser and rule set for a file."""
    HTML = "html"
    SCSS = "scss"

    @classmethod
    def from_path(cls, path: str) -> "Dialect | None":
        """Classify a file by extension; None when the extension is unsupported."""
        lowered = path.lower()
        for extension, dialect in SOURCE_EXTENSIONS.items():
            if lowered.endswith(extension):
                return cls(dialect)
        return None


class TokenKind(Enum):
    """Structural token kinds for both dialects."""
    TAG_OPEN = "tag-open"
    ATTRIBUTE = "attribute"
    TAG_END = "tag-end"
    TAG_CLOSE = "tag-close"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"
    WHITESPACE = "whitespace"
    SELECTOR = "selector"
    DECLARATION = "declaration"
    AT_RULE = "at-rule"
    BRACE = "brace"


class Severity(Enum):
    """Diagnostic severity. Errors sort before warnings at the same position."""
    ERROR = "error"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        """Sort rank: lower sorts first."""
        return 0 if self is Severity.ERROR else 1


@dataclass(frozen=True)
class SourcePosition:
    """1-based line and column plus the 0-based character offset."""
    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class Token:
    """One lexical unit. Concatenating a file's token texts reproduces the file."""
    kind: TokenKind
    text: str
    position: SourcePosition

    @property
    def start(self) -> int:
        """Offset of the first character."""
        return self.position.offset

    @property
    def end(self) -> int:
        """Offset one past the last character."""
        return self.position.offset + len(self.text)


@dataclass(frozen=True)
class TextEdit:
    """Replace text[start:end] (offsets in the original text) with replacement."""
    start: int
    end: int
    replacement: str

    def overlaps(self, other: "TextEdit") -> bool:
        """True if the two edits touch the same characters. An insert at another edit's boundary does not overlap it."""
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Fix:
    """A mechanical, meaning-preserving correction applied atomically."""
    description: str
    edits: tuple[TextEdit, ...]

    @property
    def start(self) -> int:
        """Lowest offset touched by this fix."""
        return min(edit.start for edit in self.edits)

    @property
    def end(self) -> int:
        """Highest offset touched by this fix."""
        return max(edit.end for edit in self.edits)

    def conflicts_with(self, other: "Fix") -> bool:
        """True if any edit of this fix overlaps an edit of the other."""
        return any(a.overlaps(b) for a in self.edits for b in other.edits)


class DiagnosticDict(TypedDict):
    """Serialization shape of a Diagnostic."""
    path: str
    line: int
    column: int
    severity: str
    rule_id: str
    message: str
    fixable: bool


@dataclass(frozen=True)
class Diagnostic:
    """A rule finding at a source position, optionally carrying a safe fix."""
    rule_id: str
    message: str
    severity: Severity
    position: SourcePosition
    path: str = ""
    fix: Fix | None = None
    fix_failure_reason: str | None = None
    """Why a fix was refused or reverted (e.g. escaping would change meaning)."""
    order: int = field(default=0, compare=False)
    """Registration index of the originating rule; syntax diagnostics use -1."""

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def fixable(self) -> bool:
        """True if the diagnostic carries a safe mechanical fix."""
        return self.fix is not None

    def sort_key(self) -> tuple[int, int, int, int, str]:
        """(line, column, severity, registration order, rule id)."""
        return (
            self.position.line,
            self.position.column,
            self.severity.rank,
            self.order,
            self.rule_id,
        )

    def identity(self) -> tuple[str, int, str]:
        """Key used to drop exact duplicates: rule, position, message."""
        return (self.rule_id, self.position.offset, self.message)

    def as_unfixable(self, reason: str) -> "Diagnostic":
        """Return a copy without its fix, recording why."""
        return replace(self, fix=None, fix_failure_reason=reason)

    def with_path(self, path: str) -> "Diagnostic":
        """Return a copy attributed to a file path."""
        return replace(self, path=path)

    def to_dict(self) -> DiagnosticDict:
        """Convert to a structured record for machine consumers."""
        return {
            "path": self.path,
            "line": self.position.line,
            "column": self.position.column,
            "severity": self.severity.value,
            "rule_id": self.rule_id,
            "message": self.message,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class FileReport:
    """Outcome of one file's pipeline."""
    path: str
    dialect: Dialect | None
    diagnostics: tuple[Diagnostic, ...] = ()
    error: str | None = None
    """IOFailure or unsupported-dialect message."""
    fixed: bool = False
    """True when fixes were written back to the file."""
    fixes_applied: int = 0
    cancelled: bool = False

    def findings(self, threshold: Severity = Severity.WARNING) -> list[Diagnostic]:
        """Diagnostics at or above the severity threshold."""
        return [d for d in self.diagnostics if d.severity.rank <= threshold.rank]

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "dialect": self.dialect.value if self.dialect else None,
            "error": self.error,
            "fixed": self.fixed,
            "fixes_applied": self.fixes_applied,
            "cancelled": self.cancelled,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True)
class RunReport:
    """All file reports of one run, in input order."""
    files: tuple[FileReport, ...] = ()
    fail_on: Severity = Severity.WARNING

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for report in self.files for d in report.diagnostics]

    def is_clean(self) -> bool:
        """True when no file has findings at or above fail_on, failed to load, or was skipped."""
        return not any(
            report.findings(self.fail_on) or report.error or report.cancelled
            for report in self.files
        )

    def counts(self) -> dict[str, int]:
        """Diagnostic counts by severity plus file error count."""
        errors = sum(1 for d in self.diagnostics if d.severity is Severity.ERROR)
        warnings = sum(1 for d in self.diagnostics if d.severity is Severity.WARNING)
        return {
            "files": len(self.files),
            "errors": errors,
            "warnings": warnings,
            "file_errors": sum(1 for report in self.files if report.error),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization (e.g. JSON)."""
        return {
            "clean": self.is_clean(),
            "summary": self.counts(),
            "files": [report.to_dict() for report in self.files],
        }
