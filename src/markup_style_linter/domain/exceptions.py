"""Error taxonomy. Rule violations are data (Diagnostic), not exceptions."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from markup_style_linter.domain.entities import SourcePosition


class MarkupStyleError(Exception):
    """Base class for all linter errors."""


class MalformedSyntaxError(MarkupStyleError):
    """
    Recoverable syntax problem found while tokenizing or parsing.

    Lexers and parsers record instances instead of raising them; the lint
    pipeline turns each one into a `syntax` diagnostic and keeps going.
    """

    def __init__(self, message: str, position: "SourcePosition") -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __repr__(self) -> str:
        return f"MalformedSyntaxError({self.message!r}, line={self.position.line}, column={self.position.column})"


class ConfigurationError(MarkupStyleError):
    """Malformed or contradictory configuration. Fatal for the run."""


class IOFailure(MarkupStyleError):
    """A file could not be read or written. Isolated to that file."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
