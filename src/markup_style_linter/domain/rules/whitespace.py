"""Trailing whitespace."""

import re

from markup_style_linter.domain.constants import PREFORMATTED_ELEMENTS
from markup_style_linter.domain.entities import Diagnostic, Dialect, Severity, TextEdit, Token, TokenKind
from markup_style_linter.domain.rules import LintContext, TokenRule

_OPEN_NAME = re.compile(r"<([^\s/>]+)")
_CLOSE_NAME = re.compile(r"</([^\s/>]+)")


class TrailingWhitespaceRule(TokenRule):
    """Lines must not end in spaces or tabs. Preformatted HTML content is left alone."""

    rule_id: str = "trailing-whitespace"
    description: str = "Lines must not end with whitespace."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tokens(self, context: LintContext) -> list[Diagnostic]:
        protected = self.preformatted_ranges(context.tokens) if context.dialect is Dialect.HTML else []
        index = context.line_index
        diagnostics: list[Diagnostic] = []
        for line in index.lines():
            text = index.line_text(line)
            stripped = text.rstrip(" \t")
            if stripped == text:
                continue
            start = index.line_start(line) + len(stripped)
            end = index.line_start(line) + len(text)
            if any(low <= start < high for low, high in protected):
                continue
            diagnostics.append(
                context.diagnostic(
                    self,
                    start,
                    "trailing whitespace",
                    edits=[TextEdit(start, end, "")],
                    fix_description="Remove trailing whitespace",
                )
            )
        return diagnostics

    @staticmethod
    def preformatted_ranges(tokens: tuple[Token, ...]) -> list[tuple[int, int]]:
        """Offset ranges between the start and end tags of pre, textarea, script and style."""
        ranges: list[tuple[int, int]] = []
        open_name: str | None = None
        open_end = 0
        awaiting_end = False
        for token in tokens:
            if token.kind is TokenKind.TAG_OPEN and (open_name is None or awaiting_end):
                match = _OPEN_NAME.match(token.text)
                name = match.group(1).lower() if match else ""
                open_name = name if name in PREFORMATTED_ELEMENTS else None
                awaiting_end = open_name is not None
            elif token.kind is TokenKind.TAG_END and awaiting_end:
                awaiting_end = False
                if token.text == "/>":
                    open_name = None
                else:
                    open_end = token.end
            elif token.kind is TokenKind.TAG_CLOSE and open_name is not None and not awaiting_end:
                match = _CLOSE_NAME.match(token.text)
                if match and match.group(1).lower() == open_name:
                    ranges.append((open_end, token.start))
                    open_name = None
        if open_name is not None and not awaiting_end:
            ranges.append((open_end, tokens[-1].end if tokens else open_end))
        return ranges
