"""Indentation: nesting depth times the configured width, spaces only."""

from bisect import bisect_right

from markup_style_linter.domain.constants import PREFORMATTED_ELEMENTS
from markup_style_linter.domain.entities import Diagnostic, Severity, TextEdit, TokenKind
from markup_style_linter.domain.rules import LintContext, TreeRule
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.domain.syntax.sass_nodes import Stylesheet
from markup_style_linter.domain.text import LineIndex

_SCSS_STATEMENTS = (TokenKind.SELECTOR, TokenKind.DECLARATION, TokenKind.AT_RULE)


class DepthMap:
    """Nesting depth at any offset, from half-open content ranges."""

    def __init__(self, ranges: list[tuple[int, int]]) -> None:
        self._starts = sorted(start for start, _ in ranges)
        self._ends = sorted(end for _, end in ranges)

    def depth(self, offset: int) -> int:
        """Number of ranges with start <= offset < end."""
        return bisect_right(self._starts, offset) - bisect_right(self._ends, offset)


class IndentationRule(TreeRule):
    """
    Each line is indented by its nesting depth times `indent_width` spaces.

    HTML depth counts enclosing elements; SCSS depth counts enclosing blocks.
    Only elements and blocks closed explicitly count, so an unclosed `<p>` or
    a brace swallowed by an unterminated string never shifts later lines.
    Lines that continue a tag, comment or multi-line statement are left alone,
    as is the content of pre, textarea, script and style. One finding per
    line; the fix rewrites the line's leading whitespace.
    """

    rule_id: str = "indentation"
    description: str = "Lines must be indented by nesting depth using spaces."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if isinstance(tree, Document):
            depths, skipped = self._html_layout(context, tree)
        elif isinstance(tree, Stylesheet):
            depths, skipped = self._scss_layout(context, tree)
        else:
            return []

        width = context.config.indent_width
        index = context.line_index
        diagnostics: list[Diagnostic] = []
        for line in index.lines():
            if line in skipped:
                continue
            text = index.line_text(line)
            content = text.lstrip(" \t")
            if not content:
                continue
            indent = text[: len(text) - len(content)]
            start = index.line_start(line)
            expected = " " * (depths.depth(start + len(indent)) * width)
            if indent == expected:
                continue
            if "\t" in indent:
                message = f"tab in indentation; expected {len(expected)} spaces"
            else:
                message = f"expected indentation of {len(expected)} spaces, found {len(indent)}"
            diagnostics.append(
                context.diagnostic(
                    self,
                    start,
                    message,
                    edits=[TextEdit(start, start + len(indent), expected)],
                    fix_description=f"Indent with {len(expected)} spaces",
                )
            )
        return diagnostics

    # --------------------------------------------------------------------- #
    # Layouts: depth map plus the set of lines whose indentation is free-form
    # --------------------------------------------------------------------- #

    def _html_layout(self, context: LintContext, tree: Document) -> tuple[DepthMap, set[int]]:
        index = context.line_index
        ranges: list[tuple[int, int]] = []
        skipped: set[int] = set()
        for element in tree.iter_elements():
            # Auto-closed elements end where recovery guessed; they add no depth.
            if element.close_token is not None and element.content_end > element.content_start:
                ranges.append((element.content_start, element.content_end))
            self._skip_inside(index, element.start, element.start_tag_end, skipped)
            if element.lower_name in PREFORMATTED_ELEMENTS:
                self._skip_inside(index, element.content_start, element.content_end, skipped)
        for token in context.tokens:
            if token.kind in (TokenKind.COMMENT, TokenKind.DOCTYPE, TokenKind.TAG_CLOSE):
                self._skip_inside(index, token.start, token.end, skipped)
        return DepthMap(ranges), skipped

    def _scss_layout(self, context: LintContext, tree: Stylesheet) -> tuple[DepthMap, set[int]]:
        index = context.line_index
        ranges = [
            (block.content_start, block.content_end)
            for block in tree.iter_blocks()
            if block.close_brace is not None
        ]
        skipped: set[int] = set()
        for token in context.tokens:
            if token.kind is TokenKind.COMMENT:
                self._skip_inside(index, token.start, token.end, skipped)
            elif token.kind in _SCSS_STATEMENTS:
                self._skip_continuations(index, token.start, token.end, token.kind, skipped)
        return DepthMap(ranges), skipped

    @staticmethod
    def _skip_inside(index: LineIndex, start: int, end: int, skipped: set[int]) -> None:
        """Skip lines whose first non-blank character lies strictly inside (start, end)."""
        first = index.position(start).line
        last = index.position(end).line
        for line in range(first + 1, last + 1):
            text = index.line_text(line)
            offset = index.line_start(line) + len(text) - len(text.lstrip(" \t"))
            if start < offset < end:
                skipped.add(line)

    @staticmethod
    def _skip_continuations(
        index: LineIndex, start: int, end: int, kind: TokenKind, skipped: set[int]
    ) -> None:
        """Skip continuation lines of a statement; selector lists after a comma keep their indent."""
        first = index.position(start).line
        last = index.position(end).line
        for line in range(first + 1, last + 1):
            text = index.line_text(line)
            offset = index.line_start(line) + len(text) - len(text.lstrip(" \t"))
            if not start < offset < end:
                continue
            previous = index.line_text(line - 1).rstrip()
            if kind is TokenKind.SELECTOR and previous.endswith(","):
                continue
            skipped.add(line)
