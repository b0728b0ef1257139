"""Builds an SCSS block tree from the token stream, tracking brace nesting."""

from collections.abc import Iterable

from markup_style_linter.domain.entities import Token, TokenKind
from markup_style_linter.domain.exceptions import MalformedSyntaxError
from markup_style_linter.domain.syntax.sass_nodes import (
    Declaration,
    RuleBlock,
    SassComment,
    SassNode,
    Stylesheet,
)
from markup_style_linter.domain.text import LineIndex


class SassParser:
    """
    Consumes SassLexer tokens and produces a Stylesheet.

    `@`-rules and `$`-variables stay opaque: a statement followed by `{` opens
    a block, anything else becomes a Declaration. An unmatched `}` is recorded
    and ignored; blocks still open at end of input are auto-closed.
    """

    def __init__(self, line_index: LineIndex) -> None:
        self.line_index = line_index
        self.errors: list[MalformedSyntaxError] = []

    def parse(self, tokens: Iterable[Token]) -> Stylesheet:
        """Build the tree. Never raises on malformed input."""
        self.errors = []
        sheet = Stylesheet()
        stack: list[RuleBlock] = []
        pending: Token | None = None

        for token in tokens:
            if token.kind is TokenKind.WHITESPACE:
                continue
            if token.kind is TokenKind.BRACE and token.text == "{":
                parent_depth = stack[-1].depth if stack else 0
                block = RuleBlock(prelude=pending, open_brace=token, depth=parent_depth)
                if block.is_selector_block:
                    block.depth = parent_depth + 1
                pending = None
                self._append(sheet, stack, block)
                stack.append(block)
                continue
            if pending is not None:
                self._append(sheet, stack, Declaration(pending))
                pending = None
            if token.kind is TokenKind.BRACE:
                if not stack:
                    sheet.stray_braces.append(token)
                    self._error("unmatched '}'", token.start)
                    continue
                block = stack.pop()
                block.close_brace = token
                block.content_end = token.start
            elif token.kind is TokenKind.COMMENT:
                self._append(sheet, stack, SassComment(token))
            elif token.kind is TokenKind.DECLARATION or (
                token.kind is TokenKind.AT_RULE and token.text.endswith(";")
            ):
                self._append(sheet, stack, Declaration(token))
            else:
                # Selector or block at-rule prelude; decided by the next token.
                pending = token

        if pending is not None:
            self._append(sheet, stack, Declaration(pending))
        end = len(self.line_index.text)
        while stack:
            block = stack.pop()
            block.content_end = end
            self._error("block is never closed; missing '}'", block.open_brace.start)
        return sheet

    @staticmethod
    def _append(sheet: Stylesheet, stack: list[RuleBlock], node: SassNode) -> None:
        if stack:
            stack[-1].children.append(node)
        else:
            sheet.children.append(node)

    def _error(self, message: str, offset: int) -> None:
        self.errors.append(MalformedSyntaxError(message, self.line_index.position(offset)))
