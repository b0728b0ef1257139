"""Builds an HTML element tree from the token stream with best-effort recovery."""

import re
from collections.abc import Iterable

from markup_style_linter.domain.entities import Token, TokenKind
from markup_style_linter.domain.exceptions import MalformedSyntaxError
from markup_style_linter.domain.syntax.html_nodes import (
    Attribute,
    CommentNode,
    Document,
    Element,
    Node,
    TextNode,
)
from markup_style_linter.domain.text import LineIndex

_ATTRIBUTE = re.compile(r"([^\s=]+)\s*(?:=\s*(.*))?", re.DOTALL)
_CLOSE_NAME = re.compile(r"</\s*([^\s/>]+)")


class HtmlParser:
    """
    Consumes HtmlLexer tokens and produces a Document.

    A closing tag must match the innermost open element. On a mismatch the
    parser records a MalformedSyntaxError and auto-closes the inner elements
    up to the matching one; a closing tag that matches nothing is recorded as
    stray and ignored. Elements still open at end of input are auto-closed.
    """

    def __init__(self, line_index: LineIndex) -> None:
        self.line_index = line_index
        self.errors: list[MalformedSyntaxError] = []

    def parse(self, tokens: Iterable[Token]) -> Document:
        """Build the tree. Never raises on malformed input."""
        self.errors = []
        document = Document()
        stack: list[Element] = []
        pending: Element | None = None

        for token in tokens:
            if pending is not None:
                if token.kind is TokenKind.ATTRIBUTE:
                    pending.attributes.append(self.attribute_from_token(token))
                    continue
                if token.kind is TokenKind.WHITESPACE:
                    continue
                if token.kind is TokenKind.TAG_END:
                    pending.end_token = token
                    self._open(pending, stack)
                    pending = None
                    continue
                # Start tag was never terminated; the lexer already reported it.
                self._open(pending, stack)
                pending = None

            if token.kind is TokenKind.TAG_OPEN:
                element = Element(name=token.text[1:], open_token=token)
                self._append(document, stack, element)
                pending = element
            elif token.kind is TokenKind.TAG_CLOSE:
                self._close(document, stack, token)
            elif token.kind in (TokenKind.COMMENT, TokenKind.DOCTYPE):
                self._append(document, stack, CommentNode(token))
            else:
                self._append(document, stack, TextNode(token))

        if pending is not None:
            self._open(pending, stack)
        end = len(self.line_index.text)
        while stack:
            element = stack.pop()
            element.content_end = end
            element.closed_at_eof = True
            self._error(f"<{element.name}> is never closed", element.start)
        return document

    @staticmethod
    def attribute_from_token(token: Token) -> Attribute:
        """Split an attribute token into name, value and quote."""
        match = _ATTRIBUTE.fullmatch(token.text)
        if match is None:
            return Attribute(token=token, name=token.text, value=None, quote=None)
        name, raw = match.group(1), match.group(2)
        if raw is None:
            return Attribute(token=token, name=name, value=None, quote=None)
        value_start = token.start + match.start(2)
        if raw[:1] in ("'", '"'):
            quote = raw[0]
            terminated = len(raw) >= 2 and raw.endswith(quote)
            value = raw[1:-1] if terminated else raw[1:]
            return Attribute(
                token=token,
                name=name,
                value=value,
                quote=quote,
                value_start=value_start,
                terminated=terminated,
            )
        return Attribute(token=token, name=name, value=raw, quote="", value_start=value_start)

    @staticmethod
    def _append(document: Document, stack: list[Element], node: Node) -> None:
        if stack:
            stack[-1].children.append(node)
        else:
            document.children.append(node)

    @staticmethod
    def _open(element: Element, stack: list[Element]) -> None:
        element.content_start = element.start_tag_end
        element.content_end = element.content_start
        if element.is_void or element.self_closing:
            return
        stack.append(element)

    def _close(self, document: Document, stack: list[Element], token: Token) -> None:
        match = _CLOSE_NAME.match(token.text)
        name = match.group(1).lower() if match else ""
        index = next(
            (i for i in range(len(stack) - 1, -1, -1) if stack[i].lower_name == name),
            None,
        )
        if index is None:
            document.stray_close_tokens.append(token)
            self._error(f"stray closing tag </{name}> matches no open element", token.start)
            return
        if index != len(stack) - 1:
            innermost = stack[-1]
            self._error(
                f"closing tag </{name}> does not match open <{innermost.name}>; "
                f"auto-closing <{innermost.name}>",
                token.start,
            )
        while len(stack) > index + 1:
            stack.pop().content_end = token.start
        element = stack.pop()
        element.content_end = token.start
        element.close_token = token

    def _error(self, message: str, offset: int) -> None:
        self.errors.append(MalformedSyntaxError(message, self.line_index.position(offset)))
