"""Semantic tree signatures: what an autofix must never change."""

import html

from markup_style_linter.domain.constants import BOOLEAN_ATTRIBUTES
from markup_style_linter.domain.syntax.html_nodes import (
    Attribute,
    CommentNode,
    Document,
    Element,
    Node,
    TextNode,
)
from markup_style_linter.domain.syntax.sass_nodes import (
    Declaration,
    RuleBlock,
    SassComment,
    SassNode,
    Stylesheet,
)
from markup_style_linter.domain.text import StringScanner

Signature = tuple[object, ...]


class TreeSignature:
    """
    Reduces a parsed tree to the parts that carry meaning.

    HTML: element names are case-insensitive, attributes compare as a set of
    decoded values (a boolean attribute equals its `name="name"` form) and
    text compares with whitespace collapsed. Child order is significant.
    SCSS: selectors and statements compare with whitespace collapsed and
    string literals decoded; the members of each block compare as a multiset,
    since declaration reordering is meaning-preserving by convention.
    """

    @staticmethod
    def of(tree: Document | Stylesheet) -> Signature:
        """Signature of a whole document or stylesheet."""
        if isinstance(tree, Document):
            return TreeSignature._html_children(tree.children)
        return TreeSignature._sass_children(tree.children)

    @staticmethod
    def _html_children(children: list[Node]) -> Signature:
        signatures: list[Signature] = []
        for child in children:
            signature = TreeSignature._html_node(child)
            if signature is not None:
                signatures.append(signature)
        return tuple(signatures)

    @staticmethod
    def _html_node(node: Node) -> Signature | None:
        if isinstance(node, Element):
            attributes = tuple(sorted(TreeSignature._html_attribute(a) for a in node.attributes))
            return ("element", node.lower_name, attributes, TreeSignature._html_children(node.children))
        if isinstance(node, CommentNode):
            return ("comment", " ".join(node.token.text.split()))
        if isinstance(node, TextNode):
            text = " ".join(node.token.text.split())
            return ("text", text) if text else None
        return None

    @staticmethod
    def _html_attribute(attribute: Attribute) -> tuple[str, str]:
        value = html.unescape(attribute.value or "")
        if attribute.lower_name in BOOLEAN_ATTRIBUTES and value.lower() == attribute.lower_name:
            value = ""
        return (attribute.lower_name, value)

    @staticmethod
    def _sass_children(children: list[SassNode]) -> Signature:
        return tuple(sorted((TreeSignature._sass_node(c) for c in children), key=repr))

    @staticmethod
    def _sass_node(node: SassNode) -> Signature:
        if isinstance(node, RuleBlock):
            return (
                "block",
                TreeSignature.normalize_statement(node.prelude_text),
                TreeSignature._sass_children(node.children),
            )
        if isinstance(node, Declaration):
            return ("declaration", TreeSignature.normalize_statement(node.text.rstrip().rstrip(";")))
        if isinstance(node, SassComment):
            return ("comment", " ".join(node.token.text.split()))
        return ("unknown",)

    @staticmethod
    def normalize_statement(text: str) -> str:
        """Collapse whitespace and rewrite string literals in one canonical quoting."""
        parts: list[str] = []
        cursor = 0
        for literal in StringScanner.scan(text):
            parts.append(" ".join(text[cursor:literal.start].split()))
            parts.append(repr(TreeSignature.decode_css_string(literal.body)))
            cursor = literal.end
        parts.append(" ".join(text[cursor:].split()))
        return " ".join(p for p in parts if p)

    @staticmethod
    def decode_css_string(body: str) -> str:
        """Resolve backslash-escaped quote characters in a CSS string body."""
        out: list[str] = []
        index = 0
        while index < len(body):
            char = body[index]
            if char == "\\" and index + 1 < len(body) and body[index + 1] in "\"'":
                out.append(body[index + 1])
                index += 2
                continue
            out.append(char)
            index += 1
        return "".join(out)
