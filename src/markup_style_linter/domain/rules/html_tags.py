"""HTML tag rules: name case, closing tags, boolean attributes and image alt text."""

import re
from collections.abc import Iterator

from markup_style_linter.domain.constants import BOOLEAN_ATTRIBUTES, FOREIGN_ELEMENTS
from markup_style_linter.domain.entities import Diagnostic, Severity, TextEdit
from markup_style_linter.domain.rules import LintContext, TreeRule
from markup_style_linter.domain.syntax.html_nodes import Document, Element, Node

_CLOSE_NAME = re.compile(r"</([^\s/>]+)")


def _html_elements(context: LintContext) -> Iterator[Element]:
    tree = context.tree
    if not isinstance(tree, Document):
        return iter(())
    return tree.iter_elements()


class LowercaseNamesRule(TreeRule):
    """
    Element and attribute names must be lowercase.

    - Detection: one finding per start tag with an uppercase tag or attribute
      name, one per end tag with an uppercase name.
    - Fix: lowercases the names in place.
    SVG and MathML subtrees are skipped; their names are case-sensitive.
    """

    rule_id: str = "lowercase-names"
    description: str = "Element and attribute names must be lowercase."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if not isinstance(tree, Document):
            return []
        diagnostics: list[Diagnostic] = []
        self._visit(context, tree.children, diagnostics)
        return diagnostics

    def _visit(self, context: LintContext, nodes: list[Node], out: list[Diagnostic]) -> None:
        for node in nodes:
            if not isinstance(node, Element):
                continue
            self._check_start_tag(context, node, out)
            self._check_end_tag(context, node, out)
            if node.lower_name not in FOREIGN_ELEMENTS:
                self._visit(context, node.children, out)

    def _check_start_tag(self, context: LintContext, element: Element, out: list[Diagnostic]) -> None:
        edits: list[TextEdit] = []
        name_start = element.open_token.start + 1
        if element.name != element.lower_name:
            edits.append(TextEdit(name_start, name_start + len(element.name), element.lower_name))
        for attribute in element.attributes:
            if attribute.name != attribute.lower_name:
                edits.append(
                    TextEdit(attribute.start, attribute.start + len(attribute.name), attribute.lower_name)
                )
        if not edits:
            return
        out.append(
            context.diagnostic(
                self,
                element.start,
                f"<{element.name}> uses uppercase letters in element or attribute names",
                edits=edits,
                fix_description="Lowercase element and attribute names",
            )
        )

    def _check_end_tag(self, context: LintContext, element: Element, out: list[Diagnostic]) -> None:
        token = element.close_token
        if token is None:
            return
        match = _CLOSE_NAME.match(token.text)
        if match is None or match.group(1) == match.group(1).lower():
            return
        name = match.group(1)
        name_start = token.start + 2
        out.append(
            context.diagnostic(
                self,
                token.start,
                f"closing tag </{name}> should be lowercase",
                edits=[TextEdit(name_start, name_start + len(name), name.lower())],
            )
        )


class ClosingTagRule(TreeRule):
    """
    Void elements are self-closed (`<br/>`); every other element has an explicit end tag.

    Fixable only for void elements written without the slash. A missing end
    tag or a self-closed non-void element needs a human to decide where the
    element ends.
    """

    rule_id: str = "closing-tag"
    description: str = "Void elements must be self-closed; non-void elements need an end tag."
    severity: Severity = Severity.ERROR
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for element in _html_elements(context):
            if element.end_token is None:
                # Unterminated start tag; already a syntax error.
                continue
            if element.is_void:
                if element.self_closing:
                    continue
                diagnostics.append(
                    context.diagnostic(
                        self,
                        element.start,
                        f"void element <{element.lower_name}> must be self-closed with '/>'",
                        edits=[TextEdit(element.end_token.start, element.end_token.start, "/")],
                        fix_description="Insert '/' before '>'",
                    )
                )
            elif element.self_closing:
                diagnostics.append(
                    context.diagnostic(
                        self,
                        element.start,
                        f"<{element.lower_name}/> is not a void element; "
                        f"use an explicit </{element.lower_name}>",
                    )
                )
            elif element.close_token is None and not element.closed_at_eof:
                # Elements open at end of input are already syntax errors.
                diagnostics.append(
                    context.diagnostic(
                        self,
                        element.start,
                        f"<{element.lower_name}> has no closing tag </{element.lower_name}>",
                    )
                )
        return diagnostics


class BooleanAttributeRule(TreeRule):
    """Flags attributes whose value repeats their own name (`disabled="disabled"`)."""

    rule_id: str = "boolean-attribute"
    description: str = "Boolean attributes are written bare, without a value."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for element in _html_elements(context):
            for attribute in element.attributes:
                if attribute.value is None or not attribute.terminated:
                    continue
                if attribute.value.lower() != attribute.lower_name:
                    continue
                message = f"attribute '{attribute.lower_name}' repeats its name as its value"
                if attribute.lower_name in BOOLEAN_ATTRIBUTES:
                    diagnostics.append(
                        context.diagnostic(
                            self,
                            attribute.start,
                            message,
                            edits=[TextEdit(attribute.start + len(attribute.name), attribute.end, "")],
                            fix_description=f"Write '{attribute.name}' without a value",
                        )
                    )
                else:
                    diagnostics.append(
                        context.diagnostic(
                            self,
                            attribute.start,
                            message,
                            fix_failure_reason=(
                                f"'{attribute.lower_name}' is not a boolean attribute; "
                                "dropping its value would change it"
                            ),
                        )
                    )
        return diagnostics


class ImgAltRule(TreeRule):
    """Every <img> carries an alt attribute. Not fixable: alt text needs a human."""

    rule_id: str = "img-alt"
    description: str = "Images must have an alt attribute."
    severity: Severity = Severity.WARNING
    fixable: bool = False

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        return [
            context.diagnostic(self, element.start, "<img> is missing an alt attribute")
            for element in _html_elements(context)
            if element.lower_name == "img" and element.attribute("alt") is None
        ]
