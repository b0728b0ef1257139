"""Attribute ordering within start tags."""

from fnmatch import fnmatchcase

from markup_style_linter.domain.constants import OTHER_CATEGORY
from markup_style_linter.domain.entities import Diagnostic, Severity, TextEdit
from markup_style_linter.domain.rules import LintContext, TreeRule
from markup_style_linter.domain.syntax.html_nodes import Attribute, Document, Element


class AttributeOrderRule(TreeRule):
    """
    Attributes follow the configured category order (default: class, id, data-*, other).

    Categories are exact names, prefix globs such as `data-*`, or the catch-all
    `other`. The fix permutes attribute texts stably and keeps the whitespace
    between them, so line breaks inside a tag survive.
    """

    rule_id: str = "attribute-order"
    description: str = "Attributes must follow the configured category order."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if not isinstance(tree, Document):
            return []
        order = context.config.attribute_order
        diagnostics: list[Diagnostic] = []
        for element in tree.iter_elements():
            if len(element.attributes) < 2:
                continue
            ranks = [self.rank(a, order) for a in element.attributes]
            diagnostic = self._check_element(context, element, ranks, order)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
        return diagnostics

    @staticmethod
    def rank(attribute: Attribute, order: tuple[str, ...]) -> int:
        """Index of the first category the attribute belongs to."""
        name = attribute.lower_name
        for index, category in enumerate(order):
            if category == OTHER_CATEGORY:
                continue
            if name == category or (category.endswith("*") and fnmatchcase(name, category)):
                return index
        return order.index(OTHER_CATEGORY)

    def _check_element(
        self,
        context: LintContext,
        element: Element,
        ranks: list[int],
        order: tuple[str, ...],
    ) -> Diagnostic | None:
        worst = 0
        for index, rank in enumerate(ranks):
            if rank < ranks[worst]:
                attribute = element.attributes[index]
                previous = element.attributes[worst]
                message = (
                    f"attribute '{attribute.lower_name}' ({order[rank]}) should come before "
                    f"'{previous.lower_name}' ({order[ranks[worst]]})"
                )
                return self._report(context, element, ranks, attribute.start, message)
            if rank > ranks[worst]:
                worst = index
        return None

    def _report(
        self,
        context: LintContext,
        element: Element,
        ranks: list[int],
        offset: int,
        message: str,
    ) -> Diagnostic:
        attributes = element.attributes
        if not all(a.terminated for a in attributes):
            return context.diagnostic(
                self, offset, message, fix_failure_reason="attribute value is unterminated"
            )
        separators = [
            context.text[left.end:right.start] for left, right in zip(attributes, attributes[1:])
        ]
        if any(a.is_recovered for a in attributes) or not all(separators):
            return context.diagnostic(
                self, offset, message, fix_failure_reason="attribute list is malformed"
            )
        ordered = [a for _, a in sorted(zip(ranks, attributes), key=lambda pair: pair[0])]
        parts: list[str] = []
        for index, attribute in enumerate(ordered):
            parts.append(attribute.text)
            if index < len(separators):
                parts.append(separators[index])
        edit = TextEdit(attributes[0].start, attributes[-1].end, "".join(parts))
        return context.diagnostic(
            self, offset, message, edits=[edit], fix_description="Reorder attributes"
        )
