"""SCSS block structure: selector nesting depth and declaration ordering."""

from markup_style_linter.domain.constants import (
    CHILD_SELECTOR,
    EXTEND,
    INCLUDE,
    INCLUDE_BLOCK,
    PROPERTY,
    SELF_MODIFIER,
    VARIABLE,
)
from markup_style_linter.domain.entities import Diagnostic, Severity, TextEdit
from markup_style_linter.domain.rules import LintContext, TreeRule
from markup_style_linter.domain.syntax.sass_nodes import (
    Declaration,
    RuleBlock,
    SassComment,
    Stylesheet,
)

CATEGORY_LABELS: dict[str, str] = {
    VARIABLE: "$variables",
    EXTEND: "@extend",
    INCLUDE: "@include",
    PROPERTY: "properties",
    INCLUDE_BLOCK: "@include blocks",
    SELF_MODIFIER: "'&' selectors",
    CHILD_SELECTOR: "nested selectors",
}


class NestingDepthRule(TreeRule):
    """Selector blocks may nest at most `max_nesting_depth` levels. At-rule blocks do not count."""

    rule_id: str = "nesting-depth"
    description: str = "Selectors must not nest deeper than the configured maximum."
    severity: Severity = Severity.WARNING
    fixable: bool = False

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if not isinstance(tree, Stylesheet):
            return []
        limit = context.config.max_nesting_depth
        return [
            context.diagnostic(
                self,
                block.open_brace.start,
                f"selector nested {block.depth} levels deep (maximum {limit})",
            )
            for block in tree.iter_blocks()
            if block.is_selector_block and block.depth > limit
        ]


class DeclarationOrderRule(TreeRule):
    """
    Members of a block follow the configured category order.

    Default order: $variables, @extend, @include, properties, @include blocks,
    `&` selectors, nested selectors. One finding per block, at the first
    member that appears after a later category.

    The fix reorders member texts stably and keeps the whitespace between
    them. It is refused when a comment sits before or between members (it would lose
    the member it describes) or when the block holds control flow or other
    at-rules whose position may matter.
    """

    rule_id: str = "declaration-order"
    description: str = "Block members must follow the configured declaration order."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if not isinstance(tree, Stylesheet):
            return []
        diagnostics: list[Diagnostic] = []
        for block in tree.iter_blocks():
            diagnostic = self._check_block(context, block)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
        return diagnostics

    def _check_block(self, context: LintContext, block: RuleBlock) -> Diagnostic | None:
        order = context.config.declaration_order
        members = [c for c in block.children if isinstance(c, (Declaration, RuleBlock))]
        worst: Declaration | RuleBlock | None = None
        worst_rank = -1
        for member in members:
            category = member.category
            if category is None:
                continue
            rank = order.index(category)
            if worst is not None and rank < worst_rank:
                message = f"{self.label(member)} should come before {self.label(worst)}"
                return self._report(context, block, members, member.start, message)
            if rank > worst_rank:
                worst, worst_rank = member, rank
        return None

    @staticmethod
    def label(member: Declaration | RuleBlock) -> str:
        """Category label; nested at-rule blocks such as @media are named by keyword."""
        category = member.category or CHILD_SELECTOR
        if isinstance(member, RuleBlock) and member.keyword is not None and category == CHILD_SELECTOR:
            return f"@{member.keyword} blocks"
        return CATEGORY_LABELS[category]

    def _report(
        self,
        context: LintContext,
        block: RuleBlock,
        members: list[Declaration | RuleBlock],
        offset: int,
        message: str,
    ) -> Diagnostic:
        reason = self._refusal(block, members)
        if reason is not None:
            return context.diagnostic(self, offset, message, fix_failure_reason=reason)

        order = context.config.declaration_order
        text = context.text
        separators = [text[left.end:right.start] for left, right in zip(members, members[1:])]
        ranked = sorted(members, key=lambda m: order.index(m.category or ""))
        parts: list[str] = []
        for index, member in enumerate(ranked):
            member_text = text[member.start:member.end]
            if isinstance(member, Declaration) and not member.terminated and index < len(ranked) - 1:
                member_text += ";"
            parts.append(member_text)
            if index < len(separators):
                parts.append(separators[index])
        edit = TextEdit(members[0].start, members[-1].end, "".join(parts))
        return context.diagnostic(
            self, offset, message, edits=[edit], fix_description="Reorder block members"
        )

    @staticmethod
    def _refusal(block: RuleBlock, members: list[Declaration | RuleBlock]) -> str | None:
        last = members[-1].end
        # A comment before the first member describes it and would stay behind.
        if any(isinstance(c, SassComment) and c.start < last for c in block.children):
            return "comments among members would be separated from what they describe"
        if any(m.category is None for m in members):
            return "block contains control flow or at-rules whose position may matter"
        if any(isinstance(m, RuleBlock) and m.close_brace is None for m in members):
            return "block contains an unclosed nested block"
        return None
