"""BEM class naming for HTML class attributes and SCSS class selectors."""

import re

from markup_style_linter.domain.constants import TEMPLATE_MARKERS
from markup_style_linter.domain.entities import Diagnostic, Severity
from markup_style_linter.domain.rules import LintContext, TreeRule
from markup_style_linter.domain.syntax.html_nodes import Document
from markup_style_linter.domain.syntax.sass_nodes import RuleBlock, SassNode, Stylesheet
from markup_style_linter.domain.text import StringScanner

_WORD = r"[a-z0-9]+(?:-[a-z0-9]+)*"
BEM_CLASS = re.compile(rf"{_WORD}(?:__{_WORD})?(?:--{_WORD})?")
_CLASS_SELECTOR = re.compile(r"(?<![\w\\-])\.(-?[A-Za-z_][A-Za-z0-9_-]*)")
# Masked before class names are read: interpolation as "#", attribute
# selectors and comments as blanks.
_INTERPOLATION = re.compile(r"#\{[^}]*\}")
_OPAQUE = re.compile(r"\[[^\]]*\]|/\*.*?\*/|//[^\n]*", re.DOTALL)


class BemNamingRule(TreeRule):
    """
    Class names follow `block`, `block__element` or `block--modifier`
    (lowercase words joined by single hyphens).

    Names produced by template syntax or `#{}` interpolation are not checked.
    Not fixable: renaming a class breaks every other file that uses it.
    """

    rule_id: str = "bem-naming"
    description: str = "Class names must follow the BEM naming convention."
    severity: Severity = Severity.WARNING
    fixable: bool = False

    def check_tree(self, context: LintContext) -> list[Diagnostic]:
        tree = context.tree
        if isinstance(tree, Document):
            return self._check_html(context, tree)
        if isinstance(tree, Stylesheet):
            diagnostics: list[Diagnostic] = []
            self._check_blocks(context, tree.children, diagnostics)
            return diagnostics
        return []

    @staticmethod
    def is_valid(name: str) -> bool:
        return BEM_CLASS.fullmatch(name) is not None

    def _message(self, name: str) -> str:
        return f"class '{name}' does not follow BEM naming (block__element--modifier)"

    def _check_html(self, context: LintContext, tree: Document) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for element in tree.iter_elements():
            for attribute in element.attributes:
                if attribute.lower_name != "class" or attribute.value is None:
                    continue
                if attribute.value_start is None or not attribute.terminated:
                    continue
                if any(marker in attribute.value for marker in TEMPLATE_MARKERS):
                    continue
                base = attribute.value_start + (1 if attribute.quote else 0)
                for match in re.finditer(r"\S+", attribute.value):
                    if not self.is_valid(match.group(0)):
                        diagnostics.append(
                            context.diagnostic(self, base + match.start(), self._message(match.group(0)))
                        )
        return diagnostics

    def _check_blocks(self, context: LintContext, nodes: list[SassNode], out: list[Diagnostic]) -> None:
        for node in nodes:
            if not isinstance(node, RuleBlock):
                continue
            if node.keyword is not None and node.keyword.endswith("keyframes"):
                # Keyframe selectors are percentages, not classes.
                continue
            if node.is_selector_block and node.prelude is not None:
                self._check_prelude(context, node.prelude.text, node.prelude.start, out)
            self._check_blocks(context, node.children, out)

    def _check_prelude(self, context: LintContext, prelude: str, base: int, out: list[Diagnostic]) -> None:
        masked = list(prelude)
        for literal in StringScanner.scan(prelude):
            masked[literal.start:literal.end] = " " * (literal.end - literal.start)
        text = "".join(masked)
        text = _INTERPOLATION.sub(lambda m: "#" * len(m.group(0)), text)
        text = _OPAQUE.sub(lambda m: " " * len(m.group(0)), text)
        for match in _CLASS_SELECTOR.finditer(text):
            if text.startswith("#", match.end()):
                # Name continues with interpolation.
                continue
            name = match.group(1)
            if not self.is_valid(name):
                out.append(context.diagnostic(self, base + match.start(), self._message(name)))
