"""Quote style for HTML attribute values and SCSS string literals."""

from markup_style_linter.domain.constants import INTERPOLATION_DELIMITERS, TEMPLATE_DELIMITERS
from markup_style_linter.domain.entities import Diagnostic, Dialect, Severity, TextEdit, Token, TokenKind
from markup_style_linter.domain.rules import LintContext, TokenRule
from markup_style_linter.domain.syntax.html_parser import HtmlParser
from markup_style_linter.domain.syntax.sass_nodes import at_keyword
from markup_style_linter.domain.text import StringLiteral, StringScanner, delimited_spans, within_spans

_HTML_ESCAPES: dict[str, str] = {'"': "&quot;", "'": "&#39;"}
_SCSS_STATEMENTS = (TokenKind.SELECTOR, TokenKind.DECLARATION, TokenKind.AT_RULE)


class QuoteStyleRule(TokenRule):
    """
    Attribute values and string literals use the configured quote character.

    HTML values are re-quoted with the inner quote escaped as an entity;
    unquoted values gain quotes. SCSS strings escape the inner quote with a
    backslash. The fix is refused where escaping would change meaning: a
    template expression or `#{}` interpolation whose own text contains the new
    quote. A quote outside such a span is escaped like any other.
    """

    rule_id: str = "quote-style"
    description: str = "Attribute values and strings use the configured quote character."
    severity: Severity = Severity.WARNING
    fixable: bool = True

    def check_tokens(self, context: LintContext) -> list[Diagnostic]:
        if context.dialect is Dialect.HTML:
            return self._check_html(context)
        return self._check_scss(context)

    # --------------------------------------------------------------------- #
    # HTML attribute values
    # --------------------------------------------------------------------- #

    def _check_html(self, context: LintContext) -> list[Diagnostic]:
        target = context.config.quote_char
        diagnostics: list[Diagnostic] = []
        for token in context.tokens:
            if token.kind is not TokenKind.ATTRIBUTE:
                continue
            attribute = HtmlParser.attribute_from_token(token)
            if attribute.value is None or attribute.value_start is None:
                continue
            if attribute.quote == target or not attribute.terminated:
                continue
            value = attribute.value
            if attribute.quote:
                message = f"attribute '{attribute.lower_name}' should use {context.config.quote_style} quotes"
                span_end = attribute.value_start + len(value) + 2
            else:
                message = f"attribute '{attribute.lower_name}' value should be quoted"
                span_end = attribute.value_start + len(value)
            if within_spans(value, target, delimited_spans(value, TEMPLATE_DELIMITERS)):
                diagnostics.append(
                    context.diagnostic(
                        self,
                        attribute.start,
                        message,
                        fix_failure_reason=(
                            "value holds template syntax containing the quote character; "
                            "escaping it would change the template"
                        ),
                    )
                )
                continue
            replacement = target + value.replace(target, _HTML_ESCAPES[target]) + target
            diagnostics.append(
                context.diagnostic(
                    self,
                    attribute.start,
                    message,
                    edits=[TextEdit(attribute.value_start, span_end, replacement)],
                    fix_description=f"Quote value with {target}",
                )
            )
        return diagnostics

    # --------------------------------------------------------------------- #
    # SCSS string literals
    # --------------------------------------------------------------------- #

    def _check_scss(self, context: LintContext) -> list[Diagnostic]:
        target = context.config.quote_char
        diagnostics: list[Diagnostic] = []
        for token in context.tokens:
            if token.kind not in _SCSS_STATEMENTS or self._is_charset(token):
                continue
            for literal in StringScanner.scan(token.text, token.start):
                if literal.quote == target or not literal.terminated:
                    continue
                diagnostics.append(self._scss_literal(context, literal, target))
        return diagnostics

    @staticmethod
    def _is_charset(token: Token) -> bool:
        # @charset only accepts double quotes.
        return at_keyword(token.text) == "charset"

    def _scss_literal(self, context: LintContext, literal: StringLiteral, target: str) -> Diagnostic:
        message = f"string should use {context.config.quote_style} quotes"
        body = literal.body
        if within_spans(body, target, delimited_spans(body, INTERPOLATION_DELIMITERS)):
            return context.diagnostic(
                self,
                literal.start,
                message,
                fix_failure_reason=(
                    "string interpolation contains the quote character; "
                    "escaping it would change the expression"
                ),
            )
        replacement = target + self.escape_css(body, target) + target
        return context.diagnostic(
            self,
            literal.start,
            message,
            edits=[TextEdit(literal.start, literal.end, replacement)],
            fix_description=f"Quote string with {target}",
        )

    @staticmethod
    def escape_css(body: str, quote: str) -> str:
        """Backslash-escape unescaped occurrences of quote in a string body."""
        out: list[str] = []
        index = 0
        while index < len(body):
            char = body[index]
            if char == "\\" and index + 1 < len(body):
                out.append(body[index:index + 2])
                index += 2
                continue
            if char == quote:
                out.append("\\")
            out.append(char)
            index += 1
        return "".join(out)
