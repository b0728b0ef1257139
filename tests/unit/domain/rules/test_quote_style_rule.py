"""Unit tests for quote-style in both dialects."""

import pytest

from markup_style_linter.domain.entities import Dialect
from markup_style_linter.domain.rules.quotes import QuoteStyleRule
from markup_style_linter.use_cases.apply_fixes import FixApplier


class TestHtmlQuotes:
    def test_single_quotes_become_double(self, lint_html) -> None:
        result = lint_html("<a href='/home'></a>")
        (finding,) = result.for_rule("quote-style")
        assert FixApplier.apply(result.text, [finding]) == '<a href="/home"></a>'

    def test_unquoted_value_gains_quotes(self, lint_html) -> None:
        result = lint_html("<a href=/home></a>")
        (finding,) = result.for_rule("quote-style")
        assert "should be quoted" in finding.message
        assert FixApplier.apply(result.text, [finding]) == '<a href="/home"></a>'

    def test_inner_quote_is_escaped_as_entity(self, lint_html) -> None:
        result = lint_html("<a title='say \"hi\"'></a>")
        (finding,) = result.for_rule("quote-style")
        assert FixApplier.apply(result.text, [finding]) == '<a title="say &quot;hi&quot;"></a>'

    def test_template_with_target_quote_is_refused(self, lint_html) -> None:
        (finding,) = lint_html("<a href='{{ url(\"home\") }}'></a>").for_rule("quote-style")
        assert not finding.fixable
        assert "template" in (finding.fix_failure_reason or "")

    def test_quote_outside_template_is_escaped(self, lint_with) -> None:
        result = lint_with("<a title=\"it's {{ name }}\"></a>", Dialect.HTML, quote_style="single")
        (finding,) = result.for_rule("quote-style")
        assert finding.fixable
        assert FixApplier.apply(result.text, [finding]) == "<a title='it&#39;s {{ name }}'></a>"

    def test_single_quote_config(self, lint_with) -> None:
        result = lint_with('<a href="/"></a>', Dialect.HTML, quote_style="single")
        (finding,) = result.for_rule("quote-style")
        assert FixApplier.apply(result.text, [finding]) == "<a href='/'></a>"

    def test_bare_and_conforming_attributes_are_clean(self, lint_html) -> None:
        assert lint_html('<input type="text" disabled/>').for_rule("quote-style") == []


class TestScssQuotes:
    def test_single_quoted_string(self, lint_scss) -> None:
        result = lint_scss(".a { content: 'x'; }")
        (finding,) = result.for_rule("quote-style")
        assert FixApplier.apply(result.text, [finding]) == '.a { content: "x"; }'

    def test_strings_in_selectors_and_at_rules(self, lint_scss) -> None:
        result = lint_scss("@import 'base';\na[href='x'] { top: 0; }")
        assert len(result.for_rule("quote-style")) == 2

    def test_charset_is_exempt(self, lint_with) -> None:
        result = lint_with('@charset "UTF-8";', Dialect.SCSS, quote_style="single")
        assert result.for_rule("quote-style") == []

    def test_interpolation_with_target_quote_is_refused(self, lint_scss) -> None:
        (finding,) = lint_scss(".a { content: 'a #{map-get($m, \"k\")}'; }").for_rule("quote-style")
        assert not finding.fixable

    def test_quote_outside_interpolation_is_escaped(self, lint_with) -> None:
        result = lint_with("a { content: \"it's #{$x}\"; }", Dialect.SCSS, quote_style="single")
        (finding,) = result.for_rule("quote-style")
        assert finding.fixable
        assert FixApplier.apply(result.text, [finding]) == "a { content: 'it\\'s #{$x}'; }"

    def test_comments_are_ignored(self, lint_scss) -> None:
        assert lint_scss("// it's fine\n/* 'x' */\n").for_rule("quote-style") == []


class TestEscapeCss:
    @pytest.mark.parametrize(
        ("body", "quote", "expected"),
        [
            ('say "hi"', '"', 'say \\"hi\\"'),
            ("it\\'s", '"', "it\\'s"),
            ('already \\"ok\\"', '"', 'already \\"ok\\"'),
        ],
    )
    def test_escape(self, body: str, quote: str, expected: str) -> None:
        assert QuoteStyleRule.escape_css(body, quote) == expected
